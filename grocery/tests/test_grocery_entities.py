import unittest
from grocery.domain.GroceryList import GroceryList
from grocery.domain.GroceryItem import GroceryItem
from grocery.domain.Place import LatLng, Place


class TestGroceryList(unittest.TestCase):

    def test_from_dict_reads_record(self):
        gl = GroceryList.from_dict({"id": "L1", "name": "Weekly", "timestamp": 1700000000000}, "L1")
        self.assertEqual(gl.id, "L1")
        self.assertEqual(gl.name, "Weekly")
        self.assertEqual(gl.timestamp, 1700000000000)

    def test_missing_id_falls_back_to_key_and_timestamp_is_optional(self):
        gl = GroceryList.from_dict({"name": "Party"}, "K9")
        self.assertEqual(gl.id, "K9")
        self.assertIsNone(gl.timestamp)
        self.assertEqual(gl.to_dict(), {"id": "K9", "name": "Party"})

    def test_unusable_records_raise(self):
        for bad in ("just a string", {"id": "x"}, {"name": 5}, None):
            with self.assertRaises(ValueError):
                GroceryList.from_dict(bad, "k")
        with self.assertRaises(ValueError):
            GroceryList.from_dict({"name": "No id"}, "")


class TestGroceryItem(unittest.TestCase):

    def test_wire_format_uses_image_url_key(self):
        item = GroceryItem("I1", "Milk", "https://img/1.jpg")
        self.assertEqual(item.to_dict(), {"id": "I1", "name": "Milk", "imageUrl": "https://img/1.jpg"})
        self.assertEqual(GroceryItem.from_dict(item.to_dict(), "I1"), item)

    def test_image_url_defaults_to_empty(self):
        item = GroceryItem.from_dict({"id": "I2", "name": "Eggs"}, "I2")
        self.assertEqual(item.image_url, "")
        self.assertFalse(item.has_photo)

    def test_renamed_keeps_id_and_photo(self):
        item = GroceryItem("I3", "Bred", "https://img/3.jpg")
        renamed = item.renamed("Bread")
        self.assertEqual((renamed.id, renamed.name, renamed.image_url), ("I3", "Bread", "https://img/3.jpg"))
        self.assertEqual(item.name, "Bred")


class TestPlace(unittest.TestCase):

    def test_from_api(self):
        place = Place.from_api({
            "displayName": {"text": "Corner Market"},
            "location": {"latitude": 44.43, "longitude": 26.1},
            "formattedAddress": "1 Main St",
            "types": ["grocery_store", "store"],
        })
        self.assertEqual(place.name, "Corner Market")
        self.assertEqual(place.lat_lng, LatLng(44.43, 26.1))
        self.assertTrue(place.is_any_type(("supermarket", "grocery_store")))

    def test_place_without_location_is_rejected(self):
        with self.assertRaises(ValueError):
            Place.from_api({"displayName": {"text": "Nowhere"}})


if __name__ == '__main__':
    unittest.main()
