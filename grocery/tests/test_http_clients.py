import json
import unittest

import httpx

from grocery.domain.Place import LatLng
from grocery.events.Event_Bus import EventBus, NOTICE
from grocery.infra.MealDb_Client import MealDbClient
from grocery.infra.Places_Client import PlacesClient
from grocery.logic.stores.nearby import find_nearby_stores
from grocery.utilities.errors import ConfigurationError, PlacesApiError, RecipeApiError

MEAL = {"idMeal": "1", "strMeal": "Apple Frangipan Tart", "strInstructions": "Bake.",
        "strMealThumb": "https://img/1.jpg", "strIngredient1": "Apples", "strMeasure1": "3"}


class TestMealDbClient(unittest.TestCase):

    def setUp(self):
        self.requests = []

    def client(self, handler):
        def record(request):
            self.requests.append(request)
            return handler(request)
        return MealDbClient(base_url="https://mealdb.test/api/json/v1/1", transport=httpx.MockTransport(record))

    def test_endpoints(self):
        client = self.client(lambda r: httpx.Response(200, json={"meals": [MEAL]}))
        self.assertEqual(client.search_by_name("tart")[0].name, "Apple Frangipan Tart")
        client.filter_by_ingredient("chicken_breast")
        self.assertEqual(client.lookup_by_id("1").id, "1")
        client.list_by_first_letter("A")
        seen = [(r.url.path.rsplit('/', 1)[-1], dict(r.url.params)) for r in self.requests]
        self.assertEqual(seen, [
            ("search.php", {"s": "tart"}),
            ("filter.php", {"i": "chicken_breast"}),
            ("lookup.php", {"i": "1"}),
            ("search.php", {"f": "a"}),
        ])

    def test_null_meals_is_empty(self):
        client = self.client(lambda r: httpx.Response(200, json={"meals": None}))
        self.assertEqual(client.search_by_name("zzz"), [])
        self.assertIsNone(client.lookup_by_id("404"))

    def test_http_error_raises(self):
        client = self.client(lambda r: httpx.Response(500, text="boom"))
        with self.assertRaises(RecipeApiError) as ctx:
            client.search_by_name("tart")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_invalid_json_raises(self):
        client = self.client(lambda r: httpx.Response(200, text="<html>"))
        with self.assertRaises(RecipeApiError):
            client.search_by_name("tart")

    def test_transport_error_raises(self):
        def down(request):
            raise httpx.ConnectError("unreachable", request=request)
        with self.assertRaises(RecipeApiError):
            self.client(down).search_by_name("tart")

    def test_letter_must_be_single(self):
        client = self.client(lambda r: httpx.Response(200, json={"meals": None}))
        with self.assertRaises(ValueError):
            client.list_by_first_letter("ab")


def place(name, types, lat=44.4, lng=26.1):
    return {"displayName": {"text": name}, "location": {"latitude": lat, "longitude": lng},
            "formattedAddress": f"{name} street", "types": types}


class TestNearbyStores(unittest.TestCase):

    def setUp(self):
        self.requests = []
        self.bus = EventBus()
        self.notices = []
        self.bus.subscribe(NOTICE, lambda n, p: self.notices.append(p['message']))

    def client(self, body, status=200, api_key="test-key"):
        def handler(request):
            self.requests.append(request)
            return httpx.Response(status, json=body)
        return PlacesClient(api_key=api_key, base_url="https://places.test/v1",
                            transport=httpx.MockTransport(handler))

    def test_request_shape_and_type_filter(self):
        client = self.client({"places": [
            place("Fresh Market", ["grocery_store", "store"]),
            place("Gas & Go", ["gas_station"]),
            place("MegaMart", ["supermarket"]),
            {"displayName": {"text": "Broken"}},
        ]})
        stores = find_nearby_stores(client, LatLng(44.4, 26.1), 1500, user_id="u1", bus=self.bus)
        self.assertEqual([s.name for s in stores], ["Fresh Market", "MegaMart"])

        request = self.requests[0]
        self.assertTrue(str(request.url).endswith("/v1/places:searchNearby"))
        self.assertEqual(request.headers["X-Goog-Api-Key"], "test-key")
        self.assertIn("places.location", request.headers["X-Goog-FieldMask"])
        body = json.loads(request.content)
        self.assertEqual(body["includedTypes"], ["grocery_store", "supermarket"])
        self.assertEqual(body["locationRestriction"]["circle"]["radius"], 1500)
        self.assertEqual(self.notices, [])

    def test_no_location(self):
        client = self.client({"places": []})
        self.assertEqual(find_nearby_stores(client, None, 1500, user_id="u1", bus=self.bus), [])
        self.assertEqual(self.requests, [])
        self.assertEqual(self.notices, ["Could not get location. Make sure location is enabled on the device."])

    def test_no_stores(self):
        client = self.client({})
        self.assertEqual(find_nearby_stores(client, LatLng(0, 0), 500, bus=self.bus), [])
        self.assertEqual(self.notices, ["No nearby grocery stores found."])

    def test_missing_key(self):
        client = self.client({"places": []}, api_key="")
        with self.assertRaises(ConfigurationError):
            find_nearby_stores(client, LatLng(0, 0), 500, bus=self.bus)
        self.assertEqual(self.requests, [])

    def test_api_error(self):
        client = self.client({"error": {"message": "denied"}}, status=403)
        with self.assertRaises(PlacesApiError) as ctx:
            client.search_nearby(LatLng(0, 0), 500)
        self.assertEqual(ctx.exception.status_code, 403)


if __name__ == '__main__':
    unittest.main()
