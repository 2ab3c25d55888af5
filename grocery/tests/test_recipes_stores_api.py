import unittest

import httpx
from fastapi.testclient import TestClient

from grocery.api.api_run import create_app
from grocery.api.services import build_memory_services

PIZZA = {
    "idMeal": "53014", "strMeal": "Pizza Express Margherita", "strInstructions": "Bake.",
    "strMealThumb": "https://img/pizza.jpg", "strCategory": "Miscellaneous", "strArea": "Italian",
    "strIngredient1": "Pepperoni", "strMeasure1": "50g",
    "strIngredient2": "Lettuce", "strMeasure2": "1 head",
}


def mealdb(request):
    endpoint = request.url.path.rsplit('/', 1)[-1]
    params = dict(request.url.params)
    if endpoint == "lookup.php":
        return httpx.Response(200, json={"meals": [PIZZA] if params["i"] == "53014" else None})
    if endpoint == "search.php" and params.get("s") == "boom":
        return httpx.Response(503)
    return httpx.Response(200, json={"meals": [PIZZA]})


def places(request):
    return httpx.Response(200, json={"places": [
        {"displayName": {"text": "Fresh Market"}, "location": {"latitude": 44.43, "longitude": 26.1},
         "formattedAddress": "1 Main St", "types": ["grocery_store"]},
    ]})


class TestRecipesAPI(unittest.TestCase):

    def setUp(self):
        self.requests = []

        def recording(request):
            self.requests.append(request)
            return mealdb(request)

        self.client = TestClient(create_app(build_memory_services(
            recipes_transport=httpx.MockTransport(recording))))

    def test_default_listing_is_letter_a(self):
        resp = self.client.get('/api/recipes')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['recipes'][0]['name'], "Pizza Express Margherita")
        self.assertEqual(dict(self.requests[0].url.params), {"f": "a"})

    def test_search_and_filter(self):
        self.client.get('/api/recipes', params={"q": "pizza"})
        self.client.get('/api/recipes', params={"ingredient": "chicken"})
        self.assertEqual([dict(r.url.params) for r in self.requests], [{"s": "pizza"}, {"i": "chicken"}])

    def test_detail_groups_ingredients(self):
        data = self.client.get('/api/recipes/53014').json()
        self.assertEqual(data['simple'], ["Lettuce"])
        self.assertEqual(data['harder'], ["Pepperoni"])
        self.assertEqual(data['ingredient_groups'],
                         "Simple ingredients:\n• Lettuce\n\nHarder to find ingredients:\n• Pepperoni")
        self.assertEqual(data['ingredient_lines'], "• Pepperoni (50g)\n• Lettuce (1 head)")

    def test_unknown_recipe(self):
        self.assertEqual(self.client.get('/api/recipes/1').status_code, 404)

    def test_upstream_failure(self):
        self.assertEqual(self.client.get('/api/recipes', params={"q": "boom"}).status_code, 502)

    def test_bad_letter(self):
        self.assertEqual(self.client.get('/api/recipes', params={"letter": "ab"}).status_code, 400)


class TestNearbyStoresAPI(unittest.TestCase):

    def app(self, api_key="test-key"):
        services = build_memory_services(places_transport=httpx.MockTransport(places), places_api_key=api_key)
        return TestClient(create_app(services))

    def test_nearby(self):
        resp = self.app().get('/api/stores/nearby', params={"lat": 44.43, "lng": 26.1, "radius": 1000})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['center'], {"lat": 44.43, "lng": 26.1})
        self.assertEqual([s['name'] for s in data['stores']], ["Fresh Market"])

    def test_without_location_posts_notice(self):
        client = self.app()
        resp = client.get('/api/stores/nearby', headers={"X-User-Id": "u1"})
        self.assertEqual(resp.json(), {"center": None, "stores": []})
        notices = client.get('/api/notices', headers={"X-User-Id": "u1"}).json()['events']
        self.assertEqual(notices[0]['message'],
                         "Could not get location. Make sure location is enabled on the device.")

    def test_missing_api_key(self):
        resp = self.app(api_key="").get('/api/stores/nearby', params={"lat": 1, "lng": 2})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()['detail'], "Google Maps API Key is missing")

    def test_invalid_coordinates(self):
        resp = self.app().get('/api/stores/nearby', params={"lat": 120, "lng": 2})
        self.assertEqual(resp.status_code, 400)


if __name__ == '__main__':
    unittest.main()
