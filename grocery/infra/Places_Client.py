"""Google Places API (New) nearby search client."""
import logging
from typing import List, Optional, Sequence

import httpx

from grocery.domain.Place import LatLng, Place
from grocery.utilities import config
from grocery.utilities.constants import GROCERY_PLACE_TYPES, PLACES_FIELD_MASK
from grocery.utilities.errors import ConfigurationError, PlacesApiError

logger = logging.getLogger(__name__)


class PlacesClient:
    def __init__(self, api_key: str = config.GOOGLE_MAPS_API_KEY, base_url: str = config.PLACES_BASE_URL,
                 timeout: float = config.HTTP_TIMEOUT, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        if not base_url.endswith('/'):
            base_url += '/'
        self.base_url = base_url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self):
        self._client.close()

    def search_nearby(self, center: LatLng, radius_m: float,
                      included_types: Sequence[str] = GROCERY_PLACE_TYPES,
                      max_results: int = 20) -> List[Place]:
        """Places around center within radius_m metres, in the order the API ranks them."""
        if not self.api_key or self.api_key == "YOUR_API_KEY_HERE":
            raise ConfigurationError("Google Maps API Key is missing")
        payload = {
            "includedTypes": list(included_types),
            "maxResultCount": max_results,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": center.latitude, "longitude": center.longitude},
                    "radius": radius_m,
                }
            },
        }
        headers = {"X-Goog-Api-Key": self.api_key, "X-Goog-FieldMask": PLACES_FIELD_MASK}
        try:
            response = self._client.post(self.base_url + "places:searchNearby", json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Places request failed: %s", e)
            raise PlacesApiError(f"Places API unreachable: {e}") from e
        if response.status_code != 200:
            logger.error("Places API answered %s: %s", response.status_code, response.text[:200])
            raise PlacesApiError(f"Places API answered {response.status_code}", response.status_code)
        try:
            body = response.json()
        except ValueError as e:
            raise PlacesApiError("Places API returned invalid JSON") from e

        places = []
        for entry in body.get("places", []) if isinstance(body, dict) else []:
            try:
                places.append(Place.from_api(entry))
            except ValueError as e:
                logger.warning("Skipping place without name/location: %s", e)
        return places


__all__ = ['PlacesClient']
