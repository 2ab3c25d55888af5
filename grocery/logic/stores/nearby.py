"""Nearby grocery store lookup around the user's location."""
import logging
from typing import List, Optional

from grocery.domain.Place import LatLng, Place
from grocery.events.Event_Bus import EventBus
from grocery.events.event_helpers import publish_notice
from grocery.infra.Places_Client import PlacesClient
from grocery.utilities.constants import GROCERY_PLACE_TYPES, NOTICE_NO_LOCATION, NOTICE_NO_STORES

logger = logging.getLogger(__name__)


def find_nearby_stores(client: PlacesClient, location: Optional[LatLng], radius_m: float, *,
                       user_id: Optional[str] = None, max_results: int = 20,
                       bus: Optional[EventBus] = None) -> List[Place]:
    """Grocery stores within radius_m of location, in API ranking order.

    A missing location or an empty result is reported as a notice and gives [].
    ConfigurationError and PlacesApiError from the client propagate.
    """
    if location is None:
        logger.warning("Nearby search without a location")
        publish_notice(user_id, NOTICE_NO_LOCATION, "error", bus=bus)
        return []

    places = client.search_nearby(location, radius_m, GROCERY_PLACE_TYPES, max_results)
    # includedTypes is a hint to the API; keep only places that really are grocery stores
    stores = [p for p in places if p.is_any_type(GROCERY_PLACE_TYPES)]
    logger.info("Nearby search at %s: %d places, %d grocery stores", location, len(places), len(stores))
    if not stores:
        publish_notice(user_id, NOTICE_NO_STORES, bus=bus)
    return stores


__all__ = ['find_nearby_stores']
