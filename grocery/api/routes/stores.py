import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from grocery.api.services import Services, get_auth, get_services
from grocery.domain.Place import LatLng
from grocery.infra.Auth_Provider import Auth
from grocery.logic.stores.nearby import find_nearby_stores
from grocery.utilities import config
from grocery.utilities.errors import ConfigurationError, PlacesApiError
from grocery.utilities.validators import NearbyQuery

router = APIRouter(prefix="/api/stores", tags=["stores"])
logger = logging.getLogger(__name__)


@router.get("/nearby")
def nearby_stores(lat: Optional[float] = Query(default=None), lng: Optional[float] = Query(default=None),
                  radius: float = Query(default=config.NEARBY_RADIUS_M),
                  auth: Auth = Depends(get_auth), services: Services = Depends(get_services)):
    """Grocery stores around (lat, lng). Without coordinates the result is empty and a notice is posted."""
    user_id = auth.current_user_id()
    location = None
    if lat is not None and lng is not None:
        try:
            query = NearbyQuery(lat=lat, lng=lng, radius=radius, max_results=config.NEARBY_MAX_RESULTS)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=e.errors()[0].get("msg", "Invalid location"))
        location = LatLng(query.lat, query.lng)
        radius = query.radius

    try:
        stores = find_nearby_stores(services.places, location, radius, user_id=user_id,
                                    max_results=config.NEARBY_MAX_RESULTS, bus=services.bus)
    except ConfigurationError as e:
        logger.error("Nearby search unavailable: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
    except PlacesApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {
        "center": {"lat": location.latitude, "lng": location.longitude} if location else None,
        "stores": [s.to_dict() for s in stores],
    }
