"""Place domain entity: a nearby store returned by the places API."""
from typing import List, NamedTuple, Optional


class LatLng(NamedTuple):
    latitude: float
    longitude: float


class Place:
    def __init__(self, name: str = "", lat_lng: Optional[LatLng] = None, address: Optional[str] = None,
                 types: Optional[List[str]] = None):
        self.name = name
        self.lat_lng = lat_lng
        self.address = address
        self.types = types[:] if types else []

    def __str__(self) -> str:
        return f"{self.name} @ {self.lat_lng}"

    __repr__ = __str__

    def is_any_type(self, wanted) -> bool:
        return any(t in wanted for t in self.types)

    @staticmethod
    def from_api(data: dict):
        '''Decode one Places API (New) result. Raises ValueError when name or location is missing.'''
        if not isinstance(data, dict):
            raise ValueError("place record is not an object")
        display = data.get("displayName") or {}
        name = display.get("text") if isinstance(display, dict) else display
        location = data.get("location") or {}
        try:
            lat_lng = LatLng(float(location["latitude"]), float(location["longitude"]))
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"place {name!r} has no location")
        if not isinstance(name, str) or not name:
            raise ValueError("place has no name")
        return Place(name, lat_lng, data.get("formattedAddress"), list(data.get("types") or []))

    def to_dict(self):
        return {
            "name": self.name,
            "lat": self.lat_lng.latitude if self.lat_lng else None,
            "lng": self.lat_lng.longitude if self.lat_lng else None,
            "address": self.address,
            "types": self.types,
        }
