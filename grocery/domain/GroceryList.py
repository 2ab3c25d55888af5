"""GroceryList domain entity: store-assigned id, display name, creation timestamp."""
from typing import Any, Optional


class GroceryList:
    def __init__(self, id: str = "", name: str = "", timestamp: Optional[int] = None):
        self.id = id
        self.name = name
        # Epoch milliseconds; absent on records written without it
        self.timestamp = timestamp

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, GroceryList):
            return NotImplemented
        return (self.id, self.name, self.timestamp) == (other.id, other.name, other.timestamp)

    @staticmethod
    def from_dict(data: Any, key: str = ""):
        '''Decode a stored record. Raises ValueError when the record is unusable.'''
        if not isinstance(data, dict):
            raise ValueError(f"grocery list {key!r} is not an object")
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError(f"grocery list {key!r} has no name")
        list_id = data.get("id") or key
        if not isinstance(list_id, str) or not list_id:
            raise ValueError(f"grocery list {key!r} has no id")
        timestamp = data.get("timestamp")
        if timestamp is not None and not isinstance(timestamp, (int, float)):
            timestamp = None
        return GroceryList(list_id, name, int(timestamp) if timestamp is not None else None)

    def to_dict(self):
        '''Full record as written to the store.'''
        record = {"id": self.id, "name": self.name}
        if self.timestamp is not None:
            record["timestamp"] = self.timestamp
        return record
