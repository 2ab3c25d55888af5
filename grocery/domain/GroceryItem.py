"""GroceryItem domain entity: id, name and an optional photo download URL."""
from typing import Any


class GroceryItem:
    def __init__(self, id: str = "", name: str = "", image_url: str = ""):
        self.id = id
        self.name = name
        self.image_url = image_url or ""

    @property
    def has_photo(self) -> bool:
        return bool(self.image_url)

    def renamed(self, new_name: str) -> "GroceryItem":
        '''Copy with a new name; id and photo are kept.'''
        return GroceryItem(self.id, new_name, self.image_url)

    def __str__(self) -> str:
        photo = " [photo]" if self.has_photo else ""
        return f"{self.name}{photo} ({self.id})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, GroceryItem):
            return NotImplemented
        return (self.id, self.name, self.image_url) == (other.id, other.name, other.image_url)

    @staticmethod
    def from_dict(data: Any, key: str = ""):
        '''Decode a stored record ("imageUrl" on the wire). Raises ValueError when unusable.'''
        if not isinstance(data, dict):
            raise ValueError(f"grocery item {key!r} is not an object")
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError(f"grocery item {key!r} has no name")
        item_id = data.get("id") or key
        if not isinstance(item_id, str) or not item_id:
            raise ValueError(f"grocery item {key!r} has no id")
        image_url = data.get("imageUrl", "")
        if not isinstance(image_url, str):
            image_url = ""
        return GroceryItem(item_id, name, image_url)

    def to_dict(self):
        '''Full record as written to the store.'''
        return {"id": self.id, "name": self.name, "imageUrl": self.image_url}
