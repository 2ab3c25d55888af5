"""
Input validation schemas using Pydantic for request bodies.

Names are only stripped here; emptiness is reported by the mutation gateway so
that the user gets the same notice whichever entry point was used.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from grocery.utilities.constants import MAX_NAME_LENGTH


def clean_name(value) -> Optional[str]:
    """Return the trimmed name, or None when nothing usable is left."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class NameInput(BaseModel):
    """Body for creating a list or an item, and for renaming an item."""
    name: str = Field("", max_length=MAX_NAME_LENGTH)

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class ItemInput(NameInput):
    """Schema for a new grocery item (photo URL is optional)."""
    image_url: str = Field("", alias="imageUrl")

    model_config = {"populate_by_name": True}


class SignUpInput(BaseModel):
    """Schema for account creation."""
    email: str = Field("", max_length=254)
    password: str = Field("", max_length=128)

    @field_validator('email', 'password')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class NearbyQuery(BaseModel):
    """Schema for a nearby store search."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    radius: float = Field(..., gt=0, le=50000)
    max_results: int = Field(20, ge=1, le=20)
