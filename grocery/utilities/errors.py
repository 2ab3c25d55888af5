"""Exception hierarchy shared by the infra and logic layers."""


class GroceryError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(GroceryError):
    """A required setting (API key, credentials, bucket) is missing."""


class AuthError(GroceryError):
    """Token verification or account creation failed."""


class RemoteStoreError(GroceryError):
    """A write, delete or subscription against the remote store failed."""


class BlobStoreError(GroceryError):
    """An upload to the blob store failed."""


class RecipeApiError(GroceryError):
    """The recipe API could not be reached or returned an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class PlacesApiError(GroceryError):
    """The places API could not be reached or returned an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    'GroceryError', 'ConfigurationError', 'AuthError', 'RemoteStoreError',
    'BlobStoreError', 'RecipeApiError', 'PlacesApiError',
]
