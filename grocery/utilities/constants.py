from typing import Final

# Store layout segments
USERS_NODE: Final[str] = "users"
LISTS_NODE: Final[str] = "groceryLists"
ITEMS_NODE: Final[str] = "items"
IMAGES_NODE: Final[str] = "images"

IMAGE_CONTENT_TYPE: Final[str] = "image/jpeg"
IMAGE_SUFFIX: Final[str] = ".jpg"
MAX_NAME_LENGTH: Final[int] = 100
DEFAULT_RECIPE_LETTER: Final[str] = "a"

# Substrings (lower case) marking an ingredient as harder to find
HARDER_INGREDIENTS: Final[frozenset[str]] = frozenset({
    "pepperoni", "saffron", "truffle", "anchovy", "anchovies", "tahini",
    "miso", "gochujang", "harissa", "lemongrass", "galangal", "kaffir",
    "fish sauce", "tamarind", "sumac", "za'atar", "mascarpone", "gruyere",
    "gruyère", "pancetta", "prosciutto", "chorizo", "capers", "fennel",
    "shallots", "star anise", "cardamom", "mirin", "sake", "dashi",
    "nori", "wasabi", "ghee", "paneer", "asafoetida", "quinoa",
})
SIMPLE_GROUP_LABEL: Final[str] = "Simple ingredients:"
HARDER_GROUP_LABEL: Final[str] = "Harder to find ingredients:"
BULLET: Final[str] = "•"

# Places types counted as grocery stores
GROCERY_PLACE_TYPES: Final[tuple[str, ...]] = ("grocery_store", "supermarket")
PLACES_FIELD_MASK: Final[str] = (
    "places.displayName,places.location,places.formattedAddress,places.types"
)

# User-visible notices
NOTICE_LIST_NAME_REQUIRED: Final[str] = "Please enter a list name"
NOTICE_ITEM_NAME_REQUIRED: Final[str] = "Please enter an item name"
NOTICE_LOGIN_REQUIRED: Final[str] = "Please log in first"
NOTICE_FIELDS_REQUIRED: Final[str] = "Please fill in all fields"
NOTICE_LIST_ADDED: Final[str] = "List added: {name}"
NOTICE_LIST_ADD_FAILED: Final[str] = "Failed to add list"
NOTICE_LIST_DELETED: Final[str] = "List deleted"
NOTICE_LIST_DELETE_FAILED: Final[str] = "Failed to delete list"
NOTICE_ITEM_ADDED: Final[str] = "Item added: {name}"
NOTICE_ITEM_ADD_FAILED: Final[str] = "Failed to add item"
NOTICE_ITEM_RENAMED: Final[str] = "Item renamed"
NOTICE_ITEM_RENAME_FAILED: Final[str] = "Failed to rename item"
NOTICE_ITEM_DELETED: Final[str] = "Item deleted"
NOTICE_ITEM_DELETE_FAILED: Final[str] = "Failed to delete item"
NOTICE_KEY_FAILED: Final[str] = "Could not generate a new id"
NOTICE_LOAD_FAILED: Final[str] = "Failed to load {what}: {reason}"
NOTICE_CAMERA_DENIED: Final[str] = "Camera Permission Denied"
NOTICE_CAPTURE_CANCELLED: Final[str] = "Photo capture cancelled"
NOTICE_PHOTO_NAME_REQUIRED: Final[str] = "Please enter an item name before taking a photo"
NOTICE_UPLOAD_FAILED: Final[str] = "Image upload failed: {reason}"
NOTICE_NO_LOCATION: Final[str] = "Could not get location. Make sure location is enabled on the device."
NOTICE_NO_STORES: Final[str] = "No nearby grocery stores found."
NOTICE_SIGNUP_OK: Final[str] = "Sign up successful! Please log in."
NOTICE_SIGNUP_FAILED: Final[str] = "Sign up failed: {reason}"
