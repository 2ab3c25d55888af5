"""Firebase Admin SDK bootstrap shared by the database, storage and auth backends."""
import logging

import firebase_admin
from firebase_admin import credentials

from grocery.utilities import config
from grocery.utilities.errors import ConfigurationError

logger = logging.getLogger(__name__)


def get_firebase_app(credentials_path: str = "", database_url: str = "", storage_bucket: str = ""):
    """Return the default Firebase app, initializing it once."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    credentials_path = credentials_path or config.FIREBASE_CREDENTIALS
    database_url = database_url or config.FIREBASE_DATABASE_URL
    storage_bucket = storage_bucket or config.FIREBASE_STORAGE_BUCKET
    if not database_url:
        raise ConfigurationError("FIREBASE_DATABASE_URL is not configured")

    options = {"databaseURL": database_url}
    if storage_bucket:
        options["storageBucket"] = storage_bucket
    if credentials_path:
        cred = credentials.Certificate(credentials_path)
    else:
        # Falls back to GOOGLE_APPLICATION_CREDENTIALS / metadata server
        cred = credentials.ApplicationDefault()
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized for %s", database_url)
    return app
