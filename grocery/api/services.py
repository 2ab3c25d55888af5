"""Service container and FastAPI dependencies.

Every SDK client lives in one Services object built at startup and stored on
app.state, so routes and tests never reach for module level singletons.
"""
from __future__ import annotations
import logging
from typing import Optional

import httpx
from fastapi import Depends, Header, HTTPException, Request

from grocery.events.Event_Bus import EventBus
from grocery.events.web_observers import NoticeFeed
from grocery.infra.Auth_Provider import (
    Accounts, Auth, FirebaseAccounts, InMemoryAccounts, auth_from_headers
)
from grocery.infra.Blob_Store import BlobStore, FirebaseBlobStore, InMemoryBlobStore
from grocery.infra.MealDb_Client import MealDbClient
from grocery.infra.Places_Client import PlacesClient
from grocery.infra.Remote_Store import InMemoryRemoteStore, RemoteStore
from grocery.logic.mutations.gateway import MutationGateway
from grocery.logic.sync.live_views import LiveViews
from grocery.utilities import config

logger = logging.getLogger(__name__)


class Services:
    def __init__(self, store: RemoteStore, blobs: BlobStore, accounts: Accounts, recipes: MealDbClient,
                 places: PlacesClient, bus: Optional[EventBus] = None, auth_mode: str = "dev",
                 firebase_app=None, snapshot_wait: float = config.SNAPSHOT_WAIT_SECONDS):
        self.store = store
        self.blobs = blobs
        self.accounts = accounts
        self.recipes = recipes
        self.places = places
        # Private bus per container keeps notices of parallel apps (tests) apart
        self.bus = bus or EventBus()
        self.auth_mode = auth_mode
        self.firebase_app = firebase_app
        self.notices = NoticeFeed()
        self.views = LiveViews(store, bus=self.bus, wait_seconds=snapshot_wait)

    def auth_for(self, authorization: Optional[str], user_header: Optional[str]) -> Auth:
        return auth_from_headers(self.auth_mode, authorization, user_header, app=self.firebase_app)

    def gateway(self, auth: Auth) -> MutationGateway:
        return MutationGateway(self.store, auth, bus=self.bus)

    def start(self):
        self.notices.start(self.bus)

    def close(self):
        self.views.close_all()
        self.notices.stop()
        self.store.close()
        self.blobs.close()
        self.recipes.close()
        self.places.close()


def build_memory_services(recipes_transport: Optional[httpx.BaseTransport] = None,
                          places_transport: Optional[httpx.BaseTransport] = None,
                          places_api_key: str = config.GOOGLE_MAPS_API_KEY,
                          snapshot_wait: float = 1.0) -> Services:
    """Everything in process; HTTP clients can be pointed at mock transports."""
    return Services(
        store=InMemoryRemoteStore(),
        blobs=InMemoryBlobStore(),
        accounts=InMemoryAccounts(),
        recipes=MealDbClient(transport=recipes_transport),
        places=PlacesClient(api_key=places_api_key, transport=places_transport),
        auth_mode="dev",
        snapshot_wait=snapshot_wait,
    )


def build_services() -> Services:
    """Services for the configured STORE_BACKEND and AUTH_MODE."""
    if config.STORE_BACKEND != "firebase":
        if config.AUTH_MODE == "firebase":
            logger.warning("AUTH_MODE=firebase needs STORE_BACKEND=firebase; using dev auth")
        logger.info("Using in-memory backends")
        return build_memory_services(snapshot_wait=config.SNAPSHOT_WAIT_SECONDS)

    # Imported here so the in-memory mode does not open Firebase connections
    from grocery.infra.Firebase_Store import FirebaseRemoteStore
    from grocery.infra.firebase_app import get_firebase_app

    app = get_firebase_app()
    logger.info("Using Firebase backends (auth mode %s)", config.AUTH_MODE)
    return Services(
        store=FirebaseRemoteStore(app=app, workers=config.STORE_WORKERS),
        blobs=FirebaseBlobStore(app=app, bucket_name=config.FIREBASE_STORAGE_BUCKET or None,
                                workers=config.STORE_WORKERS),
        accounts=FirebaseAccounts(app=app),
        recipes=MealDbClient(),
        places=PlacesClient(),
        auth_mode=config.AUTH_MODE,
        firebase_app=app,
    )


# --- FastAPI dependencies ---------------------------------------------------
def get_services(request: Request) -> Services:
    return request.app.state.services


def get_auth(services: Services = Depends(get_services),
             authorization: Optional[str] = Header(default=None),
             x_user_id: Optional[str] = Header(default=None)) -> Auth:
    return services.auth_for(authorization, x_user_id)


def require_user(auth: Auth = Depends(get_auth)) -> str:
    """User id for reads; 401 when nobody is signed in."""
    user_id = auth.current_user_id()
    if user_id is None:
        raise HTTPException(status_code=401, detail="Please log in first")
    return user_id


__all__ = [
    'Services', 'build_services', 'build_memory_services',
    'get_services', 'get_auth', 'require_user',
]
