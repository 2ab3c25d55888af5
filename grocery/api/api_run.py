from fastapi import (
    FastAPI,
    Depends,
    Query,
)
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from grocery.api.services import Services, build_services, get_services, require_user
from grocery.utilities.errors import GroceryError

# Routers
from grocery.api.routes import auth, items, lists, recipes, stores

# Logging
logger = logging.getLogger("grocery_app")


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the API. Without services the configured backends are built on startup."""
    app = FastAPI(title="Recipe Grocery Helper API")
    app.state.services = None

    if services is not None:
        app.state.services = services
        services.start()

    # Include routers
    app.include_router(lists.router)
    app.include_router(items.router)
    app.include_router(recipes.router)
    app.include_router(stores.router)
    app.include_router(auth.router)

    @app.on_event("startup")
    def _startup_services():
        """Build backends and register the notice feed on the event bus."""
        if app.state.services is None:
            app.state.services = build_services()
            app.state.services.start()
        logger.info("Grocery services started")

    @app.on_event("shutdown")
    def _shutdown_services():
        if app.state.services is not None:
            app.state.services.close()
            logger.info("Grocery services closed")

    @app.exception_handler(GroceryError)
    def _grocery_error(request, exc: GroceryError):
        # Errors a route did not translate itself
        logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    # -------------------- API: Notices --------------------
    @app.get('/api/notices')
    def get_notices(
        since: Optional[int] = Query(default=None, description="Return notices with id greater than this value"),
        user_id: str = Depends(require_user),
        services: Services = Depends(get_services),
    ):
        """Poll user-visible notices.

        1. First call without 'since' returns the buffered backlog.
        2. Keep next_cursor from the response.
        3. Subsequent polls: /api/notices?since=<next_cursor>
        """
        return services.notices.get_events(user_id, since)

    # -------------------- API: Session --------------------
    @app.delete('/api/session/views')
    def release_views(user_id: str = Depends(require_user), services: Services = Depends(get_services)):
        """Release every live view the caller holds (screen teardown)."""
        released = services.views.release(user_id)
        logger.info("Released %d live views of %s", released, user_id)
        return {"released": released}

    return app


app = create_app()
