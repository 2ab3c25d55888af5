import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from grocery.api.services import Services, get_auth, get_services, require_user
from grocery.domain.GroceryList import GroceryList
from grocery.infra import paths
from grocery.infra.Auth_Provider import Auth
from grocery.logic.mutations.gateway import MutationTicket
from grocery.logic.sync.channel import SnapshotChannel
from grocery.logic.sync.materializer import materialize
from grocery.utilities.constants import NOTICE_LOGIN_REQUIRED
from grocery.utilities.validators import NameInput

router = APIRouter(prefix="/api/lists", tags=["lists"])
logger = logging.getLogger(__name__)


def ticket_response(ticket: MutationTicket):
    """202 for an accepted write, 401/400 with the notice text when rejected."""
    if not ticket.accepted:
        status = 401 if ticket.notice == NOTICE_LOGIN_REQUIRED else 400
        raise HTTPException(status_code=status, detail=ticket.notice)
    return {"accepted": True, "id": ticket.entity_id}


def view_state(view):
    return {
        "revision": view.revision,
        "error": str(view.last_error) if view.last_error is not None else None,
    }


@router.get("")
def get_lists(user_id: str = Depends(require_user), services: Services = Depends(get_services)):
    view = services.views.lists(user_id)
    return {"lists": [gl.to_dict() for gl in view.items], **view_state(view)}


@router.post("", status_code=202)
def create_list(body: NameInput, auth: Auth = Depends(get_auth), services: Services = Depends(get_services)):
    return ticket_response(services.gateway(auth).create_list(body.name))


@router.get("/stream")
async def stream_lists(request: Request, user_id: str = Depends(require_user),
                       services: Services = Depends(get_services)):
    """Server-sent events: one 'lists' event per snapshot, 'sync_error' on subscription errors."""
    channel = SnapshotChannel(services.store, paths.lists_path(user_id))

    async def events():
        async with channel:
            async for event in channel:
                if await request.is_disconnected():
                    break
                if event.ok:
                    lists = [gl.to_dict() for gl in materialize(event.snapshot, GroceryList.from_dict)]
                    yield f"event: lists\ndata: {json.dumps(lists)}\n\n"
                else:
                    yield f"event: sync_error\ndata: {json.dumps({'error': str(event.error)})}\n\n"
        logger.info("List stream for %s closed", user_id)

    return StreamingResponse(events(), media_type="text/event-stream",
                             headers={"Cache-Control": "no-cache"})


@router.delete("/{list_id}", status_code=202)
def delete_list(list_id: str, auth: Auth = Depends(get_auth), user_id: str = Depends(require_user),
                services: Services = Depends(get_services)):
    grocery_list = services.views.lists(user_id).find(list_id)
    if grocery_list is None:
        raise HTTPException(status_code=404, detail="List not found")
    ticket = services.gateway(auth).delete_list(grocery_list)
    if ticket.accepted:
        def release(future):
            if future.exception() is None:
                services.views.release_list(user_id, list_id)
        ticket.future.add_done_callback(release)
    return ticket_response(ticket)
