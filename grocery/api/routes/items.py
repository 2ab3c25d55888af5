import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from grocery.api.routes.lists import ticket_response, view_state
from grocery.api.services import Services, get_auth, get_services, require_user
from grocery.infra.Auth_Provider import Auth
from grocery.logic.photos.workflow import PhotoAttachWorkflow, PhotoState
from grocery.utilities.constants import NOTICE_LOGIN_REQUIRED, NOTICE_UPLOAD_FAILED
from grocery.utilities.validators import ItemInput, NameInput

router = APIRouter(prefix="/api/lists/{list_id}/items", tags=["items"])
logger = logging.getLogger(__name__)


def _existing_list(services: Services, user_id: str, list_id: str):
    grocery_list = services.views.lists(user_id).find(list_id)
    if grocery_list is None:
        raise HTTPException(status_code=404, detail="List not found")
    return grocery_list


def _existing_item(services: Services, user_id: str, list_id: str, item_id: str):
    _existing_list(services, user_id, list_id)
    item = services.views.items(user_id, list_id).find(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.get("")
def get_items(list_id: str, user_id: str = Depends(require_user), services: Services = Depends(get_services)):
    _existing_list(services, user_id, list_id)
    view = services.views.items(user_id, list_id)
    return {"list_id": list_id, "items": [i.to_dict() for i in view.items], **view_state(view)}


@router.post("", status_code=202)
def create_item(list_id: str, body: ItemInput, auth: Auth = Depends(get_auth),
                user_id: str = Depends(require_user), services: Services = Depends(get_services)):
    _existing_list(services, user_id, list_id)
    return ticket_response(services.gateway(auth).create_item(list_id, body.name, body.image_url))


@router.post("/photo")
def create_item_with_photo(list_id: str, name: str = Form(""), image: UploadFile = File(None),
                           auth: Auth = Depends(get_auth), user_id: str = Depends(require_user),
                           services: Services = Depends(get_services)):
    """Upload a photo and add the item carrying its download URL.

    A request without an image counts as a cancelled capture.
    """
    _existing_list(services, user_id, list_id)
    workflow = PhotoAttachWorkflow(services.gateway(auth), services.blobs, list_id)
    workflow.begin()
    # The client already had camera access when it sent the image
    workflow.permission_result(True)
    data = image.file.read() if image is not None else b""
    workflow.capture_result(bool(data), name, image_bytes=data or None)
    state = workflow.wait(services.views.wait_seconds)
    workflow.dispose()

    if state is PhotoState.UPLOADING:
        raise HTTPException(status_code=504, detail="Image upload timed out")
    if state is not PhotoState.UPLOADED_AND_SAVED:
        detail = workflow.last_error or "Photo was not saved"
        if detail == NOTICE_LOGIN_REQUIRED:
            status = 401
        elif detail.startswith(NOTICE_UPLOAD_FAILED.split("{")[0]):
            status = 502
        else:
            status = 400
        raise HTTPException(status_code=status, detail=detail)
    return {"accepted": True, "id": workflow.ticket.entity_id, "imageUrl": workflow.upload_future.result()}


@router.put("/{item_id}", status_code=202)
def rename_item(list_id: str, item_id: str, body: NameInput, auth: Auth = Depends(get_auth),
                user_id: str = Depends(require_user), services: Services = Depends(get_services)):
    item = _existing_item(services, user_id, list_id, item_id)
    return ticket_response(services.gateway(auth).rename_item(list_id, item, body.name))


@router.delete("/{item_id}", status_code=202)
def delete_item(list_id: str, item_id: str, auth: Auth = Depends(get_auth),
                user_id: str = Depends(require_user), services: Services = Depends(get_services)):
    item = _existing_item(services, user_id, list_id, item_id)
    return ticket_response(services.gateway(auth).delete_item(list_id, item))
