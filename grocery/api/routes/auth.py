import logging

from fastapi import APIRouter, Depends, HTTPException

from grocery.api.services import Services, get_services
from grocery.utilities.constants import NOTICE_FIELDS_REQUIRED, NOTICE_SIGNUP_FAILED, NOTICE_SIGNUP_OK
from grocery.utilities.errors import AuthError
from grocery.utilities.validators import SignUpInput

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/signup", status_code=201)
def sign_up(body: SignUpInput, services: Services = Depends(get_services)):
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail=NOTICE_FIELDS_REQUIRED)
    try:
        uid = services.accounts.sign_up(body.email, body.password)
    except AuthError as e:
        logger.warning("Sign up for %s failed: %s", body.email, e)
        raise HTTPException(status_code=400, detail=NOTICE_SIGNUP_FAILED.format(reason=e))
    logger.info("Signed up %s", body.email)
    return {"uid": uid, "message": NOTICE_SIGNUP_OK}
