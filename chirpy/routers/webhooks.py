import secrets

from fastapi import APIRouter, Depends, Request, Response

from chirpy.core.config import get_settings
from chirpy.core.errors import UnauthorizedError
from chirpy.routers.deps import authorization_value, get_user_service
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/api/polka", tags=["webhooks"])

UPGRADE_EVENT = "user.upgraded"


@router.post("/webhooks", status_code=204)
def polka_webhook(payload: dict, request: Request, svc: UserService = Depends(get_user_service)):
    expected = get_settings().polka_api_key
    supplied = authorization_value(request, "ApiKey")
    if not expected or not supplied or not secrets.compare_digest(expected.encode(), supplied.encode()):
        raise UnauthorizedError("Invalid API key")
    if payload.get("event") != UPGRADE_EVENT:
        return Response(status_code=204)
    data = payload.get("data")
    user_id = data.get("user_id") if isinstance(data, dict) else None
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return Response(status_code=400)
    svc.upgrade_user(user_id)
    return Response(status_code=204)
