from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from chirpy.core.errors import TokenNotFoundError, UnauthorizedError
from chirpy.routers.deps import bearer_token, get_token_service, get_user_service
from chirpy.routers.users import Credentials
from chirpy.services.token_service import TokenService
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login")
def login(
    payload: Credentials,
    users: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
):
    user = users.authenticate(payload.email, payload.password)
    body = user.public()
    body["token"] = tokens.issue_access_token(user)
    body["refresh_token"] = tokens.issue_refresh_token(user)
    return body


# unknown or revoked refresh tokens answer 401
@router.post("/refresh")
def refresh(request: Request, tokens: TokenService = Depends(get_token_service)):
    try:
        return {"token": tokens.refresh_access_token(bearer_token(request))}
    except TokenNotFoundError as exc:
        raise UnauthorizedError(exc.message) from exc


@router.post("/revoke", status_code=204)
def revoke(request: Request, tokens: TokenService = Depends(get_token_service)):
    try:
        tokens.revoke_refresh_token(bearer_token(request))
    except TokenNotFoundError as exc:
        raise UnauthorizedError(exc.message) from exc
    return Response(status_code=204)
