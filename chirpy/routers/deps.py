"""Request helpers shared by routers (service lookup, Authorization header)."""
from __future__ import annotations

from fastapi import Request

from chirpy.core.errors import InvalidTokenError
from chirpy.services.chirp_service import ChirpService
from chirpy.services.token_service import TokenService
from chirpy.services.user_service import UserService


def _state_attr(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if not svc:
        raise RuntimeError(f"{name} is not configured")
    return svc


def get_chirp_service(request: Request) -> ChirpService:
    return _state_attr(request, "chirp_service")


def get_user_service(request: Request) -> UserService:
    return _state_attr(request, "user_service")


def get_token_service(request: Request) -> TokenService:
    return _state_attr(request, "token_service")


def authorization_value(request: Request, scheme: str) -> str:
    """Return the credential after ``<scheme> `` in the Authorization header."""
    header = (request.headers.get("authorization") or "").strip()
    prefix = f"{scheme} "
    if not header.startswith(prefix):
        return ""
    return header[len(prefix):].strip()


def bearer_token(request: Request) -> str:
    token = authorization_value(request, "Bearer")
    if not token:
        raise InvalidTokenError("Missing bearer token")
    return token


def current_user_id(request: Request) -> int:
    """Decode the bearer access token and return its user id."""
    return get_token_service(request).parse_access_token(bearer_token(request))
