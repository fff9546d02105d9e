"""Signed access tokens (HS256 JWT) and opaque refresh token generation."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import jwt

from .config import get_settings
from .errors import InvalidTokenError

JWT_ALGORITHM = "HS256"
JWT_ISSUER = "chirpy"
REFRESH_TOKEN_BYTES = 10


def encode_access_token(user_id: int, *, now: datetime | None = None, ttl_seconds: int | None = None) -> str:
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    ttl = ttl_seconds if ttl_seconds is not None else settings.access_token_ttl_seconds
    claims = {
        "iss": JWT_ISSUER,
        "sub": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(seconds=ttl),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str | None) -> int:
    """Return the user id carried in ``sub``; raise InvalidTokenError otherwise."""
    value = (token or "").strip()
    if not value:
        raise InvalidTokenError("Missing access token")
    settings = get_settings()
    try:
        claims = jwt.decode(
            value,
            settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
            options={"require": ["exp", "iss", "sub"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(f"Invalid access token: {exc}") from exc
    subject = str(claims.get("sub", ""))
    if not subject.isdigit():
        raise InvalidTokenError("Invalid token subject")
    return int(subject)


def new_refresh_token() -> str:
    return secrets.token_hex(REFRESH_TOKEN_BYTES)
