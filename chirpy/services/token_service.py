"""Access token issuance and the refresh token lifecycle."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from chirpy.core.config import get_settings
from chirpy.core.errors import TokenExpiredError, TokenNotFoundError, UserNotFoundError
from chirpy.core.tokens import decode_access_token, encode_access_token, new_refresh_token
from chirpy.domain.models import RefreshToken, User
from chirpy.repositories.json_storage import JsonStore, get_store

logger = logging.getLogger(__name__)


class TokenService:
    """Issues signed access tokens and stores opaque refresh tokens."""

    def __init__(self, store: Optional[JsonStore] = None) -> None:
        self.settings = get_settings()
        self.store = store or get_store()

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(days=self.settings.refresh_token_ttl_days)

    def _token_expired(self, created_at: datetime, now: datetime) -> bool:
        return now - created_at > self.refresh_ttl

    def _check(self, entity: RefreshToken | None) -> RefreshToken:
        if not entity:
            raise TokenNotFoundError("Refresh token not found")
        if self._token_expired(entity.created_at, self._now()):
            raise TokenExpiredError("Refresh token expired")
        return entity

    # -------------------------------------- access tokens --------------------------------------
    def issue_access_token(self, user: User) -> str:
        return encode_access_token(user.id, now=self._now(), ttl_seconds=self.settings.access_token_ttl_seconds)

    def parse_access_token(self, token: str | None) -> int:
        return decode_access_token(token)

    # -------------------------------------- refresh tokens --------------------------------------
    def issue_refresh_token(self, user: User) -> str:
        token = new_refresh_token()
        with self.store.transaction() as db:
            db.refresh_tokens[token] = RefreshToken(token=token, user_id=user.id, created_at=self._now())
        return token

    def verify_refresh_token(self, token: str) -> int:
        token = (token or "").strip()
        entity = self.store.read().refresh_tokens.get(token)
        return self._check(entity).user_id

    def revoke_refresh_token(self, token: str) -> None:
        token = (token or "").strip()
        with self.store.transaction() as db:
            self._check(db.refresh_tokens.get(token))
            del db.refresh_tokens[token]
        logger.info("Revoked a refresh token")

    def refresh_access_token(self, token: str) -> str:
        """Exchange a valid refresh token for a new access token."""
        user_id = self.verify_refresh_token(token)
        user = self.store.read().users.get(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return self.issue_access_token(user)
