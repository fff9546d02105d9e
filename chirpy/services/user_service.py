"""
User accounts: registration, login checks, profile updates and upgrades.
"""

from __future__ import annotations

import logging
from typing import Optional

from chirpy.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationFailedError,
)
from chirpy.core.security import hash_password, needs_rehash, verify_password
from chirpy.domain.models import User
from chirpy.repositories.json_storage import JsonStore, get_store, next_id

logger = logging.getLogger(__name__)


class UserService:
    """Creates and looks up users stored in the JSON dataset."""

    def __init__(self, store: Optional[JsonStore] = None) -> None:
        self.store = store or get_store()

    def _require_credentials(self, email: str, password: str) -> str:
        raw_email = (email or "").strip()
        if not raw_email:
            raise ValidationFailedError("Email is required")
        if not password:
            raise ValidationFailedError("Password is required")
        return raw_email

    def create_user(self, email: str, password: str) -> User:
        raw_email = self._require_credentials(email, password)
        # hash outside the critical section; argon2 is deliberately slow
        password_hash = hash_password(password)
        with self.store.transaction() as db:
            if db.find_user_by_email(raw_email):
                raise DuplicateEmailError(f"User with email {raw_email} already exists")
            user = User(id=next_id(db.users), email=raw_email, password_hash=password_hash)
            db.users[user.id] = user
        logger.info("Created user %s", user.id)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.store.read().users.get(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def authenticate(self, email: str, password: str) -> User:
        raw_email = (email or "").strip()
        user = self.store.read().find_user_by_email(raw_email)
        if not user:
            raise UserNotFoundError(f"No user with email {raw_email}")
        if not verify_password(password, user.password_hash):
            logger.warning("Failed login for user %s", user.id)
            raise InvalidCredentialsError("Invalid email or password")
        if needs_rehash(user.password_hash):
            new_hash = hash_password(password)
            with self.store.transaction() as db:
                stored = db.users.get(user.id)
                if stored:
                    stored.password_hash = new_hash
                    user = stored
        return user

    def update_user(self, user_id: int, new_email: str, new_password: str) -> User:
        """Replace email and password. Email uniqueness is not re-checked here."""
        raw_email = self._require_credentials(new_email, new_password)
        password_hash = hash_password(new_password)
        with self.store.transaction() as db:
            user = db.users.get(user_id)
            if not user:
                raise UserNotFoundError(f"User {user_id} not found")
            user.email = raw_email
            user.password_hash = password_hash
        return user

    def upgrade_user(self, user_id: int) -> User:
        with self.store.transaction() as db:
            user = db.users.get(user_id)
            if not user:
                raise UserNotFoundError(f"User {user_id} not found")
            user.is_chirpy_red = True
        logger.info("Upgraded user %s", user_id)
        return user
