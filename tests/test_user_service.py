from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Keep the chirpy package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.core import config as core_config  # noqa: E402
from chirpy.core.errors import (  # noqa: E402
    ConflictError,
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationFailedError,
)
from chirpy.repositories.json_storage import JsonStore  # noqa: E402
from chirpy.services.user_service import UserService  # noqa: E402


@pytest.fixture()
def store(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret-with-at-least-32-bytes!!")
    core_config.get_settings.cache_clear()
    yield JsonStore(tmp_path / "database.json")
    core_config.get_settings.cache_clear()


def test_users_get_sequential_ids(store):
    svc = UserService(store)
    ids = [svc.create_user(f"u{i}@example.com", "pw").id for i in range(1, 4)]
    assert ids == [1, 2, 3]


def test_password_is_hashed_and_not_public(store):
    svc = UserService(store)
    user = svc.create_user("alice@example.com", "s3cret")
    stored = store.load().users[user.id]
    assert stored.password_hash and stored.password_hash != "s3cret"
    assert user.public() == {"id": 1, "email": "alice@example.com", "is_chirpy_red": False}


def test_duplicate_email_does_not_consume_an_id(store):
    svc = UserService(store)
    svc.create_user("alice@example.com", "pw")
    with pytest.raises(DuplicateEmailError) as exc:
        svc.create_user("alice@example.com", "other")
    assert isinstance(exc.value, ConflictError)
    assert svc.create_user("bob@example.com", "pw").id == 2


def test_create_user_requires_email_and_password(store):
    svc = UserService(store)
    with pytest.raises(ValidationFailedError):
        svc.create_user("   ", "pw")
    with pytest.raises(ValidationFailedError):
        svc.create_user("a@example.com", "")
    assert store.load().users == {}


def test_authenticate(store):
    svc = UserService(store)
    created = svc.create_user("alice@example.com", "pw")
    assert svc.authenticate("alice@example.com", "pw").id == created.id
    with pytest.raises(InvalidCredentialsError) as exc:
        svc.authenticate("alice@example.com", "wrong")
    assert isinstance(exc.value, UnauthorizedError)
    with pytest.raises(UserNotFoundError):
        svc.authenticate("nobody@example.com", "pw")


def test_update_user_replaces_email_and_password(store):
    svc = UserService(store)
    user = svc.create_user("alice@example.com", "old")
    updated = svc.update_user(user.id, "alice@new.example.com", "new")
    assert updated.email == "alice@new.example.com"
    assert svc.authenticate("alice@new.example.com", "new").id == user.id
    with pytest.raises(UserNotFoundError):
        svc.authenticate("alice@example.com", "old")


def test_update_user_does_not_recheck_email_uniqueness(store):
    svc = UserService(store)
    svc.create_user("alice@example.com", "pw")
    bob = svc.create_user("bob@example.com", "pw")
    assert svc.update_user(bob.id, "alice@example.com", "pw").email == "alice@example.com"


def test_update_missing_user(store):
    with pytest.raises(UserNotFoundError):
        UserService(store).update_user(42, "x@example.com", "pw")


def test_upgrade_user_is_idempotent(store):
    svc = UserService(store)
    user = svc.create_user("alice@example.com", "pw")
    assert svc.upgrade_user(user.id).is_chirpy_red is True
    assert svc.upgrade_user(user.id).is_chirpy_red is True
    assert svc.get_user(user.id).is_chirpy_red is True
    with pytest.raises(UserNotFoundError):
        svc.upgrade_user(99)
