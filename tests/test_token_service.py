from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import jwt
import pytest

# Keep the chirpy package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.core import config as core_config  # noqa: E402
from chirpy.core.errors import (  # noqa: E402
    InvalidTokenError,
    TokenExpiredError,
    TokenNotFoundError,
    UnauthorizedError,
)
from chirpy.domain.models import RefreshToken, User  # noqa: E402
from chirpy.repositories.json_storage import JsonStore  # noqa: E402
from chirpy.services.token_service import TokenService  # noqa: E402

SECRET = "test-secret-with-at-least-32-bytes!!"
NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def store(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    core_config.get_settings.cache_clear()
    store = JsonStore(tmp_path / "database.json")
    with store.transaction() as db:
        db.users[12] = User(id=12, email="twelve@example.com", password_hash="h")
    yield store
    core_config.get_settings.cache_clear()


def _seed_token(store: JsonStore, token: str, created_at: datetime, user_id: int = 12) -> None:
    with store.transaction() as db:
        db.refresh_tokens[token] = RefreshToken(token=token, user_id=user_id, created_at=created_at)


def test_access_token_subject_is_decimal_id(store):
    svc = TokenService(store)
    user = User(id=12, email="twelve@example.com", password_hash="h")
    token = svc.issue_access_token(user)
    claims = jwt.decode(token, SECRET, algorithms=["HS256"], issuer="chirpy")
    assert claims["sub"] == "12"
    assert svc.parse_access_token(token) == 12


def test_access_token_rejects_bad_input(store):
    svc = TokenService(store)
    with pytest.raises(InvalidTokenError):
        svc.parse_access_token("")
    with pytest.raises(InvalidTokenError):
        svc.parse_access_token("not-a-jwt")
    forged = jwt.encode({"iss": "chirpy", "sub": "1", "exp": NOW + timedelta(days=3650)}, "another-secret-of-32-bytes-or-more", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        svc.parse_access_token(forged)


def test_access_token_expires(store):
    svc = TokenService(store)
    expired = jwt.encode(
        {"iss": "chirpy", "sub": "12", "iat": NOW - timedelta(hours=2), "exp": NOW - timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        svc.parse_access_token(expired)


def test_issue_refresh_token_persists_record(store):
    svc = TokenService(store)
    token = svc.issue_refresh_token(User(id=12, email="twelve@example.com", password_hash="h"))
    assert len(token) == 20
    int(token, 16)
    record = store.load().refresh_tokens[token]
    assert record.user_id == 12
    assert svc.verify_refresh_token(token) == 12


def test_refresh_token_expiry_boundary(store, monkeypatch):
    svc = TokenService(store)
    monkeypatch.setattr(svc, "_now", lambda: NOW)
    _seed_token(store, "a" * 20, NOW - timedelta(days=60) - timedelta(seconds=1))
    _seed_token(store, "b" * 20, NOW - timedelta(days=60) + timedelta(seconds=1))

    with pytest.raises(TokenExpiredError):
        svc.verify_refresh_token("a" * 20)
    assert svc.verify_refresh_token("b" * 20) == 12


def test_unknown_refresh_token(store):
    with pytest.raises(TokenNotFoundError):
        TokenService(store).verify_refresh_token("0" * 20)


def test_revoke_deletes_and_is_not_idempotent(store):
    svc = TokenService(store)
    token = svc.issue_refresh_token(User(id=12, email="twelve@example.com", password_hash="h"))
    svc.revoke_refresh_token(token)
    assert token not in store.load().refresh_tokens
    with pytest.raises(TokenNotFoundError):
        svc.revoke_refresh_token(token)


def test_revoke_expired_token_fails_and_keeps_record(store, monkeypatch):
    svc = TokenService(store)
    monkeypatch.setattr(svc, "_now", lambda: NOW)
    _seed_token(store, "c" * 20, NOW - timedelta(days=61))
    with pytest.raises(TokenExpiredError):
        svc.revoke_refresh_token("c" * 20)
    assert "c" * 20 in store.load().refresh_tokens


def test_refresh_access_token(store):
    svc = TokenService(store)
    token = svc.issue_refresh_token(User(id=12, email="twelve@example.com", password_hash="h"))
    access = svc.refresh_access_token(token)
    assert svc.parse_access_token(access) == 12


def test_token_expired_respects_timezone_offset(store):
    svc = TokenService(store)
    created = NOW.astimezone(timezone(timedelta(hours=-3)))
    assert svc._token_expired(created, NOW + timedelta(days=59)) is False
    assert svc._token_expired(created, NOW + timedelta(days=60, seconds=1)) is True
