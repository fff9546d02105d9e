"""Value types mirrored 1:1 with the JSON document on disk."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass
class Chirp:
    id: int
    body: str
    author_id: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Chirp":
        return cls(id=int(data["id"]), body=str(data["body"]), author_id=int(data["author_id"]))


@dataclass
class User:
    id: int
    email: str
    password_hash: str
    is_chirpy_red: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    def public(self) -> dict:
        """Fields safe to hand back to callers (no password hash)."""
        return {"id": self.id, "email": self.email, "is_chirpy_red": self.is_chirpy_red}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=int(data["id"]),
            email=str(data["email"]),
            password_hash=str(data.get("password_hash") or ""),
            is_chirpy_red=bool(data.get("is_chirpy_red", False)),
        )


@dataclass
class RefreshToken:
    token: str
    user_id: int
    created_at: datetime

    def to_dict(self) -> dict:
        return {"token": self.token, "user_id": self.user_id, "created_at": self.created_at.isoformat()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RefreshToken":
        created = datetime.fromisoformat(str(data["created_at"]))
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return cls(token=str(data["token"]), user_id=int(data["user_id"]), created_at=created)


@dataclass
class Dataset:
    """The full aggregate of every collection held in the backing file."""

    chirps: dict[int, Chirp] = field(default_factory=dict)
    users: dict[int, User] = field(default_factory=dict)
    refresh_tokens: dict[str, RefreshToken] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "chirps": {str(k): v.to_dict() for k, v in self.chirps.items()},
            "users": {str(k): v.to_dict() for k, v in self.users.items()},
            "refresh_tokens": {k: v.to_dict() for k, v in self.refresh_tokens.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Dataset":
        # "posts" is accepted for files written before the rename
        chirps = data.get("chirps")
        if chirps is None:
            chirps = data.get("posts") or {}
        users = data.get("users") or {}
        tokens = data.get("refresh_tokens") or {}
        return cls(
            chirps={int(k): Chirp.from_dict(v) for k, v in chirps.items()},
            users={int(k): User.from_dict(v) for k, v in users.items()},
            refresh_tokens={k: RefreshToken.from_dict(v) for k, v in tokens.items()},
        )

    def find_user_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None
