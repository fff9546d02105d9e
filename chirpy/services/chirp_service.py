"""Chirp use cases (create, list, fetch, delete)."""

from __future__ import annotations

import logging
from typing import Optional

from chirpy.core.errors import BodyTooLongError, ChirpNotFoundError, ForbiddenError
from chirpy.domain.censor import MAX_CHIRP_LENGTH, censor
from chirpy.domain.models import Chirp
from chirpy.repositories.json_storage import JsonStore, get_store, next_id

logger = logging.getLogger(__name__)


class ChirpService:
    """Stores chirps and enforces length and ownership rules."""

    def __init__(self, store: Optional[JsonStore] = None) -> None:
        self.store = store or get_store()

    def create_chirp(self, author_id: int, body: str) -> Chirp:
        raw = body or ""
        if len(raw) > MAX_CHIRP_LENGTH:
            raise BodyTooLongError("Chirp is too long")
        cleaned = censor(raw)
        with self.store.transaction() as db:
            chirp = Chirp(id=next_id(db.chirps), body=cleaned, author_id=author_id)
            db.chirps[chirp.id] = chirp
        return chirp

    def list_chirps(self, author_id: Optional[int] = None, sort: str = "asc") -> list[Chirp]:
        chirps = list(self.store.read().chirps.values())
        if author_id is not None:
            chirps = [c for c in chirps if c.author_id == author_id]
        chirps.sort(key=lambda c: c.id, reverse=(sort == "desc"))
        return chirps

    def get_chirp(self, chirp_id: int) -> Chirp:
        chirp = self.store.read().chirps.get(chirp_id)
        if not chirp:
            raise ChirpNotFoundError(f"Chirp {chirp_id} not found")
        return chirp

    def delete_chirp(self, chirp_id: int, requesting_user_id: int) -> None:
        with self.store.transaction() as db:
            chirp = db.chirps.get(chirp_id)
            if not chirp:
                raise ChirpNotFoundError(f"Chirp {chirp_id} not found")
            if chirp.author_id != requesting_user_id:
                raise ForbiddenError("Only the author can delete this chirp")
            del db.chirps[chirp_id]
        logger.info("User %s deleted chirp %s", requesting_user_id, chirp_id)
