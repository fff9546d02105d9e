"""
JSON file persistence adapter.

The whole dataset lives in one JSON document. Every call reads or rewrites
the full file; nothing is cached between calls, so the file is the only
source of truth.

Mutations go through ``JsonStore.transaction()``, which holds one exclusive
critical section across load -> mutate -> save. Raw file I/O is additionally
guarded by a reader/writer lock so plain reads can run in parallel while a
write excludes everything else.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Mapping

from filelock import FileLock

from chirpy.core.config import get_settings
from chirpy.core.errors import StorageFailureError
from chirpy.domain.models import Dataset

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    A waiting writer blocks new readers, so overlapping reads cannot starve it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def next_id(collection: Mapping[int, object]) -> int:
    """Highest existing id + 1 (1 for an empty collection)."""
    return max(collection.keys(), default=0) + 1


class JsonStore:
    """Single-file record store for chirps, users and refresh tokens."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._rw = ReadWriteLock()
        self._txn_lock = threading.Lock()
        self._active = threading.local()
        self._file_lock = FileLock(str(self.path) + ".lock")
        self.ensure_db()

    # -------------------------------------- raw I/O --------------------------------------
    def ensure_db(self) -> None:
        """Write an empty dataset when the backing file does not exist yet."""
        with self._rw.write_lock():
            if self.path.exists():
                return
            logger.info("Creating empty database at %s", self.path)
            self._write(Dataset())

    def load(self) -> Dataset:
        if not self.path.exists():
            self.ensure_db()
        with self._rw.read_lock():
            try:
                raw = self.path.read_bytes()
            except OSError as exc:
                logger.error("Failed to read %s: %s", self.path, exc)
                raise StorageFailureError(f"Could not read database file {self.path}") from exc
        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top-level JSON value must be an object")
            return Dataset.from_dict(data)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Malformed database file %s: %s", self.path, exc)
            raise StorageFailureError(f"Malformed database file {self.path}") from exc

    def save(self, dataset: Dataset) -> None:
        with self._rw.write_lock():
            self._write(dataset)

    def _write(self, dataset: Dataset) -> None:
        payload = json.dumps(dataset.to_dict(), ensure_ascii=False, indent=2)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StorageFailureError(f"Could not write database file {self.path}") from exc

    # -------------------------------------- use-case helpers --------------------------------------
    def read(self) -> Dataset:
        """Snapshot for read-only operations."""
        return self.load()

    @contextmanager
    def transaction(self) -> Iterator[Dataset]:
        """Yield the latest snapshot; persist it if the block exits cleanly.

        The process mutex and the ``.lock`` file are both held for the whole
        block, so concurrent mutations (threads or processes) never interleave.
        A transaction opened inside another one on the same thread gets the
        outer snapshot; only the outermost block writes the file.
        """
        active = getattr(self._active, "dataset", None)
        if active is not None:
            # nested: share the outer snapshot, the outermost block saves it
            yield active
            return
        with self._txn_lock, self._file_lock:
            dataset = self.load()
            self._active.dataset = dataset
            try:
                yield dataset
            finally:
                self._active.dataset = None
            self.save(dataset)


@lru_cache
def get_store() -> JsonStore:
    """Process-wide store for the configured DATABASE_PATH."""
    return JsonStore(get_settings().database_path)
