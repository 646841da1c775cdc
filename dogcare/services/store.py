"""
State Store: durable string -> string mapping.

No transactions, no atomicity across keys. Every `set` stands alone.

Public API
----------
KeyValueStore           protocol: get(key) -> str | None, set(key, value)
InMemoryStore           dict-backed, for tests and embedding
SqlKeyValueStore(db)    kv_store table through a SQLAlchemy Session
session_store()         context manager yielding a SqlKeyValueStore on a fresh session
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dogcare.core.errors import StoreUnavailableError
from dogcare.db.base import SessionLocal
from dogcare.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Volatile store. Optionally pre-seeded with raw string values."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore:
    """
    Store backed by the `kv_store` table.

    Each set() commits immediately; a failed commit is rolled back and
    surfaced as StoreUnavailableError.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        try:
            row = self.db.get(KeyValueEntry, key)
        except SQLAlchemyError:
            logger.exception("kv_store read failed for key=%s", key)
            raise StoreUnavailableError(operation="get", key=key)
        return row.value if row is not None else None

    def set(self, key: str, value: str) -> None:
        try:
            row = self.db.get(KeyValueEntry, key)
            if row is None:
                self.db.add(KeyValueEntry(key=key, value=value))
            else:
                row.value = value
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("kv_store write failed for key=%s", key)
            raise StoreUnavailableError(operation="set", key=key)


@contextmanager
def session_store(
    session_factory: Callable[[], Session] = SessionLocal,
) -> Iterator[SqlKeyValueStore]:
    db = session_factory()
    try:
        yield SqlKeyValueStore(db)
    finally:
        db.close()
