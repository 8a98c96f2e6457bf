"""
Public façade for profile records
=================================

Durable ``user id -> profile card message id`` mapping. Import from here::

    from intro_curator.memory import get_store

    store = get_store()
    record = await store.get(user_id)
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional
import asyncio
import logging

from intro_curator.profiles.model import ProfileRecord

from .sql import db as _db
from .sql.repositories import ProfileRepo as _ProfileRepo

logger = logging.getLogger(__name__)

__all__ = ["ProfileStore", "get_store"]


class ProfileStore:
    """
    One profile record per member, last write wins.

    Writes are single-row UPSERTs so members never interfere with each other.
    Whether the referenced message still exists on Discord is the caller's
    concern.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._conn = _db.connect(path)
        _db.migrate(self._conn)
        self._lock = asyncio.Lock()
        self._repo = _ProfileRepo(self._conn, self._lock)

    async def get(self, user_id: int) -> Optional[ProfileRecord]:
        return await self._repo.get(user_id)

    async def save(self, user_id: int, message_id: int) -> None:
        await self._repo.upsert(user_id, message_id)
        logger.debug("Profile record for %s now points at %s", user_id, message_id)

    async def delete(self, user_id: int) -> None:
        await self._repo.delete(user_id)

    async def owners(self, message_ids: Iterable[int]) -> Dict[int, int]:
        return await self._repo.owners(message_ids)

    def close(self) -> None:
        self._conn.close()


_store: Optional[ProfileStore] = None


def get_store() -> ProfileStore:
    """Return the process-wide store, opening the database on first use."""
    global _store
    if _store is None:
        _store = ProfileStore()
        logger.info("Opened profile store at %s", _db.db_path())
    return _store
