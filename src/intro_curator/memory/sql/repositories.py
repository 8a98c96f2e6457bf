"""
Repositories (SQL-only)
=======================
- Pure CRUD over the ``profiles`` table.
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional
import asyncio
import sqlite3
import time

from intro_curator.profiles.model import ProfileRecord


class ProfileRepo:
    """Async CRUD helpers for the ``profiles`` table."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def get(self, user_id: int) -> Optional[ProfileRecord]:
        """
        Return the record for ``user_id`` or ``None``.

        :param user_id: Discord user id.
        """
        sql = "SELECT user_id, message_id, updated_ts FROM profiles WHERE user_id=?"

        def _query() -> Optional[ProfileRecord]:
            row = self.conn.execute(sql, (user_id,)).fetchone()
            if row is None:
                return None
            return ProfileRecord(row["user_id"], row["message_id"], row["updated_ts"])

        async with self._lock:
            return await asyncio.to_thread(_query)  # blocking sqlite call

    async def upsert(self, user_id: int, message_id: int) -> None:
        """
        Point ``user_id`` at ``message_id``, replacing any previous row.

        :param user_id: Discord user id.
        :param message_id: Id of the newly published card.
        """
        sql = """
            INSERT INTO profiles(user_id, message_id, updated_ts) VALUES(?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
              message_id=excluded.message_id,
              updated_ts=excluded.updated_ts
        """

        def _run() -> None:
            with self.conn:
                self.conn.execute(sql, (user_id, message_id, time.time()))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def delete(self, user_id: int) -> None:
        """
        Delete the record for ``user_id``.

        :param user_id: Discord user id.
        """
        sql = "DELETE FROM profiles WHERE user_id=?"

        def _run() -> None:
            with self.conn:
                self.conn.execute(sql, (user_id,))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def owners(self, message_ids: Iterable[int]) -> Dict[int, int]:
        """
        Map each known card id in ``message_ids`` to the member it belongs to.

        :param message_ids: Card message ids from a channel scan.
        :returns: ``{message_id: user_id}`` for ids with a live record.
        """
        ids = list(dict.fromkeys(message_ids))
        if not ids:
            return {}

        placeholders = ",".join("?" for _ in ids)
        sql = f"SELECT message_id, user_id FROM profiles WHERE message_id IN ({placeholders})"

        def _query() -> Dict[int, int]:
            rows = self.conn.execute(sql, ids).fetchall()
            return {row["message_id"]: row["user_id"] for row in rows}

        async with self._lock:
            return await asyncio.to_thread(_query)
