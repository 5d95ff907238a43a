"""
SQLite durable tier: completions, question history and expiring key/value rows
"""

import asyncio
import functools
import logging
import os
from typing import List, Optional

import aiosqlite

from quiz.errors import StoreUnavailable
from quiz.models import CompletionRecord, QuestionHistoryEntry

logger = logging.getLogger(__name__)


def _durable(method):
    """Translate SQLite failures into StoreUnavailable"""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except aiosqlite.Error as e:
            logger.error(f"Durable store error in {method.__name__}: {e}")
            raise StoreUnavailable("durable", str(e)) from e
    return wrapper


class QuizDatabase:
    """Owns the aiosqlite connection and every durable table"""

    def __init__(self, path: str):
        self.path = path
        self._db: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def connect(self):
        if self._db is not None:
            return
        if self.path != ":memory:":
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        try:
            self._db = await aiosqlite.connect(self.path)
            self._db.row_factory = aiosqlite.Row
            await self._init_tables(self._db)
        except aiosqlite.Error as e:
            raise StoreUnavailable("durable", str(e)) from e
        logger.info(f"Connected to SQLite database: {self.path}")

    async def close(self):
        if self._db:
            await self._db.close()
            self._db = None
            logger.info("Closed SQLite database connection")

    @property
    def connected(self) -> bool:
        return self._db is not None

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreUnavailable("durable", "database not connected")
        return self._db

    async def _init_tables(self, db: aiosqlite.Connection):
        await db.executescript("""
            -- One row per participant, community and service day
            CREATE TABLE IF NOT EXISTS completions (
                participant_id TEXT NOT NULL,
                community_id TEXT NOT NULL,
                service_date TEXT NOT NULL,
                score INTEGER NOT NULL,
                tier INTEGER NOT NULL,
                completed_at REAL NOT NULL,
                PRIMARY KEY (participant_id, community_id, service_date)
            );

            -- Every question shown to a participant
            CREATE TABLE IF NOT EXISTS question_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                participant_id TEXT NOT NULL,
                community_id TEXT NOT NULL,
                question_hash TEXT NOT NULL,
                question_text TEXT NOT NULL,
                asked_at REAL NOT NULL
            );

            -- Active sessions and prepared question sets
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at REAL
            );

            CREATE INDEX IF NOT EXISTS idx_completions_date ON completions(service_date);
            CREATE INDEX IF NOT EXISTS idx_completions_community ON completions(community_id, service_date);
            CREATE INDEX IF NOT EXISTS idx_history_participant ON question_history(participant_id, community_id);
            CREATE INDEX IF NOT EXISTS idx_history_asked ON question_history(asked_at);
        """)
        await db.commit()

    # ---- completions ----

    @_durable
    async def upsert_completion(self, record: CompletionRecord):
        db = self._conn()
        async with self._lock:
            await db.execute(
                """INSERT INTO completions
                   (participant_id, community_id, service_date, score, tier, completed_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(participant_id, community_id, service_date) DO UPDATE SET
                   score = excluded.score, tier = excluded.tier, completed_at = excluded.completed_at""",
                (record.participant_id, record.community_id, record.service_date,
                 record.score, record.tier, record.completed_at)
            )
            await db.commit()

    @_durable
    async def insert_completion_if_absent(self, record: CompletionRecord) -> bool:
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                """INSERT OR IGNORE INTO completions
                   (participant_id, community_id, service_date, score, tier, completed_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (record.participant_id, record.community_id, record.service_date,
                 record.score, record.tier, record.completed_at)
            )
            await db.commit()
            return cursor.rowcount > 0

    @_durable
    async def get_completion(self, participant_id: str, community_id: str,
                             service_date: str) -> Optional[CompletionRecord]:
        db = self._conn()
        async with db.execute(
            """SELECT * FROM completions
               WHERE participant_id = ? AND community_id = ? AND service_date = ?""",
            (participant_id, community_id, service_date)
        ) as cursor:
            row = await cursor.fetchone()
        return CompletionRecord.from_dict(dict(row)) if row else None

    @_durable
    async def delete_completion(self, participant_id: str, community_id: str, service_date: str):
        db = self._conn()
        async with self._lock:
            await db.execute(
                """DELETE FROM completions
                   WHERE participant_id = ? AND community_id = ? AND service_date = ?""",
                (participant_id, community_id, service_date)
            )
            await db.commit()

    @_durable
    async def list_completions(self, service_date: str,
                               community_id: Optional[str] = None) -> List[CompletionRecord]:
        """Completions for one service day, best tier first, earliest finish breaking ties"""
        db = self._conn()
        query = "SELECT * FROM completions WHERE service_date = ?"
        params = [service_date]
        if community_id is not None:
            query += " AND community_id = ?"
            params.append(community_id)
        query += " ORDER BY tier DESC, completed_at ASC"
        async with db.execute(query, params) as cursor:
            rows = await cursor.fetchall()
        return [CompletionRecord.from_dict(dict(row)) for row in rows]

    @_durable
    async def communities_for_date(self, service_date: str) -> List[str]:
        db = self._conn()
        async with db.execute(
            "SELECT DISTINCT community_id FROM completions WHERE service_date = ? ORDER BY community_id",
            (service_date,)
        ) as cursor:
            rows = await cursor.fetchall()
        return [row["community_id"] for row in rows]

    @_durable
    async def delete_completions_before(self, service_date: str) -> int:
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                "DELETE FROM completions WHERE service_date < ?", (service_date,)
            )
            await db.commit()
            return cursor.rowcount

    # ---- question history ----

    @_durable
    async def add_history(self, entry: QuestionHistoryEntry):
        db = self._conn()
        async with self._lock:
            await db.execute(
                """INSERT INTO question_history
                   (participant_id, community_id, question_hash, question_text, asked_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (entry.participant_id, entry.community_id, entry.question_hash,
                 entry.question_text, entry.asked_at)
            )
            await db.commit()

    @_durable
    async def recent_history(self, participant_id: str, community_id: str,
                             since: float) -> List[QuestionHistoryEntry]:
        db = self._conn()
        async with db.execute(
            """SELECT participant_id, community_id, question_hash, question_text, asked_at
               FROM question_history
               WHERE participant_id = ? AND community_id = ? AND asked_at >= ?
               ORDER BY asked_at DESC""",
            (participant_id, community_id, since)
        ) as cursor:
            rows = await cursor.fetchall()
        return [QuestionHistoryEntry(**dict(row)) for row in rows]

    @_durable
    async def delete_history_before(self, cutoff: float) -> int:
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                "DELETE FROM question_history WHERE asked_at < ?", (cutoff,)
            )
            await db.commit()
            return cursor.rowcount

    # ---- key/value rows ----

    @_durable
    async def kv_get(self, key: str, now: float) -> Optional[str]:
        db = self._conn()
        async with db.execute(
            "SELECT value FROM kv_store WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)",
            (key, now)
        ) as cursor:
            row = await cursor.fetchone()
        return row["value"] if row else None

    @_durable
    async def kv_set(self, key: str, value: str, expires_at: Optional[float]):
        db = self._conn()
        async with self._lock:
            await db.execute(
                """INSERT INTO kv_store (key, value, expires_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at""",
                (key, value, expires_at)
            )
            await db.commit()

    @_durable
    async def kv_insert_if_absent(self, key: str, value: str,
                                  expires_at: Optional[float], now: float) -> bool:
        """Insert unless a live row already holds the key; expired rows are replaced"""
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                """INSERT INTO kv_store (key, value, expires_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at
                   WHERE kv_store.expires_at IS NOT NULL AND kv_store.expires_at <= ?""",
                (key, value, expires_at, now)
            )
            await db.commit()
            return cursor.rowcount > 0

    @_durable
    async def kv_delete(self, key: str):
        db = self._conn()
        async with self._lock:
            await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()

    @_durable
    async def purge_expired_kv(self, now: float) -> int:
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                "DELETE FROM kv_store WHERE expires_at IS NOT NULL AND expires_at <= ?", (now,)
            )
            await db.commit()
            return cursor.rowcount

    @_durable
    async def kv_delete_prefix(self, prefix: str) -> int:
        db = self._conn()
        async with self._lock:
            cursor = await db.execute(
                "DELETE FROM kv_store WHERE substr(key, 1, ?) = ?", (len(prefix), prefix)
            )
            await db.commit()
            return cursor.rowcount
