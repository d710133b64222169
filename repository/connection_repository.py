# repository/connection_repository.py
import logging
import os
from typing import List
import aiosqlite
from config.settings import settings
from model.connection import ConnectionProfile
from repository.namespaces import CONNECTIONS_TABLE

logger = logging.getLogger(__name__)

_CREATE_TABLE = f"""
CREATE TABLE IF NOT EXISTS {CONNECTIONS_TABLE} (
    id       TEXT PRIMARY KEY,
    host     TEXT NOT NULL,
    port     TEXT NOT NULL,
    password TEXT,
    db       INTEGER NOT NULL
)
"""


class ConnectionRepository:
    """
    Saved connection profiles in a single SQLite file.

    Each call opens its own aiosqlite connection; saves are rare and this keeps
    the repository free of event-loop-bound state.
    """

    def __init__(self, db_path: str = settings.CONNECTIONS_DB_PATH) -> None:
        self._db_path = db_path
        self._ready = False

    async def _connect(self) -> aiosqlite.Connection:
        if not self._ready:
            parent = os.path.dirname(self._db_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
        db = await aiosqlite.connect(self._db_path)
        if not self._ready:
            await db.execute(_CREATE_TABLE)
            await db.commit()
            self._ready = True
        return db

    async def save(self, profile: ConnectionProfile) -> None:
        db = await self._connect()
        try:
            await db.execute(
                f"INSERT OR REPLACE INTO {CONNECTIONS_TABLE} (id, host, port, password, db) "
                "VALUES (?, ?, ?, ?, ?)",
                (profile.id, profile.host, profile.port, profile.password, profile.db),
            )
            await db.commit()
        finally:
            await db.close()

    async def all(self) -> List[ConnectionProfile]:
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"SELECT id, host, port, password, db FROM {CONNECTIONS_TABLE}"
            )
            rows = await cursor.fetchall()
        finally:
            await db.close()
        return [
            ConnectionProfile(
                id=row[0], host=row[1], port=row[2], password=row[3], db=int(row[4])
            )
            for row in rows
        ]

    async def delete(self, connection_id: str) -> int:
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"DELETE FROM {CONNECTIONS_TABLE} WHERE id = ?", (connection_id,)
            )
            await db.commit()
            return int(cursor.rowcount or 0)
        finally:
            await db.close()
