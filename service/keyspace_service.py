# service/keyspace_service.py
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional
from config.settings import settings
from core import codec
from core.gateway import execute_command
from core.namespace_tree import build_tree, filter_tree
from core.scanner import iter_scan_pages, scan_keys
from core.streaming import make_export_stream
from model.keys import KeyTreePage, KeyType, ScanPage, ValueEnvelope
from repository.connection_registry import ConnectionRegistry
from repository.keyspace_repository import KeyspaceRepository
from repository.namespaces import SESSION_STATE_COMMANDS
from util.errors import (
    ConsoleError,
    KeyNotFoundError,
    StoreConnectionError,
    TTLApplicationError,
)
from util.functions import clip_text, floor_ttl
from util.timing import timed

logger = logging.getLogger(__name__)


class KeyspaceService:
    """
    Key browsing and editing for one registered connection + logical database.

    Every operation resolves the (connection, db) client from the registry,
    so the database choice travels with the request; no cursor or batch is
    kept here between calls. A StoreConnectionError drops the connection's
    live clients before it propagates.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    @asynccontextmanager
    async def _repo(
        self, connection_id: str, db: int
    ) -> AsyncIterator[KeyspaceRepository]:
        client = await self._registry.client(connection_id, db)
        try:
            yield KeyspaceRepository(client)
        except StoreConnectionError:
            await self._registry.invalidate(connection_id)
            raise

    async def ensure_connection(self, connection_id: str) -> None:
        await self._registry.get_profile(connection_id)

    # ---------------- Enumeration ----------------

    async def list_keys(
        self,
        connection_id: str,
        db: int,
        cursor: str = "0",
        count: int = settings.SCAN_DEFAULT_COUNT,
        match: Optional[str] = None,
    ) -> ScanPage:
        async with self._repo(connection_id, db) as repo:
            with timed(logger, "keys.scan", conn=connection_id, db=db) as extra:
                page = await scan_keys(repo, cursor, count=count, match=match)
                extra["count"] = len(page.keys)
                extra["next"] = page.nextCursor
        return page

    async def key_tree(
        self,
        connection_id: str,
        db: int,
        cursor: str = "0",
        count: int = settings.SCAN_DEFAULT_COUNT,
        match: Optional[str] = None,
        search: Optional[str] = None,
    ) -> KeyTreePage:
        page = await self.list_keys(connection_id, db, cursor, count, match)
        nodes = build_tree(page.keys, delimiter=settings.KEY_DELIMITER)
        if search:
            nodes = filter_tree(nodes, search)
        return KeyTreePage(nodes=nodes, nextCursor=page.nextCursor, hasMore=page.hasMore)

    async def export_keys(
        self,
        connection_id: str,
        db: int,
        count: int = settings.SCAN_DEFAULT_COUNT,
        match: Optional[str] = None,
    ) -> AsyncIterator[bytes]:
        """NDJSON of every key, one SCAN batch at a time."""
        client = await self._registry.client(connection_id, db)
        repo = KeyspaceRepository(client)

        async def pages():
            try:
                async for page in iter_scan_pages(repo, count=count, match=match):
                    yield page
            except StoreConnectionError:
                await self._registry.invalidate(connection_id)
                raise

        async for chunk in make_export_stream(
            pages=pages(), label=f"conn={connection_id} db={db}"
        ):
            yield chunk

    # ---------------- Single keys ----------------

    async def get_key(self, connection_id: str, db: int, key: str) -> ValueEnvelope:
        async with self._repo(connection_id, db) as repo:
            type_name = await repo.key_type(key)
            if type_name == "none":
                raise KeyNotFoundError(key)
            key_type = codec.parse_value_type(type_name)
            raw = await repo.read(key, key_type)
            if raw is None:
                raise KeyNotFoundError(key)
            ttl = await repo.ttl(key)
        logger.info(
            "key.get conn=%s db=%d key=%s type=%s",
            connection_id,
            db,
            clip_text(key),
            key_type.value,
        )
        return ValueEnvelope(type=key_type, value=codec.decode(key_type, raw), ttl=ttl)

    async def set_key(
        self,
        connection_id: str,
        db: int,
        key: str,
        type_name: str,
        value: Any,
        ttl: float = 0,
    ) -> None:
        """
        Replace `key` with `value` as `type_name`.
        The payload is validated before any write; a TTL that can't be applied
        after a successful collection write raises TTLApplicationError.
        """
        encoded = codec.encode(type_name, value)
        seconds = floor_ttl(ttl)
        async with self._repo(connection_id, db) as repo:
            with timed(
                logger,
                "key.set",
                conn=connection_id,
                db=db,
                key=clip_text(key),
                type=encoded.type.value,
                size=encoded.size,
            ):
                await repo.write(key, encoded, seconds)

            # Strings got their TTL with SET; empty collections leave no key.
            if encoded.type == KeyType.STRING or seconds <= 0 or encoded.is_empty:
                return
            try:
                applied = await repo.expire(key, seconds)
            except ConsoleError as e:
                logger.error(
                    "key.ttl.error conn=%s db=%d key=%s", connection_id, db, clip_text(key)
                )
                raise TTLApplicationError(key, seconds, e.message) from e
            if not applied:
                logger.error(
                    "key.ttl.missing conn=%s db=%d key=%s",
                    connection_id,
                    db,
                    clip_text(key),
                )
                raise TTLApplicationError(key, seconds, "key no longer exists")

    async def delete_key(self, connection_id: str, db: int, key: str) -> int:
        async with self._repo(connection_id, db) as repo:
            deleted = await repo.delete(key)
        logger.info(
            "key.delete conn=%s db=%d key=%s deleted=%d",
            connection_id,
            db,
            clip_text(key),
            deleted,
        )
        return deleted

    # ---------------- Raw commands ----------------

    async def execute(
        self, connection_id: str, db: int, command: str, args: List[str]
    ) -> Any:
        async with self._repo(connection_id, db) as repo:
            try:
                return await execute_command(repo, command, args)
            finally:
                if command.strip().upper() in SESSION_STATE_COMMANDS:
                    # The pooled connection may now point elsewhere; start clean.
                    await self._registry.discard(connection_id, db)
