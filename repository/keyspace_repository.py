# repository/keyspace_repository.py
from typing import Any, List, Optional, Sequence, Tuple
from redis.asyncio import Redis
from config.cache import store_errors
from core.entities import EncodedValue
from model.keys import KeyType
from util.errors import CommandError
from util.functions import as_text

# (TYPE reply or the exception it raised, TTL reply or the exception it raised)
KeyMetadata = Tuple[Any, Any]


class KeyspaceRepository:
    """
    Store primitives for one (connection, logical database) client.
    Every call translates client failures via config.cache.store_errors.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client

    async def ping(self) -> bool:
        with store_errors("ping"):
            return bool(await self._client.ping())

    # ---------------- Iteration ----------------

    async def scan(
        self, cursor: int, *, count: int, match: Optional[str] = None
    ) -> Tuple[int, List[bytes]]:
        with store_errors("scan"):
            next_cursor, keys = await self._client.scan(
                cursor=cursor, match=match, count=count
            )
        return int(next_cursor), list(keys)

    async def metadata(self, keys: Sequence[bytes]) -> List[KeyMetadata]:
        """
        TYPE and TTL for every key in one non-transactional pipeline.
        Per-key error replies come back in place instead of aborting the batch.
        """
        if not keys:
            return []
        with store_errors("metadata"):
            async with self._client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.type(key)
                    pipe.ttl(key)
                replies = await pipe.execute(raise_on_error=False)
        return [(replies[i], replies[i + 1]) for i in range(0, len(replies), 2)]

    # ---------------- Reads ----------------

    async def key_type(self, key: str) -> str:
        with store_errors("type"):
            return as_text(await self._client.type(key))

    async def ttl(self, key: str) -> int:
        with store_errors("ttl"):
            return int(await self._client.ttl(key))

    async def read(self, key: str, key_type: KeyType) -> Any:
        """Native content of `key`; None when it vanished after the TYPE lookup."""
        c = self._client
        with store_errors("read"):
            if key_type == KeyType.STRING:
                return await c.get(key)
            if key_type == KeyType.LIST:
                return await c.lrange(key, 0, -1)
            if key_type == KeyType.SET:
                return list(await c.smembers(key))
            if key_type == KeyType.HASH:
                return await c.hgetall(key)
            if key_type == KeyType.ZSET:
                return await c.zrange(key, 0, -1, withscores=True)
        raise CommandError(f"Cannot read key of type {key_type.value}")

    async def dbsize(self) -> int:
        with store_errors("dbsize"):
            return int(await self._client.dbsize())

    async def database_count(self) -> Optional[int]:
        """`CONFIG GET databases`, or None when the server refuses it."""
        try:
            with store_errors("config_get"):
                reply = await self._client.config_get("databases")
        except CommandError:
            return None
        if not reply:
            return None
        raw = reply.get("databases", reply.get(b"databases"))
        try:
            return int(as_text(raw)) if raw is not None else None
        except ValueError:
            return None

    # ---------------- Writes ----------------

    async def write(self, key: str, encoded: EncodedValue, ttl: int) -> None:
        """
        Replace the content of `key` with `encoded`.
        Strings are one SET (with EX when ttl > 0). Collections are DEL followed
        by the full repopulation inside one MULTI/EXEC, so no stale member
        survives and readers never see a half-written value. The TTL for
        collections is a separate step, see expire().
        """
        c = self._client
        with store_errors("write"):
            if encoded.type == KeyType.STRING:
                await c.set(key, encoded.payload, ex=ttl if ttl > 0 else None)
                return
            async with c.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if encoded.payload:
                    if encoded.type == KeyType.LIST:
                        pipe.rpush(key, *encoded.payload)
                    elif encoded.type == KeyType.SET:
                        pipe.sadd(key, *encoded.payload)
                    elif encoded.type == KeyType.HASH:
                        pipe.hset(key, mapping=encoded.payload)
                    elif encoded.type == KeyType.ZSET:
                        pipe.zadd(key, {member: score for member, score in encoded.payload})
                await pipe.execute()

    async def expire(self, key: str, ttl: int) -> bool:
        with store_errors("expire"):
            return bool(await self._client.expire(key, ttl))

    async def delete(self, key: str) -> int:
        with store_errors("delete"):
            return int(await self._client.delete(key))

    # ---------------- Raw commands ----------------

    async def execute(self, command: str, *args: str) -> Any:
        with store_errors("execute"):
            return await self._client.execute_command(command, *args)
