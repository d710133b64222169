# repository/connection_registry.py
import asyncio
import logging
from typing import Callable, Dict, List, Tuple
from redis.asyncio import Redis
from config.cache import close_redis, create_redis
from model.connection import ConnectionProfile
from util.errors import ConnectionNotFoundError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionProfile, int], Redis]


class ConnectionRegistry:
    """
    Live connections, keyed by connection id.

    Flow:
    - put() registers a profile; clients are created lazily per logical
      database by client(id, db) and reused across requests.
    - invalidate() drops the live clients but keeps the profile, so the next
      request reconnects. remove() forgets the connection entirely.
    All mutation happens under one asyncio.Lock.
    """

    def __init__(self, client_factory: ClientFactory = create_redis) -> None:
        self._factory = client_factory
        self._profiles: Dict[str, ConnectionProfile] = {}
        self._clients: Dict[Tuple[str, int], Redis] = {}
        self._lock = asyncio.Lock()

    async def put(self, profile: ConnectionProfile) -> None:
        async with self._lock:
            previous = self._profiles.get(profile.id)
            self._profiles[profile.id] = profile
            if previous is not None and previous != profile:
                await self._drop_clients(profile.id)

    async def get_profile(self, connection_id: str) -> ConnectionProfile:
        async with self._lock:
            profile = self._profiles.get(connection_id)
        if profile is None:
            raise ConnectionNotFoundError(connection_id)
        return profile

    async def ids(self) -> List[str]:
        async with self._lock:
            return list(self._profiles)

    async def client(self, connection_id: str, db: int) -> Redis:
        async with self._lock:
            profile = self._profiles.get(connection_id)
            if profile is None:
                raise ConnectionNotFoundError(connection_id)
            client = self._clients.get((connection_id, db))
            if client is None:
                client = self._factory(profile, db)
                self._clients[(connection_id, db)] = client
                logger.debug("registry.client.new conn=%s db=%d", connection_id, db)
            return client

    def detached_client(self, profile: ConnectionProfile, db: int) -> Redis:
        """A client for `profile` that is not pooled; the caller closes it."""
        return self._factory(profile, db)

    async def discard(self, connection_id: str, db: int) -> None:
        async with self._lock:
            client = self._clients.pop((connection_id, db), None)
        if client is not None:
            await close_redis(client)

    async def invalidate(self, connection_id: str) -> None:
        async with self._lock:
            await self._drop_clients(connection_id)
        logger.warning("registry.invalidate conn=%s", connection_id)

    async def remove(self, connection_id: str) -> ConnectionProfile:
        async with self._lock:
            profile = self._profiles.pop(connection_id, None)
            if profile is None:
                raise ConnectionNotFoundError(connection_id)
            await self._drop_clients(connection_id)
        return profile

    async def close(self) -> None:
        async with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            await close_redis(client)

    async def _drop_clients(self, connection_id: str) -> None:
        # Caller holds the lock.
        keys = [k for k in self._clients if k[0] == connection_id]
        for k in keys:
            await close_redis(self._clients.pop(k))
