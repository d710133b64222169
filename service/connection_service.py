# service/connection_service.py
import logging
from typing import List
from config.cache import close_redis
from config.settings import settings
from model.api import DatabaseInfo
from model.connection import CreateConnectionRequest
from repository.connection_registry import ConnectionRegistry
from repository.connection_repository import ConnectionRepository
from repository.keyspace_repository import KeyspaceRepository
from util.errors import ConsoleError, StoreConnectionError

logger = logging.getLogger(__name__)


class ConnectionService:
    """
    Registering, listing and forgetting store instances.
    Passwords never reach the logs.
    """

    def __init__(
        self, registry: ConnectionRegistry, connections: ConnectionRepository
    ) -> None:
        self._registry = registry
        self._connections = connections

    async def restore(self) -> int:
        """Re-register saved profiles at start-up; clients connect lazily."""
        try:
            profiles = await self._connections.all()
        except Exception as e:
            logger.warning("connections.restore.error err=%s", type(e).__name__)
            return 0
        for profile in profiles:
            await self._registry.put(profile)
        logger.info("connections.restore count=%d", len(profiles))
        return len(profiles)

    async def create(self, request: CreateConnectionRequest) -> str:
        """
        Ping before anything is kept: an unreachable instance is neither
        registered nor saved, and a live connection with the same id is left as is.
        """
        profile = request.to_profile()
        client = self._registry.detached_client(profile, profile.db)
        try:
            await KeyspaceRepository(client).ping()
        except ConsoleError as e:
            logger.warning("connections.create.unreachable conn=%s", profile.id)
            raise StoreConnectionError("Failed to connect to Redis") from e
        finally:
            await close_redis(client)
        await self._registry.put(profile)

        try:
            await self._connections.save(profile)
        except Exception as e:
            # The live connection stays usable; it just won't survive a restart.
            logger.warning(
                "connections.save.error conn=%s err=%s", profile.id, type(e).__name__
            )
        logger.info("connections.create.ok conn=%s db=%d", profile.id, profile.db)
        return profile.id

    async def list_ids(self) -> List[str]:
        return await self._registry.ids()

    async def delete(self, connection_id: str) -> None:
        await self._registry.remove(connection_id)
        try:
            await self._connections.delete(connection_id)
        except Exception as e:
            logger.warning(
                "connections.delete.persist.error conn=%s err=%s",
                connection_id,
                type(e).__name__,
            )
        logger.info("connections.delete.ok conn=%s", connection_id)

    async def list_databases(self, connection_id: str) -> List[DatabaseInfo]:
        profile = await self._registry.get_profile(connection_id)
        try:
            base = KeyspaceRepository(
                await self._registry.client(connection_id, profile.db)
            )
            count = await base.database_count() or settings.DEFAULT_DATABASE_COUNT
            out: List[DatabaseInfo] = []
            for index in range(count):
                repo = KeyspaceRepository(
                    await self._registry.client(connection_id, index)
                )
                out.append(DatabaseInfo(index=index, keys=await repo.dbsize()))
        except StoreConnectionError:
            await self._registry.invalidate(connection_id)
            raise
        return out
