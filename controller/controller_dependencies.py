# controller/controller_dependencies.py
from typing import Optional
from fastapi import Depends
from repository.connection_registry import ConnectionRegistry
from repository.connection_repository import ConnectionRepository
from service.connection_service import ConnectionService
from service.keyspace_service import KeyspaceService

_registry: Optional[ConnectionRegistry] = None
_connections: Optional[ConnectionRepository] = None


def get_registry() -> ConnectionRegistry:
    # Process-wide; one live registry shared by every request.
    global _registry
    if _registry is None:
        _registry = ConnectionRegistry()
    return _registry


def get_connection_repository() -> ConnectionRepository:
    global _connections
    if _connections is None:
        _connections = ConnectionRepository()
    return _connections


def get_connection_service(
    registry: ConnectionRegistry = Depends(get_registry),
    connections: ConnectionRepository = Depends(get_connection_repository),
) -> ConnectionService:
    return ConnectionService(registry, connections)


def get_keyspace_service(
    registry: ConnectionRegistry = Depends(get_registry),
) -> KeyspaceService:
    return KeyspaceService(registry)


async def close_dependencies() -> None:
    global _registry
    if _registry is not None:
        await _registry.close()
        _registry = None
