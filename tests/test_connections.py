"""Tests for the connection registry, saved profiles and ConnectionService."""

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from model.connection import ConnectionProfile, CreateConnectionRequest
from repository.connection_registry import ConnectionRegistry
from repository.connection_repository import ConnectionRepository
from service.connection_service import ConnectionService
from util.errors import ConnectionNotFoundError, StoreConnectionError


@pytest.fixture
def connections(tmp_path):
    return ConnectionRepository(str(tmp_path / "nested" / "connections.db"))


@pytest.fixture
def fresh_registry(client_factory):
    return ConnectionRegistry(client_factory=client_factory)


@pytest.fixture
def conn_service(fresh_registry, connections):
    return ConnectionService(fresh_registry, connections)


# ── ConnectionRepository ─────────────────────────────────


async def test_repository_save_all_delete(connections):
    profile = ConnectionProfile(id="h:1", host="h", port="1", password="pw", db=2)
    await connections.save(profile)
    await connections.save(profile.model_copy(update={"db": 3}))

    assert await connections.all() == [profile.model_copy(update={"db": 3})]
    assert await connections.delete("h:1") == 1
    assert await connections.all() == []
    assert await connections.delete("h:1") == 0


# ── ConnectionRegistry ───────────────────────────────────


async def test_registry_reuses_client_per_database(fresh_registry):
    profile = ConnectionProfile(id="h:1", host="h", port="1")
    await fresh_registry.put(profile)

    c0 = await fresh_registry.client("h:1", 0)
    assert await fresh_registry.client("h:1", 0) is c0
    assert await fresh_registry.client("h:1", 1) is not c0
    await fresh_registry.close()


async def test_registry_unknown_id(fresh_registry):
    with pytest.raises(ConnectionNotFoundError):
        await fresh_registry.client("missing:1", 0)
    with pytest.raises(ConnectionNotFoundError):
        await fresh_registry.remove("missing:1")


async def test_registry_replacing_profile_drops_clients(fresh_registry):
    profile = ConnectionProfile(id="h:1", host="h", port="1")
    await fresh_registry.put(profile)
    c0 = await fresh_registry.client("h:1", 0)

    await fresh_registry.put(profile.model_copy(update={"password": "new"}))

    assert await fresh_registry.client("h:1", 0) is not c0
    await fresh_registry.close()


# ── ConnectionService ────────────────────────────────────


async def test_create_registers_and_saves(conn_service, connections):
    conn_id = await conn_service.create(
        CreateConnectionRequest(host="redis.local", port="6380", password="", db=1)
    )

    assert conn_id == "redis.local:6380"
    assert await conn_service.list_ids() == [conn_id]
    (saved,) = await connections.all()
    assert saved.host == "redis.local"
    assert saved.password is None
    assert saved.db == 1


class UnreachableRedis(fakeredis.FakeAsyncRedis):
    async def ping(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")


async def test_create_unreachable_keeps_nothing(connections):
    registry = ConnectionRegistry(client_factory=lambda p, db: UnreachableRedis())
    service = ConnectionService(registry, connections)

    with pytest.raises(StoreConnectionError):
        await service.create(CreateConnectionRequest(host="down", port="6379"))

    assert await service.list_ids() == []
    assert await connections.all() == []


async def test_failed_recreate_keeps_live_connection(connections, client_factory):
    def factory(profile, db):
        if profile.password == "wrong":
            return UnreachableRedis()
        return client_factory(profile, db)

    registry = ConnectionRegistry(client_factory=factory)
    service = ConnectionService(registry, connections)
    conn_id = await service.create(CreateConnectionRequest(host="localhost", port="6379"))
    live = await registry.client(conn_id, 0)

    with pytest.raises(StoreConnectionError):
        await service.create(
            CreateConnectionRequest(host="localhost", port="6379", password="wrong")
        )

    assert await service.list_ids() == [conn_id]
    assert (await registry.get_profile(conn_id)).password is None
    assert await registry.client(conn_id, 0) is live
    (saved,) = await connections.all()
    assert saved.password is None
    await registry.close()


async def test_delete_forgets_connection(conn_service, connections):
    conn_id = await conn_service.create(CreateConnectionRequest(host="h", port="1"))
    await conn_service.delete(conn_id)

    assert await conn_service.list_ids() == []
    assert await connections.all() == []
    with pytest.raises(ConnectionNotFoundError):
        await conn_service.delete(conn_id)


async def test_restore_registers_saved_profiles(connections, client_factory):
    await connections.save(ConnectionProfile(id="a:1", host="a", port="1"))
    await connections.save(ConnectionProfile(id="b:2", host="b", port="2"))

    service = ConnectionService(ConnectionRegistry(client_factory), connections)

    assert await service.restore() == 2
    assert sorted(await service.list_ids()) == ["a:1", "b:2"]


async def test_list_databases_counts_keys(conn_service, fresh_registry):
    conn_id = await conn_service.create(CreateConnectionRequest(host="h", port="1"))
    db0 = await fresh_registry.client(conn_id, 0)
    db2 = await fresh_registry.client(conn_id, 2)
    await db0.set("a", "1")
    await db0.set("b", "1")
    await db2.set("c", "1")

    databases = await conn_service.list_databases(conn_id)

    assert len(databases) >= 3
    assert [d.index for d in databases] == list(range(len(databases)))
    assert databases[0].keys == 2
    assert databases[1].keys == 0
    assert databases[2].keys == 1
