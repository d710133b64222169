"""Shared test fixtures."""

import os
import tempfile

# Settings are read at import time; keep tests away from ./data and .env.
os.environ.setdefault("APP_ENV", "prod")
os.environ.setdefault(
    "CONNECTIONS_DB_PATH",
    os.path.join(tempfile.mkdtemp(prefix="webredis-tests-"), "connections.db"),
)

import fakeredis  # noqa: E402
import pytest  # noqa: E402

from model.connection import ConnectionProfile  # noqa: E402
from repository.connection_registry import ConnectionRegistry  # noqa: E402
from repository.keyspace_repository import KeyspaceRepository  # noqa: E402
from service.keyspace_service import KeyspaceService  # noqa: E402

CONN_ID = "localhost:6379"


@pytest.fixture
def servers():
    """One FakeServer per connection id; logical databases live inside it."""
    return {}


@pytest.fixture
def client_factory(servers):
    def factory(profile, db):
        server = servers.setdefault(profile.id, fakeredis.FakeServer())
        return fakeredis.FakeAsyncRedis(server=server, db=db)

    return factory


@pytest.fixture
def profile():
    return ConnectionProfile(id=CONN_ID, host="localhost", port="6379")


@pytest.fixture
async def registry(client_factory, profile):
    reg = ConnectionRegistry(client_factory=client_factory)
    await reg.put(profile)
    yield reg
    await reg.close()


@pytest.fixture
async def redis_db0(registry):
    return await registry.client(CONN_ID, 0)


@pytest.fixture
def repo(redis_db0):
    return KeyspaceRepository(redis_db0)


@pytest.fixture
def service(registry):
    return KeyspaceService(registry)
