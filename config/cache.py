# config/cache.py
import logging
from contextlib import contextmanager
from typing import Iterator
from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)
from config.settings import settings
from model.connection import ConnectionProfile
from util.errors import CommandError, StoreConnectionError

logger = logging.getLogger(__name__)


def create_redis(profile: ConnectionProfile, db: int) -> Redis:
    """
    One client (and pool) per (connection, logical database).
    The database is fixed at connect time, so no SELECT ever runs on a shared
    connection and reads can't land in another operator's database.
    """
    return Redis(
        host=profile.host,
        port=int(profile.port),
        password=profile.password or None,
        db=db,
        decode_responses=False,  # the codec decides text vs binary
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        socket_keepalive=True,
        health_check_interval=30,
    )


async def close_redis(client: Redis) -> None:
    try:
        await client.aclose()
    except Exception as e:
        logger.warning("redis.close.error err=%s", type(e).__name__)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate client exceptions into the console taxonomy:
    - unreachable / auth / timeout -> StoreConnectionError (terminal for the connection)
    - error reply -> CommandError with the store's text verbatim
    """
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError, OSError) as e:
        logger.error("redis.unreachable op=%s err=%s", operation, type(e).__name__)
        raise StoreConnectionError(str(e) or "Failed to connect to Redis") from e
    except ResponseError as e:
        raise CommandError(str(e)) from e
