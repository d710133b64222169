# core/scanner.py
import logging
from typing import Any, AsyncIterator, Optional
from core.codec import parse_key_type
from model.keys import KeyDescriptor, KeyType, ScanPage
from repository.keyspace_repository import KeyspaceRepository
from util.constants import TTL_MISSING
from util.errors import EncodingError, PartialMetadataError
from util.functions import as_text

logger = logging.getLogger(__name__)

START_CURSOR = "0"


def parse_cursor(cursor: Optional[str]) -> int:
    """Cursors are opaque to callers; on the wire they are decimal strings."""
    text = (cursor or START_CURSOR).strip()
    if not text.isdigit():
        raise EncodingError(f"Invalid scan cursor: {cursor!r}")
    return int(text)


def _describe(name: bytes, type_reply: Any, ttl_reply: Any) -> KeyDescriptor:
    key = as_text(name)
    if isinstance(type_reply, Exception):
        logger.warning("%s", PartialMetadataError(key, "TYPE", str(type_reply)))
        key_type = KeyType.UNKNOWN
    else:
        key_type = parse_key_type(type_reply)

    if isinstance(ttl_reply, Exception):
        logger.warning("%s", PartialMetadataError(key, "TTL", str(ttl_reply)))
        ttl = TTL_MISSING
    else:
        try:
            ttl = int(ttl_reply)
        except (TypeError, ValueError):
            logger.warning("%s", PartialMetadataError(key, "TTL", repr(ttl_reply)))
            ttl = TTL_MISSING
    return KeyDescriptor(key=key, type=key_type, ttl=ttl)


async def scan_keys(
    repo: KeyspaceRepository,
    cursor: Optional[str] = START_CURSOR,
    count: int = 100,
    match: Optional[str] = None,
) -> ScanPage:
    """
    One step of incremental keyspace iteration.

    - Uses SCAN, so the cost per call is bounded by `count`, not by the size
      of the database. KEYS is never issued.
    - `count` is a hint; the store may return more or fewer keys.
    - hasMore is False exactly when the store hands back cursor 0.
    - A failed TYPE or TTL lookup marks only that key (unknown / -2).
    Keys added or removed while a scan is in progress may be missed or
    repeated; a static keyspace is returned completely.
    """
    start = parse_cursor(cursor)
    next_cursor, names = await repo.scan(start, count=count, match=match or None)
    replies = await repo.metadata(names)
    keys = [
        _describe(name, type_reply, ttl_reply)
        for name, (type_reply, ttl_reply) in zip(names, replies)
    ]
    return ScanPage(keys=keys, nextCursor=str(next_cursor), hasMore=next_cursor != 0)


async def iter_scan_pages(
    repo: KeyspaceRepository, count: int = 100, match: Optional[str] = None
) -> AsyncIterator[ScanPage]:
    """Drive scan_keys from the start cursor until the store reports completion."""
    cursor = START_CURSOR
    while True:
        page = await scan_keys(repo, cursor, count=count, match=match)
        yield page
        if not page.hasMore:
            return
        cursor = page.nextCursor
