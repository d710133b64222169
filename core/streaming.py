# core/streaming.py
from typing import AsyncIterator, Dict, Final
from model.keys import ScanPage
from util.errors import ConsoleError
from util.types import ErrorPayload, ProgressPayload
import json
import logging

LINE_SEP: Final[str] = "\n"
logger = logging.getLogger(__name__)


def ndjson_line(obj: Dict[str, object]) -> bytes:
    return (json.dumps(obj, separators=(",", ":")) + LINE_SEP).encode("utf-8")


async def make_export_stream(
    *, pages: AsyncIterator[ScanPage], label: str
) -> AsyncIterator[bytes]:
    """
    Emit NDJSON events while walking the keyspace batch by batch:
      - one "key" event per KeyDescriptor
      - a "progress" event after each batch
      - "error" if the store fails mid-way, then "done"
    Only one batch is held in memory at a time.
    """
    batches = 0
    total = 0
    try:
        async for page in pages:
            batches += 1
            for descriptor in page.keys:
                total += 1
                yield ndjson_line(
                    {"type": "key", "payload": descriptor.model_dump(mode="json")}
                )
            progress: ProgressPayload = {"batches": batches, "keys": total}
            yield ndjson_line({"type": "progress", "payload": dict(progress)})
    except ConsoleError as e:
        logger.error("export.error %s code=%s", label, e.code)
        err: ErrorPayload = {"error": e.code, "message": e.message}
        yield ndjson_line({"type": "error", "payload": dict(err)})
    logger.info("export.done %s batches=%d keys=%d", label, batches, total)
    yield ndjson_line({"type": "done", "payload": {}})
