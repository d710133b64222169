# core/gateway.py
import logging
from typing import Any, Sequence
from core.codec import binary_blob, wire_float
from repository.keyspace_repository import KeyspaceRepository
from util.functions import as_text

logger = logging.getLogger(__name__)


def to_wire(result: Any) -> Any:
    """
    Make a raw reply JSON-safe without interpreting it:
    UTF-8 bytes become strings, other bytes a binary blob; containers recurse.
    """
    if isinstance(result, (bytes, bytearray)):
        try:
            return bytes(result).decode("utf-8")
        except UnicodeDecodeError:
            return binary_blob(bytes(result))
    if isinstance(result, dict):
        return {as_text(k): to_wire(v) for k, v in result.items()}
    if isinstance(result, (list, tuple, set, frozenset)):
        return [to_wire(item) for item in result]
    if isinstance(result, Exception):
        return str(result)
    if isinstance(result, float):
        return wire_float(result)
    if result is None or isinstance(result, (str, int, bool)):
        return result
    return str(result)


async def execute_command(
    repo: KeyspaceRepository, command: str, args: Sequence[str]
) -> Any:
    """
    Forward `command` and `args` to the store verbatim and return its reply.

    There is no allow-list: this is an operator escape hatch and trusts the
    caller completely, including destructive commands such as FLUSHDB.
    Error replies raise CommandError with the store's text. The gateway keeps
    no state; deciding what a command invalidates is up to the caller.
    """
    logger.info("command.exec cmd=%s argc=%d", command.upper(), len(args))
    result = await repo.execute(command, *args)
    return to_wire(result)
