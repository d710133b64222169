# util/functions.py
import math
from typing import Any


def as_text(value: Any) -> str:
    """
    - Decode bytes replies from the store to `str` (UTF-8, lossy).
    - Anything else is passed through `str()`.
    Only for names and metadata; values go through core.codec.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def floor_ttl(ttl: float | int | None) -> int:
    """Floor a client-supplied TTL to whole seconds; negatives mean no expiry."""
    if ttl is None:
        return 0
    if isinstance(ttl, float) and not math.isfinite(ttl):
        return 0
    return max(0, int(math.floor(ttl)))


def clip_text(text: str, max_chars: int = 80) -> str:
    """Trim `text` for log lines, adding an ellipsis when trimming occurs."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + " …"
