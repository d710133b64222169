# util/timing.py
import time
from contextlib import contextmanager
from typing import Iterator, Dict, Any
import logging


@contextmanager
def timed(
    logger: logging.Logger, name: str, **kv: Any
) -> Iterator[Dict[str, Any]]:
    """
    Usage:
      with timed(logger, "keys.scan", conn=cid) as extra:
          ...
          extra["count"] = len(batch)
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    Fields added to `extra` inside the block are appended to the line.
    """
    extra: Dict[str, Any] = dict(kv)
    t0 = time.perf_counter()
    try:
        yield extra
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        suffix = "".join(f" {k}={v}" for k, v in extra.items())
        logger.info("%s.done ms=%d%s", name, dt_ms, suffix)
