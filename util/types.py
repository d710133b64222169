# util/types.py
from typing import TypedDict


# Flow: Narrow payload types for NDJSON key export events.
class ProgressPayload(TypedDict):
    batches: int
    keys: int


class ErrorPayload(TypedDict, total=False):
    error: str
    message: str
