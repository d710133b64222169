# core/entities.py
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union
from model.keys import KeyType

# string -> bytes
# list / set -> [bytes, ...]
# hash -> {field: bytes}
# zset -> [(member, score), ...]
NativePayload = Union[
    bytes,
    List[bytes],
    Dict[str, bytes],
    List[Tuple[bytes, float]],
]


@dataclass(frozen=True)
class EncodedValue:
    """
    Store-ready form of a wire value.
    Collections are written clear-then-populate, so `payload` is the complete
    new content of the key, never a delta.
    """

    type: KeyType
    payload: NativePayload

    @property
    def size(self) -> int:
        # bytes for strings, element count for collections
        return len(self.payload)

    @property
    def is_empty(self) -> bool:
        return self.type != KeyType.STRING and not self.payload
