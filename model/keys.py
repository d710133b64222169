# model/keys.py
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class KeyType(str, Enum):
    """Type tags as reported by the store's TYPE command."""

    STRING = "string"
    LIST = "list"
    SET = "set"
    HASH = "hash"
    ZSET = "zset"
    UNKNOWN = "unknown"


# The five variants the codec can read and write.
VALUE_TYPES = frozenset(
    {KeyType.STRING, KeyType.LIST, KeyType.SET, KeyType.HASH, KeyType.ZSET}
)


class KeyDescriptor(BaseModel):
    """
    One key of a scan batch.
    ttl: remaining seconds, -1 when no expiry is set, -2 when the key was gone
    or the lookup failed. Never read -2 as "two seconds left".
    """

    model_config = ConfigDict(frozen=True)

    key: str
    type: KeyType
    ttl: int


class ScanPage(BaseModel):
    keys: List[KeyDescriptor]
    nextCursor: str
    hasMore: bool


class ValueEnvelope(BaseModel):
    type: KeyType
    value: Any
    ttl: Optional[int] = None


class NamespaceNode(BaseModel):
    segment: str
    fullPath: str
    isLeaf: bool
    type: Optional[KeyType] = None
    ttl: Optional[int] = None
    children: List["NamespaceNode"] = Field(default_factory=list)
    descendantKeyCount: int = 0


NamespaceNode.model_rebuild()


class KeyTreePage(BaseModel):
    nodes: List[NamespaceNode]
    nextCursor: str
    hasMore: bool
