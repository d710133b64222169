# model/api.py
from typing import Any, List
from pydantic import BaseModel, Field


class CreateConnectionResponse(BaseModel):
    id: str


class DatabaseInfo(BaseModel):
    index: int
    keys: int


class SetKeyRequest(BaseModel):
    # Type stays a plain string so unknown tags surface as unsupported_type.
    type: str
    value: Any = None
    # Seconds; fractional values are floored, 0 or negative means no expiry.
    ttl: float = 0


class OkResponse(BaseModel):
    ok: bool = True


class DeleteKeyResponse(BaseModel):
    deleted: int


class ExecuteCommandRequest(BaseModel):
    command: str = Field(min_length=1)
    args: List[str] = Field(default_factory=list)


class ExecuteCommandResponse(BaseModel):
    result: Any
