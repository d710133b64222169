# model/connection.py
from typing import Optional
from pydantic import BaseModel, Field


class ConnectionProfile(BaseModel):
    id: str
    host: str
    port: str
    password: Optional[str] = None
    db: int = 0

    @staticmethod
    def make_id(host: str, port: str) -> str:
        return f"{host}:{port}"


class CreateConnectionRequest(BaseModel):
    host: str = Field(min_length=1)
    port: str = Field(default="6379", pattern=r"^\d{1,5}$")
    password: Optional[str] = None
    db: int = Field(default=0, ge=0)

    def to_profile(self) -> ConnectionProfile:
        return ConnectionProfile(
            id=ConnectionProfile.make_id(self.host, self.port),
            host=self.host,
            port=self.port,
            password=self.password or None,
            db=self.db,
        )
