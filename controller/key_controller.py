# controller/key_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import StreamingResponse
from config.settings import settings
from model.api import DeleteKeyResponse, OkResponse, SetKeyRequest
from model.keys import KeyTreePage, ScanPage, ValueEnvelope
from service.keyspace_service import KeyspaceService
from util.constants import InternalURIs
from controller.controller_dependencies import get_keyspace_service

key_router = APIRouter()

DbIndex = Path(..., ge=0)
Cursor = Query("0", pattern=r"^\d+$")
Count = Query(settings.SCAN_DEFAULT_COUNT, ge=1, le=settings.SCAN_MAX_COUNT)
Match = Query(None, description="Glob pattern forwarded to SCAN MATCH")


@key_router.get(InternalURIs.KEYS, response_model=ScanPage)
async def list_keys(
    connection_id: str,
    db: int = DbIndex,
    cursor: str = Cursor,
    count: int = Count,
    match: Optional[str] = Match,
    service: KeyspaceService = Depends(get_keyspace_service),
) -> ScanPage:
    return await service.list_keys(connection_id, db, cursor, count, match)


@key_router.get(InternalURIs.KEY_TREE, response_model=KeyTreePage)
async def key_tree(
    connection_id: str,
    db: int = DbIndex,
    cursor: str = Cursor,
    count: int = Count,
    match: Optional[str] = Match,
    search: Optional[str] = Query(None),
    service: KeyspaceService = Depends(get_keyspace_service),
) -> KeyTreePage:
    return await service.key_tree(connection_id, db, cursor, count, match, search)


@key_router.get(InternalURIs.KEY_EXPORT)
async def export_keys(
    connection_id: str,
    db: int = DbIndex,
    count: int = Count,
    match: Optional[str] = Match,
    service: KeyspaceService = Depends(get_keyspace_service),
):
    # Resolve the connection up front so an unknown id is a 404, not a stream.
    await service.ensure_connection(connection_id)
    generator = service.export_keys(connection_id, db, count=count, match=match)
    return StreamingResponse(generator, media_type="application/x-ndjson")


@key_router.get(InternalURIs.KEY, response_model=ValueEnvelope)
async def get_key(
    connection_id: str,
    key: str,
    db: int = DbIndex,
    service: KeyspaceService = Depends(get_keyspace_service),
) -> ValueEnvelope:
    return await service.get_key(connection_id, db, key)


@key_router.post(InternalURIs.KEY, response_model=OkResponse)
async def set_key(
    connection_id: str,
    key: str,
    payload: SetKeyRequest,
    db: int = DbIndex,
    service: KeyspaceService = Depends(get_keyspace_service),
) -> OkResponse:
    await service.set_key(
        connection_id, db, key, payload.type, payload.value, payload.ttl
    )
    return OkResponse()


@key_router.delete(InternalURIs.KEY, response_model=DeleteKeyResponse)
async def delete_key(
    connection_id: str,
    key: str,
    db: int = DbIndex,
    service: KeyspaceService = Depends(get_keyspace_service),
) -> DeleteKeyResponse:
    return DeleteKeyResponse(deleted=await service.delete_key(connection_id, db, key))
