# controller/connection_controller.py
from typing import List
from fastapi import APIRouter, Depends, status
from model.api import CreateConnectionResponse, DatabaseInfo, OkResponse
from model.connection import CreateConnectionRequest
from service.connection_service import ConnectionService
from util.constants import InternalURIs
from controller.controller_dependencies import get_connection_service

connection_router = APIRouter()


@connection_router.post(
    InternalURIs.CONNECTIONS,
    response_model=CreateConnectionResponse,
    status_code=status.HTTP_200_OK,
)
async def create_connection(
    payload: CreateConnectionRequest,
    service: ConnectionService = Depends(get_connection_service),
) -> CreateConnectionResponse:
    connection_id = await service.create(payload)
    return CreateConnectionResponse(id=connection_id)


@connection_router.get(InternalURIs.CONNECTIONS, response_model=List[str])
async def list_connections(
    service: ConnectionService = Depends(get_connection_service),
) -> List[str]:
    return await service.list_ids()


@connection_router.delete(InternalURIs.CONNECTION, response_model=OkResponse)
async def delete_connection(
    connection_id: str,
    service: ConnectionService = Depends(get_connection_service),
) -> OkResponse:
    await service.delete(connection_id)
    return OkResponse()


@connection_router.get(InternalURIs.DATABASES, response_model=List[DatabaseInfo])
async def list_databases(
    connection_id: str,
    service: ConnectionService = Depends(get_connection_service),
) -> List[DatabaseInfo]:
    return await service.list_databases(connection_id)
