# controller/command_controller.py
from fastapi import APIRouter, Depends, Path
from model.api import ExecuteCommandRequest, ExecuteCommandResponse
from service.keyspace_service import KeyspaceService
from util.constants import InternalURIs
from controller.controller_dependencies import get_keyspace_service

command_router = APIRouter()


@command_router.post(InternalURIs.EXECUTE, response_model=ExecuteCommandResponse)
async def execute_command(
    connection_id: str,
    payload: ExecuteCommandRequest,
    db: int = Path(..., ge=0),
    service: KeyspaceService = Depends(get_keyspace_service),
) -> ExecuteCommandResponse:
    """Raw command escape hatch: no allow-list, the operator is trusted."""
    result = await service.execute(connection_id, db, payload.command, payload.args)
    return ExecuteCommandResponse(result=result)
