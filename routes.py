# routes.py
from fastapi import FastAPI
from controller.command_controller import command_router
from controller.connection_controller import connection_router
from controller.key_controller import key_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(connection_router)
    app.include_router(key_router)
    app.include_router(command_router)
