# main.py
import logging
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from fastapi.responses import JSONResponse
from util.errors import ConsoleError
from util.logger import init_logger
from controller.controller_dependencies import (
    close_dependencies,
    get_connection_repository,
    get_registry,
)
from service.connection_service import ConnectionService
import routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    # Saved connections come back without a ping; clients connect on first use.
    await ConnectionService(get_registry(), get_connection_repository()).restore()
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        try:
            await close_dependencies()
        except Exception as e:
            print("Error closing Redis clients:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


async def console_error_handler(request: Request, exc: ConsoleError) -> JSONResponse:
    logger.warning(
        "request.failed path=%s code=%s status=%d",
        request.url.path,
        exc.code,
        exc.http_status,
    )
    return JSONResponse(
        status_code=exc.http_status,
        content={"ok": False, "error": exc.code, "message": exc.message},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="webredis", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ALLOWED_ORIGIN],
        allow_credentials=settings.ALLOWED_ORIGIN != "*",
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    app.add_exception_handler(ConsoleError, console_error_handler)
    routes.register_routes(app)
    return app


app: FastAPI = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
