# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    HOST: str = Field(default="127.0.0.1", validation_alias="HOST")
    PORT: int = Field(default=8080, validation_alias="PORT")

    # CORS
    ALLOWED_ORIGIN: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")

    # Saved connections (SQLite file)
    CONNECTIONS_DB_PATH: str = Field(
        default="data/connections.db", validation_alias="CONNECTIONS_DB_PATH"
    )

    # Backing store client knobs
    REDIS_SOCKET_TIMEOUT: float = Field(
        default=5.0, validation_alias="REDIS_SOCKET_TIMEOUT"
    )
    REDIS_CONNECT_TIMEOUT: float = Field(
        default=5.0, validation_alias="REDIS_CONNECT_TIMEOUT"
    )
    # Used when the server refuses CONFIG GET databases
    DEFAULT_DATABASE_COUNT: int = Field(
        default=16, validation_alias="DEFAULT_DATABASE_COUNT"
    )

    # Keyspace iteration
    SCAN_DEFAULT_COUNT: int = Field(default=100, validation_alias="SCAN_DEFAULT_COUNT")
    SCAN_MAX_COUNT: int = Field(default=1000, validation_alias="SCAN_MAX_COUNT")
    KEY_DELIMITER: str = Field(default=":", validation_alias="KEY_DELIMITER")

    # Logging knobs
    LOGGER_NAME: str = "webredis"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
