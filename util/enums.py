# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    code: str
    http_status: int


class ErrorMessage(Enum):
    CONSOLE_ERROR = ErrorInfo("console_error", status.HTTP_400_BAD_REQUEST)
    CONNECTION_ERROR = ErrorInfo("connection_error", status.HTTP_503_SERVICE_UNAVAILABLE)
    CONNECTION_NOT_FOUND = ErrorInfo("connection_not_found", status.HTTP_404_NOT_FOUND)
    UNSUPPORTED_TYPE = ErrorInfo("unsupported_type", status.HTTP_400_BAD_REQUEST)
    ENCODING_ERROR = ErrorInfo("encoding_error", status.HTTP_400_BAD_REQUEST)
    TTL_NOT_APPLIED = ErrorInfo("ttl_not_applied", status.HTTP_500_INTERNAL_SERVER_ERROR)
    COMMAND_ERROR = ErrorInfo("command_error", status.HTTP_400_BAD_REQUEST)
    KEY_NOT_FOUND = ErrorInfo("key_not_found", status.HTTP_404_NOT_FOUND)
