# util/errors.py
from util.enums import ErrorMessage


class ConsoleError(Exception):
    """
    Base for failures of a single console operation.
    - `info` carries the stable error code and the HTTP status for the API layer.
    - Only StoreConnectionError is terminal for the connection; the rest are
      scoped to the operation that raised them.
    """

    info: ErrorMessage = ErrorMessage.CONSOLE_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.info.value.code

    @property
    def http_status(self) -> int:
        return self.info.value.http_status


class StoreConnectionError(ConsoleError):
    """Store unreachable or authentication refused."""

    info = ErrorMessage.CONNECTION_ERROR


class ConnectionNotFoundError(ConsoleError):
    info = ErrorMessage.CONNECTION_NOT_FOUND

    def __init__(self, connection_id: str) -> None:
        self.connection_id = connection_id
        super().__init__(f"Connection not found: {connection_id}")


class UnsupportedTypeError(ConsoleError):
    """Value type outside string/list/set/hash/zset. Raised before any write."""

    info = ErrorMessage.UNSUPPORTED_TYPE

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported key type: {type_name}")


class EncodingError(ConsoleError):
    """Wire payload does not match the declared type. Raised before any write."""

    info = ErrorMessage.ENCODING_ERROR


class TTLApplicationError(ConsoleError):
    info = ErrorMessage.TTL_NOT_APPLIED

    def __init__(self, key: str, ttl: int, detail: str = "") -> None:
        self.key = key
        self.ttl = ttl
        msg = f"Value for '{key}' was written but TTL {ttl}s was not applied"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class CommandError(ConsoleError):
    """Error text returned by the store, passed through verbatim."""

    info = ErrorMessage.COMMAND_ERROR


class KeyNotFoundError(ConsoleError):
    info = ErrorMessage.KEY_NOT_FOUND

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")


class PartialMetadataError(ConsoleError):
    """
    TYPE or TTL lookup failed for one key of a scan batch.
    Never propagated: the scanner logs it and substitutes sentinels.
    """

    def __init__(self, key: str, lookup: str, detail: str = "") -> None:
        self.key = key
        self.lookup = lookup
        super().__init__(f"{lookup} lookup failed for '{key}': {detail}")
