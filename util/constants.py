# util/constants.py
from typing import Final


class InternalURIs:
    API = "/api"
    CONNECTIONS = API + "/connections"
    CONNECTION = CONNECTIONS + "/{connection_id}"
    DATABASES = API + "/databases/{connection_id}"
    KEYS = API + "/keys/{connection_id}/{db}"
    KEY_TREE = KEYS + "/tree"
    KEY_EXPORT = KEYS + "/export"
    KEY = API + "/key/{connection_id}/{db}/{key:path}"
    EXECUTE = API + "/execute/{connection_id}/{db}"


# TTL sentinel for keys that vanished or whose lookup failed.
TTL_MISSING: Final[int] = -2

BINARY_MARKER: Final[str] = "binary"
