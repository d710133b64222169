# repository/namespaces.py
from typing import Final

# SQLite table holding saved connection profiles.
CONNECTIONS_TABLE: Final[str] = "connections"

# Commands that change per-connection session state. After one of these runs
# through the command gateway the pooled client for that database is dropped.
SESSION_STATE_COMMANDS: Final[frozenset] = frozenset(
    {"SELECT", "AUTH", "HELLO", "RESET", "CLIENT", "QUIT", "SWAPDB"}
)
