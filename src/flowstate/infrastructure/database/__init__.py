"""SQLite database engine and schema via SQLAlchemy Core."""

from flowstate.infrastructure.database.engine import create_db_engine, init_database
from flowstate.infrastructure.database.schema import command_log, log_state, metadata

__all__ = [
    "command_log",
    "create_db_engine",
    "init_database",
    "log_state",
    "metadata",
]
