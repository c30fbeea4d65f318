"""SQLAlchemy Core table definitions for the flowstate database.

The database stores the command log only; the domain model is never
persisted directly and is always rebuilt by replaying ``redo_command``s.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

command_log = Table(
    "command_log",
    metadata,
    Column("position", Integer, primary_key=True, autoincrement=False),
    Column("undo_command", Text, nullable=False),  # JSON
    Column("redo_command", Text, nullable=False),  # JSON
    Column("kind", Text, nullable=False),  # redo command kind, for inspection
    Column("recorded", Text, nullable=False),
)

log_state = Table(
    "log_state",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Integer, nullable=False),
)

APPLIED_COUNT_KEY = "applied_count"
