"""CommandLogStore: whole-log persistence of undo/redo history.

Persisted layout: ``applied_count`` plus the ordered list of
``{undo_command, redo_command}`` pairs, each command stored as the JSON
produced by :func:`flowstate.domain.commands.dump_command`.

Every :meth:`CommandLogStore.save` replaces the stored log in a single
transaction; a crash mid-save leaves the previous log intact.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from flowstate.domain.commands import dump_command, load_command
from flowstate.domain.history import CommandLog, CommandRecord
from flowstate.infrastructure.database.engine import init_database
from flowstate.infrastructure.database.schema import APPLIED_COUNT_KEY, command_log, log_state

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class CommandLogStore:
    """Reads and writes a :class:`CommandLog` in a SQLite database."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, db_path: Path) -> CommandLogStore:
        """Open (creating if needed) the database at *db_path*."""
        return cls(init_database(db_path))

    @property
    def engine(self) -> Engine:
        return self._engine

    def save(self, log: CommandLog) -> None:
        """Replace the stored log with *log*."""
        recorded = datetime.now(UTC).isoformat()
        rows = [
            {
                "position": position,
                "undo_command": dump_command(record.undo_command),
                "redo_command": dump_command(record.redo_command),
                "kind": getattr(record.redo_command, "kind", "unknown"),
                "recorded": recorded,
            }
            for position, record in enumerate(log.records)
        ]
        with self._engine.begin() as conn:
            conn.execute(delete(command_log))
            if rows:
                conn.execute(insert(command_log), rows)
            conn.execute(delete(log_state).where(log_state.c.key == APPLIED_COUNT_KEY))
            conn.execute(insert(log_state).values(key=APPLIED_COUNT_KEY, value=log.applied_count))
        logger.debug("Saved command log: %d records, %d applied", len(rows), log.applied_count)

    def load(self) -> CommandLog:
        """Load the stored log; an empty database yields an empty log."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(command_log.c.undo_command, command_log.c.redo_command).order_by(
                    command_log.c.position
                )
            ).fetchall()
            state = conn.execute(
                select(log_state.c.value).where(log_state.c.key == APPLIED_COUNT_KEY)
            ).first()

        records = [
            CommandRecord(undo_command=load_command(row.undo_command), redo_command=load_command(row.redo_command))
            for row in rows
        ]
        applied_count = state.value if state is not None else len(records)
        return CommandLog(records=records, applied_count=applied_count)

    def close(self) -> None:
        self._engine.dispose()
