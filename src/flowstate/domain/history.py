"""Linear undo/redo history of applied commands.

The log is an ordered list of ``(undo_command, redo_command)`` pairs plus a
cursor, ``applied_count``, marking how many pairs are currently in effect.
Doing something new after an undo discards every pair past the cursor.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flowstate.domain.commands import BaseCommand
from flowstate.domain.errors import InvalidStateError
from flowstate.domain.interpreter import apply_command, record_command
from flowstate.domain.model import DomainModel


@dataclass(frozen=True)
class CommandRecord:
    undo_command: BaseCommand
    redo_command: BaseCommand


@dataclass
class CommandLog:
    """Undo/redo stack with branch-discarding semantics."""

    records: list[CommandRecord] = field(default_factory=list)
    applied_count: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.applied_count <= len(self.records):
            msg = f"applied_count {self.applied_count} outside 0..{len(self.records)}"
            raise ValueError(msg)

    @property
    def can_undo(self) -> bool:
        return self.applied_count > 0

    @property
    def can_redo(self) -> bool:
        return self.applied_count < len(self.records)

    def invoke(self, model: DomainModel, command: BaseCommand) -> BaseCommand:
        """Apply *command* and record it; returns the generated inverse.

        The recorded redo carries the ids allocated on this first run.
        """
        inverse, redo = record_command(model, command)
        del self.records[self.applied_count :]
        self.records.append(CommandRecord(undo_command=inverse, redo_command=redo))
        self.applied_count = len(self.records)
        return inverse

    def undo(self, model: DomainModel) -> BaseCommand:
        """Revert the most recent applied command; returns the command that ran."""
        if not self.can_undo:
            raise InvalidStateError("No more commands to undo")
        command = self.records[self.applied_count - 1].undo_command
        apply_command(model, command)
        self.applied_count -= 1
        return command

    def redo(self, model: DomainModel) -> BaseCommand:
        """Re-apply the next undone command; returns the command that ran."""
        if not self.can_redo:
            raise InvalidStateError("No more commands to redo")
        command = self.records[self.applied_count].redo_command
        apply_command(model, command)
        self.applied_count += 1
        return command

    def replay(self) -> DomainModel:
        """Rebuild a model from the applied prefix of the log.

        Counters are reset afterwards so new entities never reuse an id
        that appears in the replayed state.
        """
        model = DomainModel()
        for record in self.records[: self.applied_count]:
            apply_command(model, record.redo_command)
        model.reset_counters()
        return model
