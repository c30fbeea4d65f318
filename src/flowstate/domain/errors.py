"""Domain error taxonomy for command application.

Every failure the interpreter or the command log can report is a
:class:`CommandError` carrying a stable ``code``. The service layer turns
these into ``ServiceError`` payloads; nothing here is fatal to the process.
"""

from __future__ import annotations

from typing import Any


class CommandError(Exception):
    """Base class for recoverable command failures."""

    code = "COMMAND_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFoundError(CommandError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"


class AlreadyExistsError(CommandError):
    """A create or rename would duplicate an existing name."""

    code = "ALREADY_EXISTS"


class InvalidStateError(CommandError):
    """The command is well-formed but the current state forbids it."""

    code = "INVALID_STATE"


class CompoundCommandError(CommandError):
    """A sub-command of a compound command failed; nothing was applied."""

    code = "COMPOUND_FAILURE"

    def __init__(self, index: int, kind: str, cause: CommandError) -> None:
        super().__init__(
            f"Compound command aborted at step {index} ({kind}): {cause.message}",
            index=index,
            kind=kind,
            cause_code=cause.code,
        )
        self.index = index
        self.cause = cause
