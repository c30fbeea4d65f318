"""Output mode selection for ServiceResult.

Three modes, chosen by the global CLI flags:
- ``--json``: the whole result as indented JSON
- ``--quiet``: one status line, or ids for list payloads
- default: Rich rendering dispatched on ``result.op``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from flowstate.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from flowstate.services.result import ServiceResult


class OutputSettings(BaseModel):
    """The output-related subset of the global flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
