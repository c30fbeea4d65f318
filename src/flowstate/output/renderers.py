"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from flowstate.output.console import create_console, get_output, style_for_load

if TYPE_CHECKING:
    from rich.console import Console

    from flowstate.services.result import ServiceResult

# Weekday columns shown by the forecast grid unless --verbose asks for the whole window.
GRID_DAYS = 15


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    if result.op == "show":
        return "\n".join(str(t["id"]) for t in result.data.get("tasks", []))
    if result.op == "history":
        return f"{result.data.get('applied_count', 0)}/{result.data.get('history_length', 0)}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="flow.ok")
    op = Text(f"  {result.op}", style="flow.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="flow.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="flow.id")
    elif key in ("title", "name"):
        v = Text(str(value), style="flow.title")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _cell(hundredths: int) -> str:
    """Compact day cell: ``1`` for a full day, ``.50`` for half, blank for none."""
    if hundredths <= 0:
        return ""
    days, rest = divmod(hundredths, 100)
    if rest == 0:
        return str(days)
    return f"{days or ''}.{rest:02d}"


def _grid_days(data: dict[str, Any], *, verbose: bool) -> list[date]:
    days = [date.fromisoformat(d) for d in data.get("days", [])]
    if verbose:
        return days
    today = date.fromisoformat(data["today"])
    return [d for d in days if d >= today and d.weekday() < 5][:GRID_DAYS]


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="flow.error")
    op = Text(f"  {result.op}", style="flow.op")
    code = Text(f" [{err.code}]" if err else "", style="flow.key")
    console.print(label, op, code, Text(" - "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render invoke/undo/redo results."""
    _status_line(console, result)
    d = result.data
    for key in ("command", "inverse"):
        if key in d and (key == "command" or verbose):
            _field(console, key, d[key])
    if "applied_count" in d:
        _field(console, "history", f"{d['applied_count']}/{d.get('history_length', d['applied_count'])}")


# ── Query renderers ───────────────────────────────────────────────────


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the command log with the undo cursor marked."""
    entries = result.data.get("entries", [])
    if not entries:
        console.print(Text("History is empty.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="flow.id")
    table.add_column("Command")
    table.add_column("Undo")
    table.add_column("State")
    if verbose:
        table.add_column("Recorded", style="dim")

    for entry in entries:
        state = Text("applied", style="flow.ok") if entry["applied"] else Text("undone", style="dim")
        row: list[Any] = [str(entry["position"] + 1), entry["command"], entry["undo"], state]
        if verbose:
            row.append(entry.get("timestamp", ""))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('applied_count', 0)} of {len(entries)} commands applied")


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the project summary: teams, resources, tasks."""
    d = result.data

    for team in d.get("teams", []):
        members = ", ".join(team["resources"]) or "-"
        console.print(Text(f"{team['name']}", style="flow.title"), Text(f"  {members}", style="flow.key"))

    tasks = d.get("tasks", [])
    if tasks:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("ID", style="flow.id", justify="right", no_wrap=True)
        table.add_column("Ticket")
        table.add_column("Title", style="flow.title")
        table.add_column("Duration", justify="right")
        table.add_column("Left", justify="right")
        table.add_column("Assignee")
        table.add_column("Labels")
        if verbose:
            table.add_column("Watchers", style="dim")
        for task in tasks:
            row = [
                str(task["id"]),
                task["ticket"],
                task["title"],
                task["duration"],
                task["remaining"],
                task["assignee"] or "-",
                ", ".join(task["labels"]),
            ]
            if verbose:
                row.append(", ".join(task["watchers"]))
            table.add_row(*row)
        console.print(table)

    filters = d.get("filters", [])
    if filters:
        console.print()
        for f in filters:
            star = "*" if f["is_favorite"] else " "
            console.print(f" {star} {f['name']}: {', '.join(f['labels'])}")

    for m in d.get("milestones", []):
        console.print(Text(f"  {m['date']}  {m['title']}", style="flow.milestone"))

    console.print(Text(f"\nnext task id: {d.get('next_task_id', 1)}", style="flow.key"))


def _render_forecast(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the allocation grid: one row per task, one column per day."""
    d = result.data
    days = _grid_days(d, verbose=verbose)
    today = d["today"]
    milestones: dict[str, list[str]] = d.get("milestones", {})
    absences: dict[str, dict[str, int]] = d.get("absences", {})

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Task", style="flow.id", no_wrap=True)
    table.add_column("Who", no_wrap=True)
    table.add_column("Left", justify="right")
    table.add_column("Done by", no_wrap=True)
    for day in days:
        iso = day.isoformat()
        header = day.strftime("%d")
        if iso in milestones:
            header += "*"
        style = "flow.today" if iso == today else ("flow.weekend" if day.weekday() >= 5 else "")
        table.add_column(Text(header, style=style), justify="right", no_wrap=True)

    for row in d.get("rows", []):
        alloc: dict[str, int] = row["allocation"]
        cells: list[Any] = [
            str(row["task_id"]),
            row["resource"] or Text("unassigned", style="flow.warning"),
            row["remaining"],
            row["finish"] or "-",
        ]
        for day in days:
            amount = alloc.get(day.isoformat(), 0)
            cells.append(Text(_cell(amount), style=style_for_load(amount)))
        table.add_row(*cells)

    for name, per_day in absences.items():
        away: list[Any] = ["", name, "", Text("away", style="flow.absence")]
        away.extend(Text(_cell(per_day.get(day.isoformat(), 0)), style="flow.absence") for day in days)
        table.add_row(*away)

    console.print(table)
    shown = [f"{iso} {', '.join(titles)}" for iso, titles in milestones.items()]
    if shown:
        console.print(Text("  * " + "; ".join(shown), style="flow.milestone"))
    conflicts = d.get("worklogs_on_others_tasks", {})
    for name, per_day in conflicts.items():
        total = _cell(sum(per_day.values()))
        console.print(Text(f"  {name} logged {total}d on tasks owned by others", style="flow.warning"))
    if verbose:
        console.print(Text(f"  window {d['start_date']} .. {d['end_date']}", style="dim"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "invoke": _render_mutation,
    "undo": _render_mutation,
    "redo": _render_mutation,
    "history": _render_history,
    "show": _render_show,
    "forecast": _render_forecast,
}
