"""Custom Click base classes and parameter types shared by every command.

FlowCommand and FlowGroup accept an ``examples`` parameter; passing
``--examples`` on the command line prints them and exits, which keeps
``--help`` short.
"""

from __future__ import annotations

import re
from typing import Any

import click

from flowstate.domain.duration import Duration


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class FlowCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class FlowGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = FlowCommand`` so every subcommand accepts
    ``examples=`` without an explicit ``cls=``.
    """

    command_class = FlowCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


_DURATION_RE = re.compile(r"^(?P<days>\d+)?(?:\.(?P<fraction>\d{1,2}))?d?$")


class DurationType(click.ParamType):
    """``2``, ``2.5``, ``0.25`` or ``3d``: days with up to two decimals."""

    name = "duration"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Duration:
        if isinstance(value, Duration):
            return value
        text = str(value).strip()
        match = _DURATION_RE.match(text)
        if not text or match is None or (match["days"] is None and match["fraction"] is None):
            self.fail(f"{value!r} is not a duration (expected e.g. 2, 2.5 or 0.25)", param, ctx)
        days = int(match["days"] or 0)
        fraction = int((match["fraction"] or "0").ljust(2, "0"))
        return Duration(days=days, fraction=fraction)


DURATION = DurationType()
