"""Rich/JSON rendering of CommandResult.

JSON mode dumps the envelope verbatim. Human mode prints an OK/ERROR
status line, then a declaration table for ``inspect``, or indented
key-value fields for everything else.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from interactor.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from interactor.output.result import CommandResult


def format_result(result: CommandResult, *, json_output: bool = False) -> str:
    """Format a CommandResult for display.

    Args:
        result: The command result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return json.dumps(result.model_dump(mode="python"), indent=2, default=repr)

    console = create_console()
    if not result.ok:
        _render_error(result, console)
    elif result.op == "inspect":
        _render_inspect(result, console)
    else:
        _render_generic(result, console)
    return get_output(console).rstrip("\n")


def _status_line(console: Console, result: CommandResult) -> None:
    console.print(Text("OK", style="ia.ok"), Text(f"  {result.op}", style="ia.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"), default=repr)
    console.print(Text(f"  {key}: ", style="ia.key"), Text(str(value)), sep="")


def _render_generic(result: CommandResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_inspect(result: CommandResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, "interaction", result.data.get("interaction", ""))
    attributes = result.data.get("attributes", [])
    if not attributes:
        console.print(Text("  (no attributes declared)", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="ia.field", no_wrap=True)
    table.add_column("Kind", style="ia.kind")
    table.add_column("Allow nil")
    table.add_column("Default")
    table.add_column("Validations")
    for attr in attributes:
        rules = ", ".join(v["rule"] for v in attr.get("validations", []))
        table.add_row(
            attr["name"],
            attr["kind"],
            "yes" if attr.get("allow_nil") else "no",
            repr(attr["default"]) if "default" in attr else "",
            rules,
        )
    console.print(table)


def _render_error(result: CommandResult, console: Console) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ia.error")
    op = Text(f"  {result.op}", style="ia.op")
    console.print(label, op, Text(" - "), Text(msg), sep="")
    if err is None:
        return
    for field, messages in err.detail.get("errors", {}).items():
        for message in messages:
            console.print(Text(f"  {field}: ", style="ia.field"), Text(message), sep="")
