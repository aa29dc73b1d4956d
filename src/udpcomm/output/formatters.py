"""ServiceResult formatting for the CLI.

Three modes:
- ``--json``: the full result as JSON
- ``--quiet``: one ``OK: op`` / ``ERROR: op — message`` line
- default: Rich-rendered status line plus operation-specific fields
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.text import Text

from udpcomm.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from udpcomm.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output switches taken from the global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _format_quiet(result)
    return render_result(result, verbose=settings.verbose)


def _format_quiet(result: ServiceResult) -> str:
    if result.ok:
        return f"OK: {result.op}"
    msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {msg}"


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        _status_line(console, result)
        renderer = _OP_RENDERERS.get(result.op, _render_fields)
        renderer(console, result.data)
    else:
        _render_error(console, result, verbose=verbose)
    return get_output(console).rstrip("\n")


def _status_line(console: Console, result: ServiceResult) -> None:
    line = Text("OK", style="udp.ok")
    line.append(f"  {result.op}", style="udp.op")
    console.print(line)


def _field(console: Console, key: str, value: Any) -> None:
    line = Text(f"  {key}: ", style="udp.key")
    line.append(str(value))
    console.print(line)


def _render_fields(console: Console, data: dict[str, Any]) -> None:
    """Generic key-value rendering for ops without a dedicated renderer."""
    for key, value in data.items():
        _field(console, key, value)


def _render_unroll(console: Console, data: dict[str, Any]) -> None:
    _field(console, "script", data.get("script", ""))
    _field(console, "count", data.get("count", 0))
    commands = data.get("commands", [])
    width = len(str(len(commands)))
    for index, command in enumerate(commands, start=1):
        line = Text(f"  {index:>{width}}  ", style="udp.key")
        line.append(command["kind"], style="udp.op")
        if command["argument"]:
            line.append(f" {command['argument']}")
        console.print(line)


def _render_run(console: Console, data: dict[str, Any]) -> None:
    for entry in data.get("scripts", []):
        line = Text("  ")
        line.append("ok  " if entry["ok"] else "fail", style="udp.ok" if entry["ok"] else "udp.error")
        line.append(f"  {entry['script']}", style="udp.list")
        line.append(f"  {entry['executed']}/{entry['total']}", style="udp.key")
        console.print(line)


def _render_session(console: Console, data: dict[str, Any]) -> None:
    _field(console, "mode", data.get("mode", ""))
    _field(console, "sent", data.get("sent", 0))
    _field(console, "received", data.get("received", 0))
    if data.get("errors"):
        _field(console, "errors", data["errors"])
    _field(console, "ended", data.get("reason", ""))


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    error = result.error
    line = Text("ERROR", style="udp.error")
    line.append(f"  {result.op}", style="udp.op")
    line.append(f"  {error.message if error else 'Unknown error'}")
    console.print(line)
    if error is None:
        return
    _field(console, "code", error.code)
    if verbose:
        for key, value in error.detail.items():
            _field(console, key, value)


_OP_RENDERERS = {
    "unroll": _render_unroll,
    "run": _render_run,
    "session": _render_session,
}
