"""Command: print the flattened command sequence of a script."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from udpcomm.commands._base import UdpcommCommand

if TYPE_CHECKING:
    from udpcomm.commands._context import AppContext


@click.command(
    cls=UdpcommCommand,
    examples="""\
  udpcomm unroll poll.txt
  udpcomm --json unroll poll.txt""",
)
@click.argument("script", type=click.Path(path_type=Path, dir_okay=False))
@click.pass_obj
def unroll(app: AppContext, script: Path) -> None:
    """Parse SCRIPT and list the commands it expands to, loops unrolled."""
    from udpcomm.services.script import ScriptService

    app.emit(ScriptService(app.observers).unroll_script(script))
