"""Command: run script files against a channel, then exit."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import click

from udpcomm.commands._base import UdpcommCommand
from udpcomm.config.models import MAXIMUM_PORT_NUMBER

if TYPE_CHECKING:
    from udpcomm.commands._context import AppContext


@click.command(
    cls=UdpcommCommand,
    examples="""\
  udpcomm run init.txt
  udpcomm run setup.txt poll.txt --host 10.0.0.5 --port 5000
  udpcomm run poll.txt --return-port 8890 --server-port 8888
  udpcomm --json run poll.txt""",
)
@click.argument("scripts", nargs=-1, required=True, type=click.Path(path_type=Path, dir_okay=False))
@click.option("-n", "--host", default=None, help="Where to send datagrams.")
@click.option("-p", "--port", type=click.IntRange(0, MAXIMUM_PORT_NUMBER), default=None, help="Destination port.")
@click.option(
    "-d", "--server-port", type=click.IntRange(0, MAXIMUM_PORT_NUMBER), default=None,
    help="Local port to receive datagrams on.",
)
@click.option(
    "-g", "--return-port", type=click.IntRange(0, MAXIMUM_PORT_NUMBER), default=None,
    help="Local port datagrams are sent from.",
)
@click.option(
    "-e", "--line-ending", type=click.Choice(["none", "cr", "lf", "crlf"]), default=None,
    help="Line ending appended to every sent string.",
)
@click.pass_obj
def run(
    app: AppContext,
    scripts: tuple[Path, ...],
    host: str | None,
    port: int | None,
    server_port: int | None,
    return_port: int | None,
    line_ending: str | None,
) -> None:
    """Run SCRIPTS in sorted order over a duplex channel, then exit.

    A failing script does not stop the ones after it, but the command
    exits non-zero if any script failed.
    """
    from udpcomm.domain.commands import ChannelRole
    from udpcomm.domain.errors import ChannelError
    from udpcomm.services.result import ServiceError, ServiceResult
    from udpcomm.services.script import ScriptService

    config = app.settings.channel_with(
        host=host,
        port=port,
        server_port=server_port,
        return_port=return_port,
        line_ending=line_ending,
    )
    script_paths = sorted(set(scripts))
    app.print_channel_settings(config, script_paths)

    channel = app.build_channel(config, ChannelRole.DUPLEX)
    try:
        channel.open()
    except ChannelError as exc:
        app.emit(ServiceResult(ok=False, op="run", error=ServiceError.from_exception(exc)))
        return

    try:
        time.sleep(app.settings.session.open_settle_ms / 1000)
        results = ScriptService(app.observers).run_scripts(channel, script_paths)
        all_ok = app.report_scripts(results)
    finally:
        channel.close()

    data = {
        "scripts": [
            {
                "script": r.data.get("script"),
                "ok": r.ok,
                "executed": r.data.get("executed", 0),
                "total": r.data.get("total", 0),
            }
            for r in results
        ],
        "failed": sum(1 for r in results if not r.ok),
    }
    if all_ok:
        warnings = [w for r in results for w in r.warnings]
        app.emit(ServiceResult(ok=True, op="run", data=data, warnings=warnings))
    else:
        failures = [r for r in results if not r.ok]
        first = failures[0].error
        error = ServiceError(
            code=first.code if first else "SCRIPT_ERROR",
            message=f"{len(failures)} of {len(results)} script(s) failed",
            detail={"first_failure": first.message if first else None},
        )
        app.emit(ServiceResult(ok=False, op="run", data=data, error=error))
