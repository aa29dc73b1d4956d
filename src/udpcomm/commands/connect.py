"""Command: open a channel, run scripts, then start an interactive session."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import click

from udpcomm.commands._base import UdpcommCommand
from udpcomm.config.models import MAXIMUM_PORT_NUMBER

if TYPE_CHECKING:
    from udpcomm.commands._context import AppContext

_PORT = click.IntRange(0, MAXIMUM_PORT_NUMBER)

_BANNERS: dict[str, str] = {
    "send-only": "enter desired string and press enter to send strings, or press CTRL+C to quit",
    "receive-only": "messages received will be displayed, or press CTRL+C to quit",
    "synchronous": "enter desired string and press enter to send strings, or press CTRL+C to quit",
    "async-duplex": "enter desired string and press enter to send strings, or press CTRL+C to quit",
}


@click.command(
    cls=UdpcommCommand,
    examples="""\
  udpcomm connect
  udpcomm connect --host 192.168.1.20 --port 8887 --server-port 8888
  udpcomm connect --line-ending crlf --script init.txt --sync
  udpcomm connect --receive-only --server-port 9000
  udpcomm connect -s -n device.local -p 5000""",
)
@click.option("-n", "--host", "--client-host-name", "host", default=None, help="Where to send datagrams.")
@click.option("-p", "--port", "--client-port-number", "port", type=_PORT, default=None, help="Port to send datagrams to.")
@click.option(
    "-d", "--server-port", "--server-port-number", "server_port", type=_PORT, default=None,
    help="Local port to receive datagrams on.",
)
@click.option(
    "-g", "--return-port", "--client-return-address-port-number", "return_port", type=_PORT, default=None,
    help="Local port datagrams are sent from.",
)
@click.option(
    "-e", "--line-ending", type=click.Choice(["none", "cr", "lf", "crlf"]), default=None,
    help="Line ending appended to every sent string.",
)
@click.option(
    "-c", "--script", "scripts", multiple=True, type=click.Path(path_type=Path, dir_okay=False),
    help="Script file to run after the channel opens (repeatable).",
)
@click.option("-s", "--send-only", is_flag=True, help="Only send; never read the channel.")
@click.option("--receive-only", is_flag=True, help="Only display received datagrams.")
@click.option("--sync", "synchronous", is_flag=True, help="Send a line, then read one reply.")
@click.pass_obj
def connect(
    app: AppContext,
    host: str | None,
    port: int | None,
    server_port: int | None,
    return_port: int | None,
    line_ending: str | None,
    scripts: tuple[Path, ...],
    send_only: bool,
    receive_only: bool,
    synchronous: bool,
) -> None:
    """Open a UDP channel, run scripts, and start an interactive session.

    Without a mode flag the session is fully asynchronous: typed lines are
    sent while received datagrams are printed as they arrive.
    """
    from udpcomm.domain.commands import role_for_mode, select_mode
    from udpcomm.domain.errors import ChannelError
    from udpcomm.services.result import ServiceError, ServiceResult
    from udpcomm.services.script import ScriptService
    from udpcomm.services.session import Session, SessionScheduler

    try:
        mode = select_mode(send_only=send_only, receive_only=receive_only, synchronous=synchronous)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    config = app.settings.channel_with(
        host=host,
        port=port,
        server_port=server_port,
        return_port=return_port,
        line_ending=line_ending,
    )
    script_paths = sorted(set(scripts))
    app.print_channel_settings(config, script_paths)

    channel = app.build_channel(config, role_for_mode(mode))
    try:
        channel.open()
    except ChannelError as exc:
        app.emit(ServiceResult(ok=False, op="connect", error=ServiceError.from_exception(exc)))
        return
    # Closed on every exit path, including Ctrl+C before the session starts.
    try:
        time.sleep(app.settings.session.open_settle_ms / 1000)
        app.printer.notice(f"Successfully opened UDP port {channel.name}")

        if script_paths:
            results = ScriptService(app.observers).run_scripts(channel, script_paths)
            app.report_scripts(results)
        time.sleep(app.settings.session.post_script_settle_ms / 1000)
        channel.flush_rx_tx()

        app.printer.notice(f"Beginning {mode} communication loop, {_BANNERS[mode]}")
        scheduler = SessionScheduler(Session(channel=channel, mode=mode, observers=app.observers))
        result = scheduler.run()
    finally:
        channel.close()
    app.printer.notice("Exiting udpcomm")
    app.emit(result)
