"""Root CLI group for udpcomm with global flags and command registration."""

from __future__ import annotations

import os
import sys

import click

from udpcomm import __version__
from udpcomm.commands import register_commands
from udpcomm.commands._base import UdpcommGroup
from udpcomm.commands._context import AppContext
from udpcomm.config.settings import UdpcommSettings


@click.group(
    cls=UdpcommGroup,
    invoke_without_command=True,
    examples="""\
  udpcomm connect --host 10.0.0.5 --port 5000 --server-port 5001
  udpcomm --config lab.toml connect --script init.txt --sync
  udpcomm run poll.txt
  udpcomm --json unroll poll.txt""",
)
@click.version_option(version=__version__, prog_name="udpcomm")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """udpcomm — scriptable UDP datagram communication."""
    ctx.ensure_object(dict)
    settings = UdpcommSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)


def main() -> None:
    """Console-script entry point.

    Session reader threads may still be blocked on stdin or the socket when
    the command returns, so the process exits without interpreter teardown.
    """
    code: int = 0
    try:
        cli.main(prog_name="udpcomm", standalone_mode=True)
    except SystemExit as exc:
        if isinstance(exc.code, int):
            code = exc.code
        elif exc.code is not None:
            click.echo(exc.code, err=True)
            code = 1
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)
