"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy observer/plugin setup, channel
construction, script reporting, and centralized result emission.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from udpcomm.output.console import TrafficPrinter, create_live_console
from udpcomm.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pathlib import Path

    from udpcomm.config.models import ChannelConfig
    from udpcomm.config.settings import UdpcommSettings
    from udpcomm.domain.commands import ChannelRole
    from udpcomm.infrastructure.channel import UdpChannel
    from udpcomm.plugins.observers import Observers
    from udpcomm.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered on first use so ``--help`` and ``--version``
    never load entry points.
    """

    def __init__(self, settings: UdpcommSettings) -> None:
        self.settings = settings
        self._observers: Observers | None = None
        # With --json, stdout carries the result payload; traffic goes to stderr.
        self.printer = TrafficPrinter(create_live_console(stderr=settings.json_output))

        from udpcomm.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def observers(self) -> Observers:
        """Observer facade with the console plugin and entry-point plugins loaded."""
        if self._observers is None:
            from udpcomm.plugins.builtins.console import ConsolePlugin
            from udpcomm.plugins.manager import PluginManager
            from udpcomm.plugins.observers import Observers

            pm = PluginManager()
            pm.register_plugin(ConsolePlugin(self.printer), name="console")
            pm.discover_and_load()
            self._observers = Observers(pm)
        return self._observers

    def build_channel(self, config: ChannelConfig, role: ChannelRole) -> UdpChannel:
        """Create (but do not open) a UDP channel from *config*."""
        from udpcomm.infrastructure.channel import UdpChannel

        return UdpChannel(
            config.host,
            config.port,
            config.server_port,
            return_port=config.return_port,
            role=role,
            line_ending=config.line_ending,
            timeout_ms=config.read_timeout_ms,
            buffer_size=config.buffer_size,
        )

    def print_channel_settings(self, config: ChannelConfig, scripts: list[Path]) -> None:
        """Echo the resolved connection settings before opening the channel."""
        self.printer.setting("ClientHostName", config.host)
        self.printer.setting("ClientPortNumber", config.port)
        self.printer.setting("ServerPortNumber", config.server_port)
        self.printer.setting("ClientReturnAddressPortNumber", config.return_port or "ephemeral")
        self.printer.setting("LineEnding", config.line_ending)
        for index, script in enumerate(scripts, start=1):
            self.printer.notice(f"Using ScriptFile={script} ({index}/{len(scripts)})")

    def report_scripts(self, results: list[ServiceResult]) -> bool:
        """Print a notice per script result.  Returns True if every script succeeded."""
        all_ok = True
        total = len(results)
        for index, result in enumerate(results, start=1):
            script = result.data.get("script", "?")
            if result.data.get("skipped"):
                self.printer.notice(f"ScriptFile {script} ({index}/{total}) has no commands, skipping script")
            elif result.ok:
                self.printer.notice(
                    f"Finished ScriptFile {script} ({index}/{total}), {result.data.get('executed', 0)} command(s)"
                )
            else:
                all_ok = False
                message = result.error.message if result.error else "Unknown error"
                click.echo(f"ERROR: ScriptFile {script} ({index}/{total}) failed: {message}", err=True)
        return all_ok

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
