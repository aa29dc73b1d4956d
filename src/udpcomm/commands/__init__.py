"""Subcommand modules for udpcomm.

Provides register_commands() which uses deferred imports to keep
``udpcomm --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from udpcomm.commands.connect import connect
    from udpcomm.commands.run import run
    from udpcomm.commands.unroll import unroll

    cli.add_command(connect)
    cli.add_command(run)
    cli.add_command(unroll)
