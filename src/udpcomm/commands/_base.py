"""Click base classes that add an eager ``--examples`` flag.

``--help`` stays short; ``udpcomm connect --examples`` prints a block of
ready-to-paste invocations and exits.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Append ``--examples`` to ``params`` when an ``examples`` text is given."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples.",
            )
        )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class UdpcommCommand(_ExamplesMixin, click.Command):
    """Leaf command with ``--examples`` support."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class UdpcommGroup(_ExamplesMixin, click.Group):
    """Root group; subcommands declared through it default to :class:`UdpcommCommand`."""

    command_class = UdpcommCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
