"""Click base classes for shopledger commands.

Commands and groups take an ``examples`` block that an eager ``--examples``
flag prints, so ``--help`` stays short. Groups also answer to the short
aliases in :data:`COMMAND_ALIASES` (``item ls``, ``customer rm``) and list
the ones they support under an "Aliases" heading in their help.
"""

from __future__ import annotations

from typing import Any

import click

COMMAND_ALIASES: dict[str, str] = {
    "ls": "list",
    "rm": "remove",
    "new": "add",
    "show": "get",
}


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


def _examples_option() -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_print_examples,
        help="Show usage examples.",
    )


class ShopCommand(click.Command):
    """Command with an optional ``--examples`` block."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params = super().get_params(ctx)
        return [*params, _examples_option()] if self.examples else params


class ShopGroup(click.Group):
    """Group with ``--examples`` and alias resolution for its subcommands.

    ``command_class = ShopCommand`` lets every subcommand take ``examples``
    without an explicit ``cls=``.
    """

    command_class = ShopCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params = super().get_params(ctx)
        return [*params, _examples_option()] if self.examples else params

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is None and cmd_name in COMMAND_ALIASES:
            command = super().get_command(ctx, COMMAND_ALIASES[cmd_name])
        return command

    def aliases(self) -> list[tuple[str, str]]:
        """``(alias, command)`` pairs that resolve in this group."""
        return [
            (alias, target)
            for alias, target in COMMAND_ALIASES.items()
            if target in self.commands and alias not in self.commands
        ]

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows = self.aliases()
        if rows:
            with formatter.section("Aliases"):
                formatter.write_dl(rows)
        super().format_epilog(ctx, formatter)
