"""Subcommand modules for shopledger.

register_commands() uses deferred imports to keep ``shopledger --help``
fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups on the root CLI group."""
    from shopledger.commands.category import category
    from shopledger.commands.customer import customer
    from shopledger.commands.item import item

    cli.add_command(item)
    cli.add_command(category)
    cli.add_command(customer)
