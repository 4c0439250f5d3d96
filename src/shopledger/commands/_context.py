"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the Shop lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopledger.config.logging import configure_logging
from shopledger.domain.errors import PersistenceError
from shopledger.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from shopledger.config.settings import ShopSettings
    from shopledger.infrastructure.shop import Shop
    from shopledger.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The shop is created on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: ShopSettings) -> None:
        self.settings = settings
        self._shop: Shop | None = None
        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            quiet=settings.quiet,
            shop_name=settings.shop.name,
        )

    @property
    def shop(self) -> Shop:
        """The shop container (created lazily on first access)."""
        if self._shop is None:
            from shopledger.infrastructure.shop import Shop

            try:
                shop = Shop(self.settings)
            except PersistenceError as exc:
                raise click.ClickException(exc.message) from exc
            shop.init_event_bus()
            self._shop = shop
        return self._shop

    def close(self) -> None:
        if self._shop is not None:
            self._shop.close()
            self._shop = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they do not
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            currency=self.settings.shop.currency,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(result.exit_code)
