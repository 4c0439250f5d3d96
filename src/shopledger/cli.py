"""``shopledger`` entry point: global flags, settings, and the command groups.

Output flags (``--json``, ``-q``, ``-v``, ``--log-json``) and location flags
(``-c``, ``--root``) are parsed once here into :class:`ShopSettings`. The
shop itself is opened lazily by :class:`AppContext` on the first command
that needs it.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from shopledger import __version__
from shopledger.commands import register_commands
from shopledger.commands._context import AppContext
from shopledger.config.settings import CONFIG_ENV_VAR, ShopSettings

_OUTPUT_FLAGS = (
    click.option("--json", "json_output", is_flag=True, help="Structured JSON output."),
    click.option("-q", "--quiet", is_flag=True, help="Print ids only."),
    click.option("-v", "--verbose", is_flag=True, help="Extra fields and debug logging."),
    click.option("--log-json", is_flag=True, help="Log to stderr as JSON lines."),
)

_LOCATION_FLAGS = (
    click.option(
        "-c",
        "--config",
        "config_path",
        default=None,
        help=f"Config file (overrides {CONFIG_ENV_VAR} and the directory search).",
    ),
    click.option(
        "--root",
        "shop_root",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Shop directory holding .shopledger/ (default: the config file's directory).",
    ),
)


def _global_flags(func: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed((*_OUTPUT_FLAGS, *_LOCATION_FLAGS)):
        func = option(func)
    return func


@click.group(
    name="shopledger",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="shopledger")
@_global_flags
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    shop_root: Path | None,
    **flags: bool,
) -> None:
    """shopledger: inventory, categories, and customers for a small shop."""
    settings = ShopSettings.from_cli(config_path=config_path, shop_root=shop_root, **flags)
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
