"""Rich Console factory and theme for shopledger output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SHOP_THEME = Theme(
    {
        "shop.ok": "bold green",
        "shop.error": "bold red",
        "shop.warning": "bold yellow",
        "shop.op": "bold cyan",
        "shop.key": "dim",
        "shop.id": "bold blue",
        "shop.name": "bold",
        "shop.money": "green",
        "shop.absent": "dim",
        "shop.type.product": "cyan",
        "shop.type.service": "magenta",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "product": "shop.type.product",
    "service": "shop.type.service",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=SHOP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(item_type: str) -> str:
    """Return the Rich style name for an item type."""
    return _TYPE_STYLES.get(item_type, "")
