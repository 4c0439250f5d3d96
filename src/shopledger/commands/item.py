"""Command group: inventory items, restocking, and the stock summary."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from shopledger.commands._base import ShopGroup
from shopledger.services.inventory import InventoryService

if TYPE_CHECKING:
    from shopledger.commands._context import AppContext

_ITEM_EXAMPLES = """\
  shopledger item add "Rice" --category Grains --quantity 20 --buying-price 80 --selling-price 100
  shopledger item add "Delivery" --type service --charges 150
  shopledger item list --search rice --sort stock-value --direction desc
  shopledger item restock itm_0a1b2c3d4e 10 --selling-price 110 --pending
  shopledger item summary"""

_SORT_KEYS = [
    "name",
    "category",
    "quantity",
    "buying-price",
    "stock-value",
    "selling-price",
    "created-at",
]


@click.group(cls=ShopGroup, examples=_ITEM_EXAMPLES)
@click.pass_obj
def item(app: AppContext) -> None:
    """Manage inventory products and services."""


@item.command(
    examples="""\
  shopledger item add "Rice" --quantity 20 --buying-price 80 --selling-price 100 --unit kg
  shopledger item add "Haircut" --type service --charges 300 --category Salon"""
)
@click.argument("name")
@click.option(
    "--type",
    "item_type",
    type=click.Choice(["product", "service"]),
    default="product",
    show_default=True,
    help="Item kind.",
)
@click.option("--category", default="", help="Category name.")
@click.option("--quantity", type=click.IntRange(min=0), default=0, help="Units in stock.")
@click.option("--buying-price", type=float, default=0.0, help="Cost per unit.")
@click.option("--selling-price", type=float, default=0.0, help="Price per unit.")
@click.option("--unit", "measuring_unit", default="", help="Measuring unit (kg, pcs, ...).")
@click.option("--charges", type=float, default=None, help="Service charge.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    item_type: str,
    category: str,
    quantity: int,
    buying_price: float,
    selling_price: float,
    measuring_unit: str,
    charges: float | None,
) -> None:
    """Add a product or a service."""
    data: dict[str, Any] = {"type": item_type, "name": name, "category": category}
    if item_type == "product":
        data.update(
            quantity=quantity,
            buying_price=buying_price,
            selling_price=selling_price,
            measuring_unit=measuring_unit,
        )
    else:
        data["charges"] = charges if charges is not None else selling_price
    app.emit(InventoryService(app.shop).add_item(data))


@item.command(
    examples="""\
  shopledger item update itm_0a1b2c3d4e --selling-price 120
  shopledger item update itm_0a1b2c3d4e --type service --charges 50"""
)
@click.argument("item_id")
@click.option("--name", default=None, help="New name.")
@click.option("--type", "item_type", type=click.Choice(["product", "service"]), default=None)
@click.option("--category", default=None, help="New category name.")
@click.option("--quantity", type=click.IntRange(min=0), default=None)
@click.option("--buying-price", type=float, default=None)
@click.option("--selling-price", type=float, default=None)
@click.option("--unit", "measuring_unit", default=None)
@click.option("--charges", type=float, default=None)
@click.pass_obj
def update(
    app: AppContext,
    item_id: str,
    name: str | None,
    item_type: str | None,
    category: str | None,
    quantity: int | None,
    buying_price: float | None,
    selling_price: float | None,
    measuring_unit: str | None,
    charges: float | None,
) -> None:
    """Change fields of an item."""
    options = {
        "name": name,
        "type": item_type,
        "category": category,
        "quantity": quantity,
        "buying_price": buying_price,
        "selling_price": selling_price,
        "measuring_unit": measuring_unit,
        "charges": charges,
    }
    changes = {key: value for key, value in options.items() if value is not None}
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(InventoryService(app.shop).update_item(item_id, changes))


@item.command(examples="  shopledger item remove itm_0a1b2c3d4e")
@click.argument("item_id")
@click.pass_obj
def remove(app: AppContext, item_id: str) -> None:
    """Remove an item."""
    app.emit(InventoryService(app.shop).remove_item(item_id))


@item.command(
    examples="""\
  shopledger item restock itm_0a1b2c3d4e 10
  shopledger item restock itm_0a1b2c3d4e 10 --buying-price 85 --selling-price 110
  shopledger item restock itm_0a1b2c3d4e 10 --selling-price 110 --pending"""
)
@click.argument("item_id")
@click.argument("quantity", type=int)
@click.option("--buying-price", type=float, default=None, help="New cost per unit.")
@click.option("--selling-price", type=float, default=None, help="New price per unit.")
@click.option(
    "--pending",
    is_flag=True,
    help="Apply the new selling price only once current stock sells down.",
)
@click.pass_obj
def restock(
    app: AppContext,
    item_id: str,
    quantity: int,
    buying_price: float | None,
    selling_price: float | None,
    pending: bool,
) -> None:
    """Add stock to a product."""
    app.emit(
        InventoryService(app.shop).restock(
            item_id,
            quantity,
            buying_price=buying_price,
            selling_price=selling_price,
            apply_immediately=not pending,
        )
    )


@item.command(examples="  shopledger --json item get itm_0a1b2c3d4e")
@click.argument("item_id")
@click.pass_obj
def get(app: AppContext, item_id: str) -> None:
    """Show one item."""
    app.emit(InventoryService(app.shop).get_item(item_id))


@item.command(
    name="list",
    examples="""\
  shopledger item list
  shopledger item list --search grains --sort quantity
  shopledger item list --sort created-at --page 2 --page-size 5
  shopledger -q item list --category Drinks""",
)
@click.option("--search", "query", default=None, help="Case-insensitive text filter.")
@click.option("--category", default=None, help="Only items in this category.")
@click.option("--sort", type=click.Choice(_SORT_KEYS), default=None, help="Sort key.")
@click.option(
    "--direction",
    type=click.Choice(["asc", "desc"]),
    default=None,
    help="Sort direction (default depends on the key).",
)
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--page-size", type=click.IntRange(min=1), default=None)
@click.pass_obj
def list_cmd(
    app: AppContext,
    query: str | None,
    category: str | None,
    sort: str | None,
    direction: str | None,
    page: int,
    page_size: int | None,
) -> None:
    """List inventory items one page at a time."""
    app.emit(
        InventoryService(app.shop).list_items(
            query=query,
            category=category,
            sort=sort.replace("-", "_") if sort else None,
            direction=direction,
            page=page - 1,
            page_size=page_size,
        )
    )


@item.command(examples="  shopledger item summary --category Grains")
@click.option("--category", default=None, help="Limit totals to one category.")
@click.pass_obj
def summary(app: AppContext, category: str | None) -> None:
    """Show stock count, estimated sales, and stock value."""
    app.emit(InventoryService(app.shop).summary(category=category))
