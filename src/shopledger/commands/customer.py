"""Command group: the customer book."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from shopledger.commands._base import ShopGroup
from shopledger.domain.types import OrderStatus
from shopledger.services.customers import CustomerService

if TYPE_CHECKING:
    from shopledger.commands._context import AppContext

_CUSTOMER_EXAMPLES = """\
  shopledger customer add "Jane Doe" 0712-345-678 --email jane@example.com
  shopledger customer find --phone 0712345678
  shopledger customer order cus_0a1b2c3d4e 2500 --items 3
  shopledger customer list --search jane --sort total-orders --direction desc"""

_SORT_KEYS = ["name", "phone", "email", "address", "total-orders"]


@click.group(cls=ShopGroup, examples=_CUSTOMER_EXAMPLES)
@click.pass_obj
def customer(app: AppContext) -> None:
    """Manage customers and their order history."""


@customer.command(
    examples="""\
  shopledger customer add "Jane Doe" 0712345678
  shopledger customer add "Acme Ltd" "0722 000 111" --email orders@acme.co.ke --address Nairobi"""
)
@click.argument("name")
@click.argument("phone")
@click.option("--email", default=None, help="Email address.")
@click.option("--address", default=None, help="Postal or street address.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    phone: str,
    email: str | None,
    address: str | None,
) -> None:
    """Register a customer (phone numbers must be unique)."""
    data: dict[str, Any] = {"name": name, "phone": phone, "email": email, "address": address}
    app.emit(CustomerService(app.shop).create_customer(data))


@customer.command(examples="  shopledger customer update cus_0a1b2c3d4e --email new@example.com")
@click.argument("customer_id")
@click.option("--name", default=None)
@click.option("--phone", default=None)
@click.option("--email", default=None)
@click.option("--address", default=None)
@click.pass_obj
def update(
    app: AppContext,
    customer_id: str,
    name: str | None,
    phone: str | None,
    email: str | None,
    address: str | None,
) -> None:
    """Change a customer's contact details."""
    options = {"name": name, "phone": phone, "email": email, "address": address}
    changes = {key: value for key, value in options.items() if value is not None}
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(CustomerService(app.shop).update_customer(customer_id, changes))


@customer.command(examples="  shopledger customer remove cus_0a1b2c3d4e")
@click.argument("customer_id")
@click.pass_obj
def remove(app: AppContext, customer_id: str) -> None:
    """Delete a customer."""
    app.emit(CustomerService(app.shop).delete_customer(customer_id))


@customer.command(examples="  shopledger customer get cus_0a1b2c3d4e")
@click.argument("customer_id")
@click.pass_obj
def get(app: AppContext, customer_id: str) -> None:
    """Show one customer with recent orders."""
    app.emit(CustomerService(app.shop).get_customer(customer_id))


@customer.command(
    examples="""\
  shopledger customer find --phone "0712 345 678"
  shopledger customer find --email JANE@example.com"""
)
@click.option("--phone", default=None, help="Phone number in any format.")
@click.option("--email", default=None, help="Email address (any case).")
@click.pass_obj
def find(app: AppContext, phone: str | None, email: str | None) -> None:
    """Look a customer up by phone or email."""
    app.emit(CustomerService(app.shop).lookup(phone=phone, email=email))


@customer.command(
    examples="""\
  shopledger customer order cus_0a1b2c3d4e 2500
  shopledger customer order cus_0a1b2c3d4e 1200.50 --status paid --items 4"""
)
@click.argument("customer_id")
@click.argument("grand_total", type=click.FloatRange(min=0))
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus]),
    default=OrderStatus.PENDING.value,
    show_default=True,
)
@click.option("--items", "item_count", type=click.IntRange(min=0), default=None)
@click.pass_obj
def order(
    app: AppContext,
    customer_id: str,
    grand_total: float,
    status: str,
    item_count: int | None,
) -> None:
    """Record an order in a customer's history."""
    summary = {"grand_total": grand_total, "status": status, "items": item_count}
    app.emit(CustomerService(app.shop).record_order(customer_id, summary))


@customer.command(
    name="list",
    examples="""\
  shopledger customer list
  shopledger customer list --search nairobi --sort name --direction desc
  shopledger --json customer list --page 2 --page-size 5""",
)
@click.option("--search", "query", default=None, help="Match name, email, phone, or address.")
@click.option("--sort", type=click.Choice(_SORT_KEYS), default=None, help="Sort key.")
@click.option("--direction", type=click.Choice(["asc", "desc"]), default=None)
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--page-size", type=click.IntRange(min=1), default=None)
@click.pass_obj
def list_cmd(
    app: AppContext,
    query: str | None,
    sort: str | None,
    direction: str | None,
    page: int,
    page_size: int | None,
) -> None:
    """List customers one page at a time."""
    app.emit(
        CustomerService(app.shop).list_customers(
            query=query,
            sort=sort.replace("-", "_") if sort else None,
            direction=direction,
            page=page - 1,
            page_size=page_size,
        )
    )
