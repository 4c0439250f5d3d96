"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shopledger.domain.identity import format_phone
from shopledger.output.console import create_console, get_output, style_for_type
from shopledger.output.money import DEFAULT_CURRENCY, format_money

if TYPE_CHECKING:
    from rich.console import Console

    from shopledger.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, currency=currency)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    ids = result.record_ids
    if ids:
        return "\n".join(ids)
    return result.record_id or f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="shop.ok")
    console.print(Text.assemble(label, Text(f"  {result.op}", style="shop.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="shop.id")
    elif key == "name":
        v = Text(str(value), style="shop.name")
    else:
        v = Text(str(value))
    console.print(Text.assemble(Text(f"  {key}: ", style="shop.key"), v))


def _money(value: Any, currency: str) -> Text:
    return Text(format_money(value, currency), style="shop.money")


def _absent() -> Text:
    return Text("—", style="shop.absent")


def _pager_line(console: Console, data: dict[str, Any], noun: str) -> None:
    total = data.get("total", 0)
    if not total:
        console.print(f"\nNo {noun} found")
        return
    pages = data.get("number_of_pages", 1)
    sizes = ", ".join(str(s) for s in data.get("page_size_options", []))
    console.print(
        f"\n{data.get('first', 0)}-{data.get('last', 0)} of {total} {noun}"
        f"  ·  page {data.get('page', 0) + 1}/{pages}"
        f"  ·  page sizes: {sizes}"
    )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="shop.error")
    op = Text(f"  {result.op}", style="shop.op")
    code = Text(f" [{err.code}]" if err else "", style="shop.key")
    console.print(Text.assemble(label, op, code, " — ", msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Inventory renderers ───────────────────────────────────────────────


def _item_table(items: list[dict[str, Any]], *, currency: str, verbose: bool = False) -> Table:
    """Build a Rich Table for a page of inventory items."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="shop.id", no_wrap=True)
    table.add_column("Name", style="shop.name")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Qty", justify="right")
    table.add_column("Buying", justify="right")
    table.add_column("Selling", justify="right")
    table.add_column("Stock value", justify="right")
    if verbose:
        table.add_column("Created", style="dim")

    for item in items:
        item_type = str(item.get("type", ""))
        is_product = item_type == "product"
        unit = item.get("measuringUnit") or ""
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            Text(item_type, style=style_for_type(item_type)),
            str(item.get("category", "")),
            f"{item.get('quantity', 0)} {unit}".strip() if is_product else _absent(),
            _money(item.get("buyingPrice"), currency) if is_product else _absent(),
            _money(item.get("sellingPrice"), currency),
            _money(item.get("stockValue"), currency) if is_product else _absent(),
        ]
        if verbose:
            row.append(str(item.get("createdAt", "")))
        table.add_row(*row)

    return table


def _render_item_page(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    items = result.data.get("items", [])
    if items:
        console.print(_item_table(items, currency=currency, verbose=verbose))
    _pager_line(console, result.data, "items")


def _render_item_panel(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    item = result.data.get("item", {})
    item_type = str(item.get("type", ""))
    lines = [f"type: {item_type}", f"category: {item.get('category') or '-'}"]
    if item_type == "product":
        unit = item.get("measuringUnit") or ""
        lines.extend(
            [
                f"quantity: {item.get('quantity', 0)} {unit}".rstrip(),
                f"buying price: {format_money(item.get('buyingPrice'), currency)}",
                f"selling price: {format_money(item.get('sellingPrice'), currency)}",
                f"stock value: {format_money(item.get('stockValue'), currency)}",
            ]
        )
        pending = item.get("pendingSellingPrice")
        if pending is not None:
            lines.append(
                f"pending price: {format_money(pending, currency)} "
                f"at stock {item.get('pendingPriceActivationQuantity')}"
            )
    else:
        lines.append(f"charges: {format_money(item.get('charges'), currency)}")
    lines.append(f"created: {item.get('createdAt', '')}")

    title = f"{item.get('id', '?')} — {item.get('name', '')}"
    style = style_for_type(item_type)
    console.print(Panel("\n".join(lines), title=title, border_style=style or "dim", expand=False))


def _render_item_mutation(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    """Render add_item / update_item / restock results."""
    _status_line(console, result)
    item = result.data.get("item", {})
    for key in ("id", "name", "type", "category"):
        if item.get(key):
            _field(console, key, item[key])
    if item.get("type") == "product":
        _field(console, "quantity", item.get("quantity", 0))
        _field(console, "stock_value", format_money(item.get("stockValue"), currency))
    _field(console, "selling_price", format_money(item.get("sellingPrice"), currency))
    if "fields_changed" in result.data:
        _field(console, "fields_changed", ", ".join(result.data["fields_changed"]))
    if "added" in result.data:
        _field(console, "added", result.data["added"])


def _render_summary(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    d = result.data
    currency = d.get("currency") or currency
    table = Table(show_header=False, pad_edge=False, expand=False, box=None)
    table.add_column(style="shop.key")
    table.add_column(justify="right")
    table.add_row("Items", str(d.get("total_items", 0)))
    table.add_row("Stock count", str(d.get("total_stock_count", 0)))
    table.add_row("Estimated sales", _money(d.get("estimated_sales"), currency))
    table.add_row("Total stock value", _money(d.get("total_stock_value"), currency))
    title = f"Inventory — {d['category']}" if d.get("category") else "Inventory"
    console.print(Panel(table, title=title, expand=False))


# ── Category renderers ────────────────────────────────────────────────


def _render_category_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    _status_line(console, result)
    category = result.data.get("category", {})
    _field(console, "id", category.get("id", ""))
    _field(console, "name", category.get("name", ""))
    if "old_name" in result.data:
        _field(console, "old_name", result.data["old_name"])


def _render_categories(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    rows = result.data.get("categories", [])
    if not rows:
        console.print("No categories")
        return
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="shop.id", no_wrap=True)
    table.add_column("Name", style="shop.name")
    table.add_column("Items", justify="right")
    for row in rows:
        table.add_row(
            str(row.get("id", "")), str(row.get("name", "")), str(row.get("itemCount", 0))
        )
    console.print(table)


# ── Customer renderers ────────────────────────────────────────────────


def _customer_table(customers: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="shop.id", no_wrap=True)
    table.add_column("Name", style="shop.name")
    table.add_column("Phone", no_wrap=True)
    table.add_column("Email")
    table.add_column("Orders", justify="right")
    if verbose:
        table.add_column("Address")

    for customer in customers:
        row: list[Any] = [
            str(customer.get("id", "")),
            str(customer.get("name", "")),
            format_phone(str(customer.get("phone", ""))),
            customer.get("email") or _absent(),
            str(customer.get("totalOrders", 0)),
        ]
        if verbose:
            row.append(customer.get("address") or _absent())
        table.add_row(*row)
    return table


def _render_customer_page(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    customers = result.data.get("items", [])
    if customers:
        console.print(_customer_table(customers, verbose=verbose))
    _pager_line(console, result.data, "customers")


def _render_customer_panel(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    customer = result.data.get("customer", {})
    lines = [
        f"phone: {format_phone(str(customer.get('phone', '')))}",
        f"email: {customer.get('email') or '-'}",
        f"address: {customer.get('address') or '-'}",
        f"total orders: {customer.get('totalOrders', 0)}",
    ]
    recent = customer.get("recentOrders", [])
    if recent:
        lines.append("")
        lines.append("recent orders:")
        for order in recent:
            lines.append(
                f"  {order.get('id', '')}  {str(order.get('date', ''))[:10]}  "
                f"{format_money(order.get('grandTotal'), currency)}  {order.get('status', '')}"
            )
    title = f"{customer.get('id', '?')} — {customer.get('name', '')}"
    console.print(Panel("\n".join(lines), title=title, expand=False))


def _render_customer_mutation(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    currency: str = DEFAULT_CURRENCY,
) -> None:
    """Render create_customer / update_customer / record_order results."""
    _status_line(console, result)
    customer = result.data.get("customer", {})
    _field(console, "id", customer.get("id", ""))
    _field(console, "name", customer.get("name", ""))
    _field(console, "phone", format_phone(str(customer.get("phone", ""))))
    _field(console, "total_orders", customer.get("totalOrders", 0))
    order = result.data.get("order")
    if order:
        _field(console, "order_id", order.get("id", ""))
        _field(console, "grand_total", format_money(order.get("grandTotal"), currency))
    if "fields_changed" in result.data:
        _field(console, "fields_changed", ", ".join(result.data["fields_changed"]))


# ── Removal / generic ─────────────────────────────────────────────────


def _render_removal(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    _status_line(console, result)
    _field(console, "id", result.data.get("id", ""))
    if result.data.get("name"):
        _field(console, "name", result.data["name"])
    _field(console, "removed", "yes" if result.data.get("removed") else "no")


def _render_generic(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Inventory
    "add_item": _render_item_mutation,
    "update_item": _render_item_mutation,
    "restock": _render_item_mutation,
    "remove_item": _render_removal,
    "get_item": _render_item_panel,
    "list_items": _render_item_page,
    "inventory_summary": _render_summary,
    # Categories
    "add_category": _render_category_mutation,
    "rename_category": _render_category_mutation,
    "remove_category": _render_removal,
    "list_categories": _render_categories,
    # Customers
    "create_customer": _render_customer_mutation,
    "update_customer": _render_customer_mutation,
    "record_order": _render_customer_mutation,
    "delete_customer": _render_removal,
    "get_customer": _render_customer_panel,
    "lookup_customer": _render_customer_panel,
    "list_customers": _render_customer_page,
}
