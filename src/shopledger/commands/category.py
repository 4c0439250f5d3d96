"""Command group: inventory categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shopledger.commands._base import ShopGroup
from shopledger.services.categories import CategoryService

if TYPE_CHECKING:
    from shopledger.commands._context import AppContext

_CATEGORY_EXAMPLES = """\
  shopledger category add Drinks
  shopledger category rename cat_0a1b2c3d4e Beverages
  shopledger category list"""


@click.group(cls=ShopGroup, examples=_CATEGORY_EXAMPLES)
@click.pass_obj
def category(app: AppContext) -> None:
    """Manage inventory categories."""


@category.command(examples="  shopledger category add Drinks")
@click.argument("name")
@click.pass_obj
def add(app: AppContext, name: str) -> None:
    """Add a category (names are unique regardless of case)."""
    app.emit(CategoryService(app.shop).add_category(name))


@category.command(examples="  shopledger category rename cat_0a1b2c3d4e Beverages")
@click.argument("category_id")
@click.argument("name")
@click.pass_obj
def rename(app: AppContext, category_id: str, name: str) -> None:
    """Rename a category. Items keep the name they were filed under."""
    app.emit(CategoryService(app.shop).rename_category(category_id, name))


@category.command(examples="  shopledger category remove cat_0a1b2c3d4e")
@click.argument("category_id")
@click.pass_obj
def remove(app: AppContext, category_id: str) -> None:
    """Remove a category."""
    app.emit(CategoryService(app.shop).remove_category(category_id))


@category.command(name="list", examples="  shopledger -q category list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List categories with item counts."""
    app.emit(CategoryService(app.shop).list_categories())
