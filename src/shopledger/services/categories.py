"""CategoryService — add, rename, remove, and list inventory categories."""

from __future__ import annotations

from shopledger.domain.errors import ShopError
from shopledger.services.base import BaseService
from shopledger.services.result import ServiceResult


class CategoryService(BaseService):
    """Handles inventory categories for the CLI."""

    def add_category(self, name: str) -> ServiceResult:
        op = "add_category"
        warnings: list[str] = []
        try:
            category = self._shop.catalog.add_category(name)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_category_change",
            {"action": "added", "category_id": category.id, "name": category.name},
            warnings,
        )
        return ServiceResult(
            ok=True, op=op, data={"category": category.to_json_dict()}, warnings=warnings
        )

    def rename_category(self, category_id: str, name: str) -> ServiceResult:
        """Rename a category. Items keep the old category name."""
        op = "rename_category"
        warnings: list[str] = []
        catalog = self._shop.catalog
        try:
            old_name = catalog.get_category(category_id).name
            category = catalog.edit_category(category_id, name)
        except ShopError as exc:
            return self._failure(op, exc)

        still_tagged = len(catalog.items_in_category(old_name))
        if still_tagged and old_name.casefold() != category.name.casefold():
            warnings.append(f"{still_tagged} item(s) still use the old name {old_name!r}")
        self._dispatch_event(
            "post_category_change",
            {"action": "renamed", "category_id": category.id, "name": category.name},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"category": category.to_json_dict(), "old_name": old_name},
            warnings=warnings,
        )

    def remove_category(self, category_id: str) -> ServiceResult:
        """Remove a category. Removing an unknown id succeeds with a warning."""
        op = "remove_category"
        warnings: list[str] = []
        existing = self._shop.catalog.find_category(category_id)
        if existing is None:
            warnings.append(f"No category with id {category_id!r}; nothing removed")
            return ServiceResult(
                ok=True, op=op, data={"id": category_id, "removed": False}, warnings=warnings
            )
        try:
            self._shop.catalog.remove_category(category_id)
        except ShopError as exc:
            return self._failure(op, exc)

        self._dispatch_event(
            "post_category_change",
            {"action": "removed", "category_id": category_id, "name": existing.name},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": category_id, "name": existing.name, "removed": True},
            warnings=warnings,
        )

    def list_categories(self) -> ServiceResult:
        """All categories with the number of items filed under each."""
        catalog = self._shop.catalog
        rows = [
            {
                **category.to_json_dict(),
                "itemCount": len(catalog.items_in_category(category.name)),
            }
            for category in catalog.categories()
        ]
        return ServiceResult(
            ok=True, op="list_categories", data={"categories": rows, "count": len(rows)}
        )
