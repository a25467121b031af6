"""Menu management — browsing, creating, editing and restocking menu items.

Validation problems come back as ``MenuResult`` values for the screens to
show; they are never raised past this layer.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from pos.menu.item import ItemType, MenuItem
from pos.menu.store import CatalogStore
from pos.shared.context import in_domain_context
from pos.shared.errors import first_error

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MenuResult:
    """Outcome of a menu edit."""

    success: bool
    message: str
    item: MenuItem | None = None


class MenuService:
    def __init__(self, catalog: CatalogStore) -> None:
        self.catalog = catalog

    # -------------------------------------------------------------------
    # Browsing
    # -------------------------------------------------------------------
    def all_items(self) -> list[MenuItem]:
        return self.catalog.list()

    def available_items(self) -> list[MenuItem]:
        return self.catalog.list_available()

    def items_by_type(self, item_type: ItemType) -> list[MenuItem]:
        return self.catalog.list_by_type(item_type)

    def get_item(self, item_id) -> MenuItem | None:
        return self.catalog.get(item_id)

    def has_stock(self, item_id, quantity) -> bool:
        return self.catalog.has_stock(item_id, quantity)

    # -------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------
    @in_domain_context
    def create_food_item(self, name, price, stock_qty, cuisine, is_vegetarian=False) -> MenuResult:
        try:
            item = MenuItem.food_item(name, price, stock_qty, cuisine, is_vegetarian)
        except ValidationError as exc:
            logger.warning("Food item rejected", name=name, error=str(exc))
            return MenuResult(False, first_error(exc))

        self.catalog.put(item)
        logger.info("Food item added", item_id=str(item.id), name=item.name)
        return MenuResult(True, "Item created", item)

    @in_domain_context
    def create_drink_item(self, name, price, stock_qty, is_alcoholic=False, temperature="Room") -> MenuResult:
        try:
            item = MenuItem.drink_item(name, price, stock_qty, is_alcoholic, temperature)
        except ValidationError as exc:
            logger.warning("Drink item rejected", name=name, error=str(exc))
            return MenuResult(False, first_error(exc))

        self.catalog.put(item)
        logger.info("Drink item added", item_id=str(item.id), name=item.name)
        return MenuResult(True, "Item created", item)

    @in_domain_context
    def update_item(self, item_id, name, price, stock_qty) -> MenuResult:
        with self.catalog.locked(item_id) as items:
            item = items[str(item_id)]
            if item is None:
                return MenuResult(False, f"Menu item not found with ID: {item_id}")
            try:
                item.update_details(name, price, stock_qty)
            except ValidationError as exc:
                logger.warning("Menu item update rejected", item_id=str(item_id), error=str(exc))
                return MenuResult(False, first_error(exc), item)

        logger.info("Menu item updated", item_id=str(item_id), price=price, stock_qty=stock_qty)
        return MenuResult(True, "Item updated", item)

    @in_domain_context
    def restock(self, item_id, quantity) -> MenuResult:
        if not self.catalog.increase_stock(item_id, quantity):
            return MenuResult(False, "Restock rejected: unknown item or non-positive quantity")
        return MenuResult(True, "Item restocked", self.catalog.get(item_id))

    @in_domain_context
    def delete_item(self, item_id) -> bool:
        removed = self.catalog.remove(item_id)
        if removed:
            logger.info("Menu item deleted", item_id=str(item_id))
        return removed
