"""In-memory catalog of menu items, safe for concurrent terminals.

Every read and write of an item happens under that item's lock. Stock is only
ever sold through ``decrease_stock``, which checks and decrements in one step.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from protean.exceptions import ValidationError

from pos.menu.item import ItemType, MenuItem
from pos.shared.context import in_domain_context
from pos.shared.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class CatalogStore:
    """Menu items keyed by item id."""

    def __init__(self) -> None:
        self._items: dict[str, MenuItem] = {}
        self._index = threading.Lock()
        self._locks = KeyedLocks()

    def put(self, item: MenuItem) -> MenuItem:
        if item.id is None:
            raise ValueError("Item must have an id")
        key = str(item.id)
        with self._locks.hold(key), self._index:
            self._items[key] = item
        return item

    def get(self, item_id) -> MenuItem | None:
        key = str(item_id)
        with self._locks.hold(key):
            return self._items.get(key)

    def remove(self, item_id) -> bool:
        key = str(item_id)
        with self._locks.hold(key), self._index:
            return self._items.pop(key, None) is not None

    def list(self) -> list[MenuItem]:
        with self._index:
            return [*self._items.values()]

    def list_available(self) -> list[MenuItem]:
        return [item for item in self.list() if item.available]

    def list_by_type(self, item_type: ItemType) -> list[MenuItem]:
        return [item for item in self.list() if item.item_type == ItemType(item_type).value]

    def has_stock(self, item_id, quantity) -> bool:
        key = str(item_id)
        with self._locks.hold(key):
            item = self._items.get(key)
            return item is not None and item.has_stock(quantity)

    @in_domain_context
    def decrease_stock(self, item_id, quantity) -> bool:
        """Sell units of an item; ``False`` (and no change) when it cannot."""
        key = str(item_id)
        with self._locks.hold(key):
            item = self._items.get(key)
            if item is None:
                logger.warning("Stock decrease for unknown item", item_id=key)
                return False
            try:
                item.decrease_stock(quantity)
            except ValidationError as exc:
                logger.warning("Stock decrease rejected", item_id=key, quantity=quantity, error=str(exc))
                return False
            return True

    @in_domain_context
    def increase_stock(self, item_id, quantity) -> bool:
        key = str(item_id)
        with self._locks.hold(key):
            item = self._items.get(key)
            if item is None:
                logger.warning("Stock increase for unknown item", item_id=key)
                return False
            try:
                item.increase_stock(quantity)
            except ValidationError as exc:
                logger.warning("Stock increase rejected", item_id=key, quantity=quantity, error=str(exc))
                return False
            return True

    @contextmanager
    def locked(self, *item_ids) -> Iterator[dict[str, MenuItem | None]]:
        """Hold the locks of several items; yields their current aggregates by id."""
        keys = [str(item_id) for item_id in item_ids]
        with self._locks.hold_many(keys):
            yield {key: self._items.get(key) for key in keys}
