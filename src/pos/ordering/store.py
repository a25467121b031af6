"""In-memory order book, keyed by order id.

The store does not know about order states. Rules such as "only drafts can be
deleted" belong to ``OrderService``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from pos.ordering.order import Order, OrderStatus
from pos.shared.locking import KeyedLocks


class OrderStore:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._index = threading.Lock()
        self._locks = KeyedLocks()

    def put(self, order: Order) -> Order:
        if order.id is None:
            raise ValueError("Order must have an id")
        key = str(order.id)
        with self._locks.hold(key), self._index:
            self._orders[key] = order
        return order

    def get(self, order_id) -> Order | None:
        key = str(order_id)
        with self._locks.hold(key):
            return self._orders.get(key)

    def remove(self, order_id) -> bool:
        key = str(order_id)
        with self._locks.hold(key), self._index:
            return self._orders.pop(key, None) is not None

    def list(self) -> list[Order]:
        with self._index:
            return [*self._orders.values()]

    def list_by_table(self, table_no: int) -> list[Order]:
        return [order for order in self.list() if order.table_no == table_no]

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        wanted = OrderStatus(status).value
        return [order for order in self.list() if order.status == wanted]

    @contextmanager
    def locked(self, order_id) -> Iterator[Order | None]:
        """Hold an order's lock; yields the live aggregate, or ``None`` if unknown."""
        key = str(order_id)
        with self._locks.hold(key):
            yield self._orders.get(key)
