"""Order lifecycle service — what the order screens call.

Each operation takes the order's lock, applies one aggregate method and turns
any rejection into an ``OrderResult``. Payment is not here; it goes through
``pos.payments.dispatcher.PaymentDispatcher``.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from pos.menu.store import CatalogStore
from pos.ordering.order import Order, OrderStatus, OrderView
from pos.ordering.store import OrderStore
from pos.shared.context import in_domain_context
from pos.shared.errors import first_error

logger = structlog.get_logger(__name__)

ORDER_NOT_FOUND = "Order not found"


@dataclass(frozen=True)
class OrderResult:
    """Outcome of an order operation."""

    success: bool
    message: str
    order: Order | None = None


class OrderService:
    def __init__(self, orders: OrderStore, catalog: CatalogStore) -> None:
        self.orders = orders
        self.catalog = catalog

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id) -> Order | None:
        return self.orders.get(order_id)

    def view(self, order_id) -> OrderView | None:
        """Consistent copy of an order, taken under its lock."""
        with self.orders.locked(order_id) as order:
            return order.snapshot() if order is not None else None

    def all_orders(self) -> list[Order]:
        return self.orders.list()

    def orders_for_table(self, table_no: int) -> list[Order]:
        return self.orders.list_by_table(table_no)

    def draft_orders(self) -> list[Order]:
        return self.orders.list_by_status(OrderStatus.DRAFT)

    def paid_orders(self) -> list[Order]:
        return self.orders.list_by_status(OrderStatus.PAID)

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    @in_domain_context
    def create_order(self, table_no) -> OrderResult:
        try:
            order = Order.start(table_no)
        except ValidationError as exc:
            logger.warning("Order rejected", table_no=table_no, error=str(exc))
            return OrderResult(False, first_error(exc))

        self.orders.put(order)
        logger.info("Order started", order_id=str(order.id), table_no=order.table_no)
        return OrderResult(True, "Order created", order)

    @in_domain_context
    def add_item(self, order_id, item_id, quantity) -> OrderResult:
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            item = self.catalog.get(item_id)
            if item is None:
                return OrderResult(False, "Menu item not found", order)
            try:
                order.add_line(item, quantity)
            except ValidationError as exc:
                logger.warning(
                    "Failed to add item to order",
                    order_id=str(order_id),
                    item_id=str(item_id),
                    quantity=quantity,
                    error=str(exc),
                )
                return OrderResult(False, first_error(exc), order)

        logger.info("Item added to order", order_id=str(order_id), item_id=str(item_id), quantity=quantity)
        return OrderResult(True, "Item added", order)

    @in_domain_context
    def remove_item(self, order_id, item_id) -> OrderResult:
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            try:
                order.remove_line(item_id)
            except ValidationError as exc:
                logger.warning(
                    "Failed to remove item from order",
                    order_id=str(order_id),
                    item_id=str(item_id),
                    error=str(exc),
                )
                return OrderResult(False, first_error(exc), order)

        logger.info("Item removed from order", order_id=str(order_id), item_id=str(item_id))
        return OrderResult(True, "Item removed", order)

    @in_domain_context
    def update_item_quantity(self, order_id, item_id, quantity) -> OrderResult:
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            item = self.catalog.get(item_id)
            if item is None and order.is_draft:
                return OrderResult(False, "Menu item not found", order)
            try:
                order.update_line_quantity(item_id, quantity, item)
            except ValidationError as exc:
                logger.warning(
                    "Failed to update item quantity",
                    order_id=str(order_id),
                    item_id=str(item_id),
                    quantity=quantity,
                    error=str(exc),
                )
                return OrderResult(False, first_error(exc), order)

        logger.info("Item quantity updated", order_id=str(order_id), item_id=str(item_id), quantity=quantity)
        return OrderResult(True, "Quantity updated", order)

    @in_domain_context
    def apply_discount(self, order_id, percentage) -> OrderResult:
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            try:
                order.apply_discount(percentage)
            except ValidationError as exc:
                logger.warning(
                    "Discount rejected",
                    order_id=str(order_id),
                    percentage=percentage,
                    error=str(exc),
                )
                return OrderResult(False, first_error(exc), order)

        logger.info("Discount applied", order_id=str(order_id), percentage=percentage)
        return OrderResult(True, "Discount applied", order)

    @in_domain_context
    def change_table(self, order_id, table_no) -> OrderResult:
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            try:
                order.change_table(table_no)
            except ValidationError as exc:
                logger.warning("Table change rejected", order_id=str(order_id), table_no=table_no, error=str(exc))
                return OrderResult(False, first_error(exc), order)

        logger.info("Order moved to table", order_id=str(order_id), table_no=table_no)
        return OrderResult(True, "Table changed", order)

    @in_domain_context
    def delete_order(self, order_id) -> OrderResult:
        """Discard a draft order. Paid orders are kept as sales records."""
        with self.orders.locked(order_id) as order:
            if order is None:
                return OrderResult(False, ORDER_NOT_FOUND)
            if not order.is_draft:
                logger.warning("Refusing to delete paid order", order_id=str(order_id))
                return OrderResult(False, "Only draft orders can be deleted", order)
            self.orders.remove(order_id)

        logger.info("Order deleted", order_id=str(order_id))
        return OrderResult(True, "Order deleted", order)
