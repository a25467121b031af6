"""Payment dispatcher — routes a payment to its method and settles the order.

Settling is the single place where stock is sold. With the order's lock and
every line item's lock held, all stock is checked first and only then
decremented, and the order is marked paid in the same critical section. A
reader therefore never sees a paid order without its stock movement, or the
reverse. Any failure leaves the order a draft that can be paid again.
"""

from collections.abc import Mapping

import structlog

from pos.menu.store import CatalogStore
from pos.ordering.order import Order
from pos.ordering.store import OrderStore
from pos.payments.methods import PAYMENT_METHODS, PaymentMethod
from pos.payments.models import PaymentInput, PaymentResult, PaymentType
from pos.shared.context import in_domain_context

logger = structlog.get_logger(__name__)


def _label(payment_type) -> str:
    return payment_type.value if isinstance(payment_type, PaymentType) else str(payment_type)


class PaymentDispatcher:
    def __init__(
        self,
        orders: OrderStore,
        catalog: CatalogStore,
        methods: Mapping[PaymentType, PaymentMethod] = PAYMENT_METHODS,
    ) -> None:
        self.orders = orders
        self.catalog = catalog
        self.methods = dict(methods)

    def method_for(self, payment_type) -> PaymentMethod | None:
        return self.methods.get(payment_type)

    def is_supported(self, payment_type) -> bool:
        return payment_type in self.methods

    @in_domain_context
    def process_payment(self, order_id, payment_input: PaymentInput) -> PaymentResult:
        method = self.method_for(payment_input.type)
        if method is None:
            logger.warning("Unsupported payment method", order_id=str(order_id), payment_type=_label(payment_input.type))
            return PaymentResult.failed(f"Unsupported payment method: {_label(payment_input.type)}")

        with self.orders.locked(order_id) as order:
            if order is None:
                return PaymentResult.failed("Order not found")
            if not order.is_draft:
                logger.warning("Payment for settled order", order_id=str(order_id))
                return PaymentResult.failed("Order is already paid")
            if not order.lines:
                return PaymentResult.failed("Order has no items")

            total = order.total
            result = method.process(payment_input, total)
            if not result.success:
                logger.warning(
                    "Payment declined",
                    order_id=str(order_id),
                    payment_method=method.display_name,
                    total=total,
                    reason=result.message,
                )
                return result

            problem = self._settle(order, method)
            if problem is not None:
                logger.warning("Payment could not be settled", order_id=str(order_id), reason=problem)
                return PaymentResult.failed(problem)

        logger.info(
            "Order paid",
            order_id=str(order_id),
            payment_method=method.display_name,
            amount=total,
            change=result.change,
        )
        return result

    def _settle(self, order: Order, method: PaymentMethod) -> str | None:
        """Sell the order's stock and mark it paid; returns a failure message or ``None``."""
        wanted: dict[str, int] = {}
        names: dict[str, str] = {}
        for line in order.lines:
            key = str(line.item_id)
            wanted[key] = wanted.get(key, 0) + line.quantity
            names.setdefault(key, line.item_name)

        with self.catalog.locked(*wanted) as items:
            for key, quantity in wanted.items():
                item = items[key]
                if item is None:
                    return f"{names[key]} is no longer on the menu"
                if not item.has_stock(quantity):
                    return f"Insufficient stock for {item.name}"

            for key, quantity in wanted.items():
                if not self.catalog.decrease_stock(key, quantity):
                    raise RuntimeError(f"Stock for {key} changed while its lock was held")

            order.mark_paid(method.display_name)

        return None
