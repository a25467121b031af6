"""Order aggregate — one table's bill from first item to payment.

State Machine:
    DRAFT → PAID

A draft order is freely editable. Payment is the only transition, and a paid
order is final: every further change is rejected and leaves it untouched.

Lines snapshot the item's name and price when they are added, so later menu
edits never reprice an open bill. Stock is only checked here; it is sold at
payment time.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from pos.domain import pos
from pos.ordering.events import (
    DiscountApplied,
    LineAdded,
    LineQuantityUpdated,
    LineRemoved,
    OrderPaid,
    OrderStarted,
    TableChanged,
)
from pos.ordering.pricing import OrderPricing, is_valid_discount_percentage, price


class OrderStatus(Enum):
    DRAFT = "Draft"
    PAID = "Paid"


# ---------------------------------------------------------------------------
# Read-only views
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LineView:
    item_id: str
    item_name: str
    unit_price: float
    quantity: int
    line_total: float


@dataclass(frozen=True)
class OrderView:
    """A point-in-time, immutable copy of an order for display and receipts."""

    order_id: str
    table_no: int
    status: str
    lines: tuple[LineView, ...]
    subtotal: float
    tax: float
    discount_percentage: float
    discount: float
    total: float
    created_at: datetime | None
    paid_at: datetime | None
    payment_method: str | None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@pos.entity(part_of="Order")
class OrderLine:
    """One menu item and quantity on an order, priced as of when it was added."""

    item_id = Identifier(required=True)
    item_name = String(required=True, max_length=100)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


def _positive_int(value, field_name, message):
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError({field_name: [message]}) from None
    if number < 1 or number != value:
        raise ValidationError({field_name: [message]})
    return number


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@pos.aggregate
class Order:
    table_no = Integer(required=True, min_value=1)
    status = String(choices=OrderStatus, default=OrderStatus.DRAFT.value)
    lines = HasMany(OrderLine)
    discount_percentage = Float(default=0.0, min_value=0.0, max_value=100.0)
    pricing = ValueObject(OrderPricing)
    payment_method = String(max_length=50)
    created_at = DateTime()
    paid_at = DateTime()

    @invariant.post
    def paid_orders_carry_payment_time(self):
        if self.status == OrderStatus.PAID.value and self.paid_at is None:
            raise ValidationError({"paid_at": ["A paid order must record when it was paid"]})
        if self.status == OrderStatus.DRAFT.value and self.paid_at is not None:
            raise ValidationError({"paid_at": ["A draft order cannot have a payment time"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, table_no):
        """Open a new draft order for a table."""
        table_no = _positive_int(table_no, "table_no", "Table number must be positive")
        now = datetime.now(UTC)

        order = cls(
            table_no=table_no,
            status=OrderStatus.DRAFT.value,
            pricing=OrderPricing(),
            created_at=now,
        )
        order.raise_(
            OrderStarted(
                order_id=str(order.id),
                table_no=table_no,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_draft(self) -> bool:
        return self.status == OrderStatus.DRAFT.value

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID.value

    @property
    def current_pricing(self) -> OrderPricing:
        """Pricing of the order; an all-zero value is stored as empty."""
        return self.pricing if self.pricing is not None else OrderPricing()

    @property
    def subtotal(self) -> float:
        return self.current_pricing.subtotal

    @property
    def tax(self) -> float:
        return self.current_pricing.tax

    @property
    def discount(self) -> float:
        return self.current_pricing.discount

    @property
    def total(self) -> float:
        return self.current_pricing.total

    def line_for(self, item_id) -> OrderLine | None:
        return next((line for line in self.lines if str(line.item_id) == str(item_id)), None)

    def snapshot(self) -> OrderView:
        pricing = self.current_pricing
        return OrderView(
            order_id=str(self.id),
            table_no=self.table_no,
            status=self.status,
            lines=tuple(
                LineView(
                    item_id=str(line.item_id),
                    item_name=line.item_name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=line.line_total,
                )
                for line in self.lines
            ),
            subtotal=pricing.subtotal,
            tax=pricing.tax,
            discount_percentage=self.discount_percentage,
            discount=pricing.discount,
            total=pricing.total,
            created_at=self.created_at,
            paid_at=self.paid_at,
            payment_method=self.payment_method,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_draft(self):
        if self.status != OrderStatus.DRAFT.value:
            raise ValidationError({"status": ["Order is already paid"]})

    def _reprice(self):
        """Recompute pricing from the current lines and discount percentage."""
        self.pricing = price(self.lines, self.discount_percentage)

    # -------------------------------------------------------------------
    # Draft modifications
    # -------------------------------------------------------------------
    def add_line(self, item, quantity):
        """Add ``quantity`` of a menu item. Repeats of an item merge into its line."""
        self._assert_draft()
        if item is None:
            raise ValidationError({"item_id": ["Menu item not found"]})
        quantity = _positive_int(quantity, "quantity", "Quantity must be positive")

        existing = self.line_for(item.id)
        wanted = quantity + (existing.quantity if existing else 0)
        if not item.has_stock(wanted):
            raise ValidationError({"quantity": [f"Insufficient stock for {item.name}"]})

        with atomic_change(self):
            if existing:
                existing.quantity = wanted
                line = existing
            else:
                line = OrderLine(
                    item_id=str(item.id),
                    item_name=item.name,
                    unit_price=item.price,
                    quantity=quantity,
                )
                self.add_lines(line)
            self._reprice()

        self.raise_(
            LineAdded(
                order_id=str(self.id),
                line_id=str(line.id),
                item_id=str(item.id),
                item_name=line.item_name,
                unit_price=line.unit_price,
                quantity=quantity,
                new_subtotal=self.subtotal,
                new_total=self.total,
            )
        )
        return line

    def remove_line(self, item_id):
        """Remove the line for ``item_id``."""
        self._assert_draft()

        line = self.line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item is not on this order"]})

        with atomic_change(self):
            self.remove_lines(line)
            self._reprice()

        self.raise_(
            LineRemoved(
                order_id=str(self.id),
                item_id=str(item_id),
                new_subtotal=self.subtotal,
                new_total=self.total,
            )
        )

    def update_line_quantity(self, item_id, new_quantity, item=None):
        """Set a line's quantity; ``item`` is the current catalog entry used for the stock check."""
        self._assert_draft()
        new_quantity = _positive_int(new_quantity, "quantity", "Quantity must be positive")

        line = self.line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item is not on this order"]})
        if item is not None and not item.has_stock(new_quantity):
            raise ValidationError({"quantity": [f"Insufficient stock for {line.item_name}"]})

        previous_quantity = line.quantity
        with atomic_change(self):
            line.quantity = new_quantity
            self._reprice()

        self.raise_(
            LineQuantityUpdated(
                order_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                new_subtotal=self.subtotal,
                new_total=self.total,
            )
        )

    def apply_discount(self, percentage):
        """Apply a percentage discount, replacing any earlier one."""
        self._assert_draft()
        if isinstance(percentage, bool) or not isinstance(percentage, int | float):
            raise ValidationError({"discount": ["Discount percentage must be a number"]})
        if not is_valid_discount_percentage(percentage):
            raise ValidationError({"discount": ["Discount percentage must be between 0 and 100"]})

        with atomic_change(self):
            self.discount_percentage = float(percentage)
            self._reprice()

        self.raise_(
            DiscountApplied(
                order_id=str(self.id),
                percentage=self.discount_percentage,
                discount=self.discount,
                new_total=self.total,
            )
        )

    def change_table(self, table_no):
        self._assert_draft()
        table_no = _positive_int(table_no, "table_no", "Table number must be positive")

        previous_table_no = self.table_no
        self.table_no = table_no

        self.raise_(
            TableChanged(
                order_id=str(self.id),
                previous_table_no=previous_table_no,
                new_table_no=table_no,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle transition
    # -------------------------------------------------------------------
    def mark_paid(self, payment_method):
        """Close the order. Only the payment dispatcher calls this."""
        self._assert_draft()
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = OrderStatus.PAID.value
            self.paid_at = now
            self.payment_method = payment_method

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_method=payment_method,
                amount=self.total,
                paid_at=now,
            )
        )
