"""Domain events for the Order aggregate.

Events are versioned, immutable facts about a table order. They accumulate
on the aggregate as its audit trail.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from pos.domain import pos


@pos.event(part_of="Order")
class OrderStarted:
    """A new draft order was opened for a table."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    table_no = Integer(required=True)
    created_at = DateTime(required=True)


@pos.event(part_of="Order")
class LineAdded:
    """A menu item was added to a draft order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    item_id = Identifier(required=True)
    item_name = String(required=True)
    unit_price = Float(required=True)
    quantity = Integer(required=True)
    new_subtotal = Float(required=True)
    new_total = Float(required=True)


@pos.event(part_of="Order")
class LineRemoved:
    """A line was removed from a draft order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_subtotal = Float(required=True)
    new_total = Float(required=True)


@pos.event(part_of="Order")
class LineQuantityUpdated:
    """The quantity of a draft order line was changed."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    new_subtotal = Float(required=True)
    new_total = Float(required=True)


@pos.event(part_of="Order")
class DiscountApplied:
    """A percentage discount was applied to a draft order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    percentage = Float(required=True)
    discount = Float(required=True)
    new_total = Float(required=True)


@pos.event(part_of="Order")
class TableChanged:
    """A draft order was moved to another table."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_table_no = Integer(required=True)
    new_table_no = Integer(required=True)


@pos.event(part_of="Order")
class OrderPaid:
    """Payment was captured; the order is final."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    payment_method = String(required=True)
    amount = Float(required=True)
    paid_at = DateTime(required=True)
