"""Domain events for the MenuItem aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from pos.domain import pos


@pos.event(part_of="MenuItem")
class MenuItemAdded:
    """A new food or drink item was added to the menu."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    name = String(required=True)
    item_type = String(required=True)
    price = Float(required=True)
    stock_qty = Integer(required=True)
    added_at = DateTime(required=True)


@pos.event(part_of="MenuItem")
class MenuItemUpdated:
    """Name, price or stock of a menu item was edited."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock_qty = Integer(required=True)


@pos.event(part_of="MenuItem")
class StockDecreased:
    """Units of a menu item were sold."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock_qty = Integer(required=True)


@pos.event(part_of="MenuItem")
class StockIncreased:
    """Units of a menu item were restocked."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock_qty = Integer(required=True)
