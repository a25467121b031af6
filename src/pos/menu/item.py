"""MenuItem aggregate — a sellable food or drink on the menu.

Availability is never stored: it is derived from ``stock_qty`` on every read,
so a stock change and the matching availability change are one assignment.
Variant-specific attributes live in value objects and only feed display text.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, ValueObject

from pos.domain import pos
from pos.menu.events import MenuItemAdded, MenuItemUpdated, StockDecreased, StockIncreased


class ItemType(Enum):
    FOOD = "Food"
    DRINK = "Drink"


class Temperature(Enum):
    HOT = "Hot"
    COLD = "Cold"
    ROOM = "Room"


@pos.value_object(part_of="MenuItem")
class FoodDetails:
    """Kitchen-facing attributes of a food item."""

    cuisine = String(required=True, max_length=100)
    is_vegetarian = Boolean(default=False)


@pos.value_object(part_of="MenuItem")
class DrinkDetails:
    """Bar-facing attributes of a drink item."""

    is_alcoholic = Boolean(default=False)
    temperature = String(choices=Temperature, default=Temperature.ROOM.value)


def _validate_item_data(name, price, stock_qty):
    """Reject bad menu data before anything is assigned."""
    errors = {}
    if name is None or not str(name).strip():
        errors["name"] = ["Item name is required"]
    if price is None or price < 0:
        errors["price"] = ["Price must be non-negative"]
    if stock_qty is None or stock_qty < 0:
        errors["stock_qty"] = ["Stock quantity must be non-negative"]
    if errors:
        raise ValidationError(errors)


@pos.aggregate
class MenuItem:
    """A menu entry with a price and a stock count."""

    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    stock_qty = Integer(default=0, min_value=0)
    item_type = String(required=True, choices=ItemType)
    food = ValueObject(FoodDetails)
    drink = ValueObject(DrinkDetails)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def details_must_match_item_type(self):
        if self.item_type == ItemType.FOOD.value and (self.food is None or self.drink is not None):
            raise ValidationError({"item_type": ["Food items carry food details only"]})
        if self.item_type == ItemType.DRINK.value and (self.drink is None or self.food is not None):
            raise ValidationError({"item_type": ["Drink items carry drink details only"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def _create(cls, name, price, stock_qty, item_type, **details):
        _validate_item_data(name, price, stock_qty)
        now = datetime.now(UTC)

        item = cls(
            name=str(name).strip(),
            price=price,
            stock_qty=stock_qty,
            item_type=item_type.value,
            created_at=now,
            updated_at=now,
            **details,
        )
        item.raise_(
            MenuItemAdded(
                item_id=str(item.id),
                name=item.name,
                item_type=item.item_type,
                price=item.price,
                stock_qty=item.stock_qty,
                added_at=now,
            )
        )
        return item

    @classmethod
    def food_item(cls, name, price, stock_qty, cuisine, is_vegetarian=False):
        return cls._create(
            name,
            price,
            stock_qty,
            ItemType.FOOD,
            food=FoodDetails(cuisine=cuisine, is_vegetarian=is_vegetarian),
        )

    @classmethod
    def drink_item(cls, name, price, stock_qty, is_alcoholic=False, temperature=Temperature.ROOM.value):
        if isinstance(temperature, Temperature):
            temperature = temperature.value
        return cls._create(
            name,
            price,
            stock_qty,
            ItemType.DRINK,
            drink=DrinkDetails(is_alcoholic=is_alcoholic, temperature=temperature),
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def available(self) -> bool:
        return self.stock_qty > 0

    def has_stock(self, quantity) -> bool:
        return self.available and self.stock_qty >= quantity

    def description(self) -> str:
        """Display text, e.g. ``Garden Salad (International) [Veg]``."""
        if self.item_type == ItemType.FOOD.value:
            text = f"{self.name} ({self.food.cuisine})"
            if self.food.is_vegetarian:
                text += " [Veg]"
            return text

        text = f"{self.name} ({self.drink.temperature})"
        if self.drink.is_alcoholic:
            text += " [Alcoholic]"
        return text

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def decrease_stock(self, quantity):
        """Sell ``quantity`` units. Nothing changes unless all units are on hand."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if self.stock_qty < quantity:
            raise ValidationError(
                {"stock_qty": [f"Insufficient stock for {self.name}: {self.stock_qty} left, {quantity} requested"]}
            )

        with atomic_change(self):
            self.stock_qty = self.stock_qty - quantity
            self.updated_at = datetime.now(UTC)

        self.raise_(
            StockDecreased(
                item_id=str(self.id),
                quantity=quantity,
                new_stock_qty=self.stock_qty,
            )
        )

    def increase_stock(self, quantity):
        """Put ``quantity`` units back on the shelf."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        with atomic_change(self):
            self.stock_qty = self.stock_qty + quantity
            self.updated_at = datetime.now(UTC)

        self.raise_(
            StockIncreased(
                item_id=str(self.id),
                quantity=quantity,
                new_stock_qty=self.stock_qty,
            )
        )

    # -------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------
    def update_details(self, name, price, stock_qty):
        _validate_item_data(name, price, stock_qty)

        with atomic_change(self):
            self.name = str(name).strip()
            self.price = price
            self.stock_qty = stock_qty
            self.updated_at = datetime.now(UTC)

        self.raise_(
            MenuItemUpdated(
                item_id=str(self.id),
                name=self.name,
                price=self.price,
                stock_qty=self.stock_qty,
            )
        )
