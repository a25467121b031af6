"""Pricing engine — subtotal, tax, discount and total for a set of order lines.

Everything here is a pure function of its inputs. Orders are always repriced
from scratch; nothing is patched incrementally.

The discount is carried as a percentage, not an amount. Each pricing pass
turns it back into an amount against the current subtotal, so removing lines
can never leave a discount larger than what is left to pay.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float

from pos.domain import pos

TAX_RATE = 0.10

# Float tolerance for the pricing identities
TOLERANCE = 1e-9


@pos.value_object(part_of="Order")
class OrderPricing:
    """Financial summary of an order, replaced wholesale on every repricing."""

    subtotal = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)

    @invariant.post
    def tax_is_fixed_share_of_subtotal(self):
        if abs(self.tax - self.subtotal * TAX_RATE) > TOLERANCE:
            raise ValidationError({"tax": ["Tax must be 10% of the subtotal"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if self.discount > self.subtotal + TOLERANCE:
            raise ValidationError({"discount": ["Discount cannot exceed the subtotal"]})

    @invariant.post
    def total_is_subtotal_plus_tax_minus_discount(self):
        if abs(self.total - (self.subtotal + self.tax - self.discount)) > TOLERANCE:
            raise ValidationError({"total": ["Total must equal subtotal + tax - discount"]})


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------
class DiscountKind(Enum):
    NONE = "None"
    PERCENTAGE = "Percentage"


_DISCOUNT_RULES: dict[DiscountKind, Callable[[float, float], float]] = {
    DiscountKind.NONE: lambda subtotal, percentage: 0.0,
    DiscountKind.PERCENTAGE: lambda subtotal, percentage: subtotal * (percentage / 100.0),
}


@dataclass(frozen=True)
class Discount:
    """A discount rule. Out-of-range percentages are programming errors."""

    kind: DiscountKind = DiscountKind.NONE
    percentage: float = 0.0

    def __post_init__(self):
        if self.kind == DiscountKind.NONE and self.percentage != 0:
            raise ValueError("A no-discount rule carries no percentage")
        if not is_valid_discount_percentage(self.percentage):
            raise ValueError("Percentage must be between 0 and 100")

    @classmethod
    def none(cls) -> "Discount":
        return cls()

    @classmethod
    def percent(cls, percentage: float) -> "Discount":
        if percentage == 0:
            return cls.none()
        return cls(DiscountKind.PERCENTAGE, float(percentage))

    @property
    def description(self) -> str:
        if self.kind == DiscountKind.NONE:
            return "No Discount"
        return f"{self.percentage:g}% Discount"

    def amount(self, subtotal: float) -> float:
        return _DISCOUNT_RULES[self.kind](subtotal, self.percentage)


# ---------------------------------------------------------------------------
# Pricing functions
# ---------------------------------------------------------------------------
def tax_rate_percent() -> float:
    return TAX_RATE * 100


def subtotal(lines: Iterable) -> float:
    return sum((line.line_total for line in lines), 0.0)


def tax(subtotal_amount: float) -> float:
    return subtotal_amount * TAX_RATE


def is_valid_discount_percentage(percentage) -> bool:
    return percentage is not None and 0 <= percentage <= 100


def discount_amount(subtotal_amount: float, percentage: float) -> float:
    """Absolute discount for ``percentage`` of ``subtotal_amount``.

    Raises:
        ValueError: if ``percentage`` lies outside [0, 100]. Callers validate
            user input with ``is_valid_discount_percentage`` first.
    """
    return Discount.percent(percentage).amount(subtotal_amount)


def total(subtotal_amount: float, tax_amount: float, discount: float) -> float:
    return subtotal_amount + tax_amount - discount


def price(lines: Iterable, discount_percentage: float = 0.0) -> OrderPricing:
    """Reprice a set of lines from scratch."""
    sub = subtotal(lines)
    tax_amount = tax(sub)
    discount = min(discount_amount(sub, discount_percentage or 0.0), sub)
    return OrderPricing(
        subtotal=sub,
        tax=tax_amount,
        discount=discount,
        total=total(sub, tax_amount, discount),
    )
