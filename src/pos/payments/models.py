"""Payment request and outcome values.

Neither is persisted. A ``PaymentInput`` is built by the payment screen and a
``PaymentResult`` is what it shows back to the cashier.
"""

from dataclasses import dataclass
from enum import Enum


class PaymentType(Enum):
    CASH = "Cash"
    CARD = "Card"


@dataclass(frozen=True)
class PaymentInput:
    """What the customer handed over."""

    type: PaymentType
    cash_given: float = 0.0
    card_number: str | None = None

    @classmethod
    def for_cash(cls, amount: float) -> "PaymentInput":
        return cls(PaymentType.CASH, cash_given=amount)

    @classmethod
    def for_card(cls, card_number: str) -> "PaymentInput":
        return cls(PaymentType.CARD, card_number=card_number)


@dataclass(frozen=True)
class PaymentResult:
    """Result of a payment attempt."""

    success: bool
    message: str
    change: float = 0.0

    @classmethod
    def succeeded(cls, message: str, change: float = 0.0) -> "PaymentResult":
        return cls(True, message, change)

    @classmethod
    def failed(cls, message: str) -> "PaymentResult":
        return cls(False, message)
