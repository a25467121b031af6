"""Cash and card payment methods.

A method only decides whether the tendered payment covers the bill. It never
touches the order or the catalog; the dispatcher commits a successful payment.
"""

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from protean.exceptions import ConfigurationError

from pos.ordering.pricing import TOLERANCE
from pos.payments.models import PaymentInput, PaymentResult, PaymentType

CARD_NUMBER_PATTERN = re.compile(r"\d{4}-\d{4}-\d{4}-\d{4}", re.ASCII)


def _wrong_type(display_name: str) -> PaymentResult:
    return PaymentResult.failed(f"Invalid payment type for {display_name.lower()} payment")


def pay_with_cash(payment_input: PaymentInput, total: float) -> PaymentResult:
    if payment_input.type != PaymentType.CASH:
        return _wrong_type("Cash")

    cash_given = payment_input.cash_given
    if cash_given is None:
        cash_given = 0.0
    if (
        isinstance(cash_given, bool)
        or not isinstance(cash_given, int | float)
        or not math.isfinite(cash_given)
        or cash_given < 0
    ):
        return PaymentResult.failed("Invalid cash amount")

    # Float noise from repricing does not count as a shortfall.
    if cash_given < total - TOLERANCE:
        return PaymentResult.failed(f"Insufficient cash. Total: ${total:.2f}, Given: ${cash_given:.2f}")

    return PaymentResult.succeeded("Cash payment successful", max(cash_given - total, 0.0))


def is_valid_card_number(card_number: str | None) -> bool:
    if not card_number or not card_number.strip():
        return False
    return CARD_NUMBER_PATTERN.fullmatch(card_number) is not None


def pay_with_card(payment_input: PaymentInput, total: float) -> PaymentResult:
    if payment_input.type != PaymentType.CARD:
        return _wrong_type("Card")

    if not is_valid_card_number(payment_input.card_number):
        return PaymentResult.failed("Invalid card number format. Expected: ####-####-####-####")

    return PaymentResult.succeeded("Card payment successful")


@dataclass(frozen=True)
class PaymentMethod:
    display_name: str
    process: Callable[[PaymentInput, float], PaymentResult]


PAYMENT_METHODS: Mapping[PaymentType, PaymentMethod] = {
    PaymentType.CASH: PaymentMethod("Cash", pay_with_cash),
    PaymentType.CARD: PaymentMethod("Card", pay_with_card),
}


def verify_methods(methods: Mapping[PaymentType, PaymentMethod]) -> None:
    """Raise ``ConfigurationError`` unless every payment type has a method."""
    missing = [payment_type.value for payment_type in PaymentType if payment_type not in methods]
    if missing:
        raise ConfigurationError(f"No payment method registered for: {', '.join(missing)}")


verify_methods(PAYMENT_METHODS)
