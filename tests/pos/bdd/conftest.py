"""Shared BDD fixtures and step definitions for table service."""

import pytest
from pytest_bdd import given, parsers, then, when

from pos.app import create_pos
from pos.payments.models import PaymentInput

# Money is compared to the cent
CENT = 0.005


def _item(pos_app, name):
    return next(item for item in pos_app.menu.all_items() if item.name == name)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a POS with the sample menu", target_fixture="pos_app")
def _():
    return create_pos(seed=True)


@given(parsers.cfparse("an open order for table {table_no:d}"), target_fixture="order")
def _(pos_app, table_no):
    return pos_app.ordering.create_order(table_no).order


@given(parsers.cfparse('the order has {quantity:d} "{name}"'))
def _(pos_app, order, quantity, name):
    assert pos_app.ordering.add_item(order.id, _item(pos_app, name).id, quantity).success


@given(parsers.cfparse("a {percentage:d}% discount is applied"))
def _(pos_app, order, percentage):
    assert pos_app.ordering.apply_discount(order.id, percentage).success


@given(parsers.cfparse("the order was paid with {amount:f} in cash"))
def _(pos_app, order, amount):
    assert pos_app.payments.process_payment(order.id, PaymentInput.for_cash(amount)).success


@given(parsers.cfparse('"{name}" has only {stock:d} left'))
def _(pos_app, name, stock):
    item = _item(pos_app, name)
    assert pos_app.menu.update_item(item.id, item.name, item.price, stock).success


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('I add {quantity:d} "{name}" to the order'), target_fixture="result")
def _(pos_app, order, quantity, name):
    return pos_app.ordering.add_item(order.id, _item(pos_app, name).id, quantity)


@when(parsers.cfparse('I remove "{name}" from the order'), target_fixture="result")
def _(pos_app, order, name):
    return pos_app.ordering.remove_item(order.id, _item(pos_app, name).id)


@when(parsers.cfparse("I apply a {percentage:d}% discount"), target_fixture="result")
def _(pos_app, order, percentage):
    return pos_app.ordering.apply_discount(order.id, percentage)


@when(parsers.cfparse("the customer pays {amount:f} in cash"), target_fixture="payment")
def _(pos_app, order, amount):
    return pos_app.payments.process_payment(order.id, PaymentInput.for_cash(amount))


@when(parsers.cfparse('the customer pays by card "{card_number}"'), target_fixture="payment")
def _(pos_app, order, card_number):
    return pos_app.payments.process_payment(order.id, PaymentInput.for_card(card_number))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the subtotal is {amount:f}"))
def _(order, amount):
    assert order.subtotal == pytest.approx(amount, abs=CENT)


@then(parsers.cfparse("the tax is {amount:f}"))
def _(order, amount):
    assert order.tax == pytest.approx(amount, abs=CENT)


@then(parsers.cfparse("the discount is {amount:f}"))
def _(order, amount):
    assert order.discount == pytest.approx(amount, abs=CENT)


@then(parsers.cfparse("the total is {amount:f}"))
def _(order, amount):
    assert order.total == pytest.approx(amount, abs=CENT)


@then(parsers.cfparse('the order action fails with "{message}"'))
def _(result, message):
    assert result.success is False
    assert result.message == message


@then(parsers.cfparse("the payment succeeds with change {change:f}"))
def _(payment, change):
    assert payment.success is True, payment.message
    assert payment.change == pytest.approx(change, abs=CENT)


@then(parsers.cfparse('the payment fails with "{message}"'))
def _(payment, message):
    assert payment.success is False
    assert payment.message == message


@then(parsers.cfparse("the order is {status}"))
def _(order, status):
    assert order.status == status


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(pos_app, name, stock):
    assert _item(pos_app, name).stock_qty == stock
