"""Tests for the Order aggregate — lines, pricing and discounts on a draft order."""

import pytest
from protean.exceptions import ValidationError

from pos.menu.item import MenuItem
from pos.ordering.order import LineView, Order, OrderStatus, OrderView


def _espresso(stock_qty=100):
    return MenuItem.drink_item("Espresso", 3.99, stock_qty, temperature="Hot")


def _burger(stock_qty=50):
    return MenuItem.food_item("Classic Burger", 12.99, stock_qty, "American")


def _make_order(table_no=5):
    order = Order.start(table_no)
    order._events.clear()
    return order


class TestOrderCreation:
    def test_start_opens_draft(self):
        order = Order.start(5)
        assert order.status == OrderStatus.DRAFT.value
        assert order.is_draft is True
        assert order.is_paid is False

    def test_start_sets_table_and_time(self):
        order = Order.start(12)
        assert order.table_no == 12
        assert order.created_at is not None
        assert order.paid_at is None

    def test_start_with_no_lines_and_zero_pricing(self):
        order = Order.start(1)
        assert len(order.lines) == 0
        assert order.subtotal == 0.0
        assert order.tax == 0.0
        assert order.discount == 0.0
        assert order.total == 0.0
        assert order.discount_percentage == 0.0

    def test_each_order_gets_its_own_id(self):
        assert Order.start(1).id != Order.start(1).id

    @pytest.mark.parametrize("table_no", [0, -3, None, "abc", 2.5])
    def test_invalid_table_rejected(self, table_no):
        with pytest.raises(ValidationError) as exc:
            Order.start(table_no)
        assert "table_no" in exc.value.messages


class TestAddLine:
    def test_add_line_snapshots_item(self):
        order = _make_order()
        espresso = _espresso()
        line = order.add_line(espresso, 2)

        assert line.item_id == str(espresso.id)
        assert line.item_name == "Espresso"
        assert line.unit_price == 3.99
        assert line.quantity == 2
        assert line.line_total == pytest.approx(7.98)

    def test_add_line_reprices(self):
        order = _make_order()
        order.add_line(_espresso(), 2)
        assert order.subtotal == pytest.approx(7.98)
        assert order.tax == pytest.approx(0.798)
        assert order.total == pytest.approx(8.778)

    def test_add_line_does_not_touch_stock(self):
        order = _make_order()
        espresso = _espresso(stock_qty=5)
        order.add_line(espresso, 5)
        assert espresso.stock_qty == 5

    def test_later_price_change_does_not_reprice_line(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 1)
        espresso.update_details("Espresso", 9.99, 100)
        assert order.lines[0].unit_price == 3.99
        assert order.subtotal == pytest.approx(3.99)

    def test_adding_same_item_merges_lines(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 1)
        order.add_line(espresso, 2)
        assert len(order.lines) == 1
        assert order.lines[0].quantity == 3
        assert order.subtotal == pytest.approx(3.99 * 3)

    def test_merged_quantity_checked_against_stock(self):
        order = _make_order()
        espresso = _espresso(stock_qty=3)
        order.add_line(espresso, 2)
        with pytest.raises(ValidationError):
            order.add_line(espresso, 2)
        assert order.lines[0].quantity == 2

    def test_lines_keep_insertion_order(self):
        order = _make_order()
        order.add_line(_burger(), 1)
        order.add_line(_espresso(), 1)
        assert [line.item_name for line in order.lines] == ["Classic Burger", "Espresso"]

    @pytest.mark.parametrize("quantity", [0, -1, 2.5, "two", float("inf"), float("nan")])
    def test_invalid_quantity_rejected(self, quantity):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.add_line(_espresso(), quantity)
        assert len(order.lines) == 0

    def test_insufficient_stock_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc:
            order.add_line(_espresso(stock_qty=1), 2)
        assert exc.value.messages["quantity"] == ["Insufficient stock for Espresso"]
        assert order.total == 0.0

    def test_sold_out_item_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.add_line(_espresso(stock_qty=0), 1)

    def test_missing_item_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.add_line(None, 1)


class TestRemoveLine:
    def test_remove_line(self):
        order = _make_order()
        espresso, burger = _espresso(), _burger()
        order.add_line(espresso, 2)
        order.add_line(burger, 1)

        order.remove_line(espresso.id)

        assert [line.item_name for line in order.lines] == ["Classic Burger"]
        assert order.subtotal == pytest.approx(12.99)

    def test_remove_last_line_returns_to_zero(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 2)
        order.remove_line(espresso.id)
        assert order.subtotal == 0.0
        assert order.tax == 0.0
        assert order.discount == 0.0
        assert order.total == 0.0
        assert order.snapshot().total == 0.0

    def test_remove_unknown_item_rejected(self):
        order = _make_order()
        order.add_line(_espresso(), 1)
        with pytest.raises(ValidationError):
            order.remove_line("not-on-order")
        assert len(order.lines) == 1


class TestUpdateLineQuantity:
    def test_update_quantity(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 1)
        order.update_line_quantity(espresso.id, 4, espresso)
        assert order.lines[0].quantity == 4
        assert order.subtotal == pytest.approx(3.99 * 4)

    def test_update_without_catalog_item_skips_stock_check(self):
        order = _make_order()
        espresso = _espresso(stock_qty=2)
        order.add_line(espresso, 1)
        order.update_line_quantity(espresso.id, 10)
        assert order.lines[0].quantity == 10

    def test_update_beyond_stock_rejected(self):
        order = _make_order()
        espresso = _espresso(stock_qty=3)
        order.add_line(espresso, 1)
        with pytest.raises(ValidationError):
            order.update_line_quantity(espresso.id, 4, espresso)
        assert order.lines[0].quantity == 1
        assert order.subtotal == pytest.approx(3.99)

    def test_update_to_zero_rejected(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 2)
        with pytest.raises(ValidationError):
            order.update_line_quantity(espresso.id, 0, espresso)
        assert order.lines[0].quantity == 2

    def test_update_unknown_item_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_line_quantity("missing", 2)


class TestDiscount:
    def test_apply_discount(self):
        order = _make_order()
        order.add_line(_espresso(), 2)
        order.apply_discount(10)
        assert order.discount_percentage == 10.0
        assert order.discount == pytest.approx(0.798)
        assert order.total == pytest.approx(7.98)

    def test_discount_replaces_previous(self):
        order = _make_order()
        order.add_line(_burger(), 1)
        order.apply_discount(50)
        order.apply_discount(10)
        assert order.discount == pytest.approx(1.299)

    def test_discount_follows_later_lines(self):
        order = _make_order()
        order.apply_discount(10)
        order.add_line(_burger(), 1)
        assert order.discount == pytest.approx(1.299)

    def test_discount_never_exceeds_subtotal_after_removal(self):
        order = _make_order()
        espresso, burger = _espresso(), _burger()
        order.add_line(espresso, 1)
        order.add_line(burger, 1)
        order.apply_discount(100)

        order.remove_line(burger.id)

        assert order.discount == pytest.approx(3.99)
        assert order.discount <= order.subtotal
        assert order.total == pytest.approx(0.399)

    @pytest.mark.parametrize("percentage", [-5, 100.5, None, "ten"])
    def test_invalid_discount_rejected(self, percentage):
        order = _make_order()
        order.add_line(_espresso(), 2)
        with pytest.raises(ValidationError):
            order.apply_discount(percentage)
        assert order.discount_percentage == 0.0
        assert order.total == pytest.approx(8.778)

    def test_pricing_identity_holds(self):
        order = _make_order()
        order.add_line(_espresso(), 3)
        order.add_line(_burger(), 2)
        order.apply_discount(33)
        assert order.total == pytest.approx(order.subtotal + order.tax - order.discount)
        assert order.tax == pytest.approx(order.subtotal * 0.10)


class TestChangeTable:
    def test_change_table(self):
        order = _make_order(table_no=5)
        order.change_table(9)
        assert order.table_no == 9

    def test_invalid_table_rejected(self):
        order = _make_order(table_no=5)
        with pytest.raises(ValidationError):
            order.change_table(0)
        assert order.table_no == 5


class TestSnapshot:
    def test_snapshot_copies_order(self):
        order = _make_order(table_no=3)
        order.add_line(_espresso(), 2)
        order.apply_discount(10)

        view = order.snapshot()

        assert isinstance(view, OrderView)
        assert view.order_id == str(order.id)
        assert view.table_no == 3
        assert view.status == "Draft"
        assert view.total == pytest.approx(7.98)
        assert view.lines == (
            LineView(
                item_id=str(order.lines[0].item_id),
                item_name="Espresso",
                unit_price=3.99,
                quantity=2,
                line_total=pytest.approx(7.98),
            ),
        )

    def test_snapshot_is_frozen_in_time(self):
        order = _make_order()
        espresso = _espresso()
        order.add_line(espresso, 1)
        view = order.snapshot()

        order.add_line(_burger(), 1)

        assert len(view.lines) == 1
        assert view.subtotal == pytest.approx(3.99)

    def test_snapshot_of_empty_order(self):
        view = Order.start(4).snapshot()
        assert view.lines == ()
        assert (view.subtotal, view.tax, view.discount, view.total) == (0.0, 0.0, 0.0, 0.0)

    def test_snapshot_is_read_only(self):
        view = _make_order().snapshot()
        with pytest.raises(AttributeError):
            view.total = 0.0
