"""
Tests for the in-memory POS cart.
"""

from decimal import Decimal

import pytest

from apps.core.exceptions import OrderValidationError
from apps.crm.models import Customer
from apps.menu.models import MenuItem
from apps.sales.cart import MAX_NOTE_LENGTH, MAX_QUANTITY_PER_LINE, Cart, DiscountVoucher
from apps.sales.models import Order, OrderItem


@pytest.fixture
def espresso():
    return MenuItem(name="Espresso", price=Decimal("3.00"))


@pytest.fixture
def croissant():
    return MenuItem(name="Croissant", price=Decimal("2.50"))


class TestCartLines:
    """Test adding, merging and removing lines."""

    def test_same_item_and_options_merge(self, espresso):
        cart = Cart()
        cart.add_item(espresso)
        cart.add_item(espresso)

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2
        assert cart.lines[0].menu_item_id == str(espresso.id)

    def test_different_options_make_new_line(self, espresso):
        cart = Cart()
        cart.add_item(espresso, temperature=OrderItem.HOT)
        cart.add_item(espresso, temperature=OrderItem.COLD)
        cart.add_item(espresso, consumption=OrderItem.TAKE_AWAY)

        assert len(cart.lines) == 3

    def test_unavailable_item_is_rejected(self, espresso):
        espresso.is_available = False
        with pytest.raises(OrderValidationError):
            Cart().add_item(espresso)

    def test_quantity_cap(self, espresso):
        cart = Cart()
        line = cart.add_item(espresso)
        line.quantity = MAX_QUANTITY_PER_LINE

        with pytest.raises(OrderValidationError):
            cart.add_item(espresso)
        with pytest.raises(OrderValidationError):
            cart.update_quantity(line.line_id, increment=True)

    def test_decrement_to_zero_removes_line(self, espresso, croissant):
        cart = Cart()
        line = cart.add_item(espresso)
        cart.add_item(croissant)

        cart.update_quantity(line.line_id, increment=False)

        assert [item.name for item in cart.lines] == ["Croissant"]

    def test_update_note(self, espresso):
        cart = Cart()
        line = cart.add_item(espresso)

        cart.update_note(line.line_id, "extra hot")
        assert line.note == "extra hot"

        with pytest.raises(OrderValidationError):
            cart.update_note(line.line_id, "x" * (MAX_NOTE_LENGTH + 1))


class TestCartTotals:
    def test_subtotal_discount_total(self, espresso, croissant):
        cart = Cart()
        cart.add_item(espresso)
        cart.add_item(espresso)
        cart.add_item(croissant)
        cart.select_discount(10)

        assert cart.subtotal == Decimal("8.50")
        assert cart.discount == Decimal("0.85")
        assert cart.total == Decimal("7.65")

    def test_selecting_same_discount_clears_it(self):
        cart = Cart()
        voucher = DiscountVoucher(name="Happy Hour", value=Decimal("20"))

        cart.select_discount(voucher)
        assert cart.discount_percent == Decimal("20")
        cart.select_discount(voucher)
        assert cart.discount_voucher is None

    def test_payment_method(self):
        cart = Cart()
        cart.set_payment_method(Order.CARD)
        assert cart.payment_method == Order.CARD

        with pytest.raises(OrderValidationError):
            cart.set_payment_method("bitcoin")


class TestCartValidation:
    def test_empty_cart(self):
        with pytest.raises(OrderValidationError) as exc_info:
            Cart().validate()
        assert exc_info.value.message == "The order is empty."

    def test_discount_out_of_range(self, espresso):
        cart = Cart()
        cart.add_item(espresso)
        cart.select_discount(150)

        with pytest.raises(OrderValidationError):
            cart.validate()

    def test_zero_price(self):
        cart = Cart()
        cart.add_item(MenuItem(name="Water", price=Decimal("0")))

        with pytest.raises(OrderValidationError):
            cart.validate()

    def test_valid_cart(self, espresso):
        cart = Cart()
        cart.add_item(espresso)
        cart.validate()


class TestCartReset:
    def test_clear_resets_everything(self, espresso):
        cart = Cart()
        cart.add_item(espresso)
        cart.select_customer(Customer(name="Linh Tran"))
        cart.select_discount(5)
        cart.set_payment_method(Order.CARD)

        cart.clear()

        assert cart.is_empty()
        assert cart.customer is None
        assert cart.discount_voucher is None
        assert cart.payment_method == Order.CASH
