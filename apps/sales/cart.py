"""
In-memory order builder used by a POS terminal.

The cart is private to one terminal session; nothing here touches the
database. OrderOrchestrator.submit() turns a cart into an Order.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from apps.core.exceptions import OrderValidationError

from .models import Order, OrderItem

MAX_ORDER_LINES = 50
MAX_QUANTITY_PER_LINE = 99
MAX_NOTE_LENGTH = 500
MAX_ORDER_TOTAL = Decimal("10000000")

MONEY = Decimal("0.01")


@dataclass(frozen=True)
class DiscountVoucher:
    """A named percentage discount offered by the shop."""

    name: str
    value: Decimal

    @classmethod
    def percent(cls, value):
        value = Decimal(str(value))
        return cls(name=f"{value}%", value=value)


@dataclass
class CartLine:
    menu_item_id: str
    name: str
    price: Decimal
    quantity: int = 1
    temperature: str = OrderItem.HOT
    consumption: str = OrderItem.STAY
    note: str = ""
    line_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def matches(self, name, price, temperature, consumption) -> bool:
        return (
            self.name == name
            and self.price == price
            and self.temperature == temperature
            and self.consumption == consumption
        )


class Cart:
    """
    Lines, customer, discount and payment method of the order being built.
    """

    def __init__(self):
        self.lines: List[CartLine] = []
        self.customer = None
        self.discount_voucher: Optional[DiscountVoucher] = None
        self.payment_method = Order.CASH

    # Lines

    def add_item(
        self, menu_item, temperature=OrderItem.HOT, consumption=OrderItem.STAY
    ) -> CartLine:
        """
        Add one unit of a menu item.

        A line with the same name, price, temperature and consumption is
        incremented instead of adding a new line.

        Raises:
            OrderValidationError: If the item is unavailable or a limit is hit
        """
        if not getattr(menu_item, "is_available", True):
            raise OrderValidationError(f"{menu_item.name} is currently unavailable.")

        price = Decimal(str(menu_item.price))
        for line in self.lines:
            if line.matches(menu_item.name, price, temperature, consumption):
                if line.quantity >= MAX_QUANTITY_PER_LINE:
                    raise OrderValidationError(
                        f"Quantity of {menu_item.name} cannot exceed {MAX_QUANTITY_PER_LINE}."
                    )
                line.quantity += 1
                return line

        if len(self.lines) >= MAX_ORDER_LINES:
            raise OrderValidationError(f"An order cannot have more than {MAX_ORDER_LINES} lines.")

        line = CartLine(
            menu_item_id=str(menu_item.id),
            name=menu_item.name,
            price=price,
            temperature=temperature,
            consumption=consumption,
        )
        self.lines.append(line)
        return line

    def _line(self, line_id) -> Optional[CartLine]:
        return next((line for line in self.lines if line.line_id == line_id), None)

    def update_quantity(self, line_id, increment: bool):
        """Add or remove one unit; a line that drops to zero is removed."""
        line = self._line(line_id)
        if line is None:
            return

        if increment:
            if line.quantity >= MAX_QUANTITY_PER_LINE:
                raise OrderValidationError(f"Quantity cannot exceed {MAX_QUANTITY_PER_LINE}.")
            line.quantity += 1
        else:
            line.quantity -= 1
            if line.quantity <= 0:
                self.remove_line(line_id)

    def update_note(self, line_id, note: str):
        if len(note or "") > MAX_NOTE_LENGTH:
            raise OrderValidationError(f"Note cannot exceed {MAX_NOTE_LENGTH} characters.")
        line = self._line(line_id)
        if line is not None:
            line.note = note or ""

    def remove_line(self, line_id):
        self.lines = [line for line in self.lines if line.line_id != line_id]

    # Customer, discount, payment

    def select_customer(self, customer):
        self.customer = customer

    def clear_customer(self):
        self.customer = None

    def select_discount(self, voucher):
        """Select a discount voucher (or a plain percentage); selecting it again clears it."""
        if not isinstance(voucher, DiscountVoucher):
            voucher = DiscountVoucher.percent(voucher)

        if self.discount_voucher is not None and self.discount_voucher.name == voucher.name:
            self.discount_voucher = None
        else:
            self.discount_voucher = voucher

    def set_payment_method(self, payment_method):
        if payment_method not in dict(Order.PAYMENT_METHOD_CHOICES):
            raise OrderValidationError(f"Unknown payment method: {payment_method}")
        self.payment_method = payment_method

    # Totals

    @property
    def discount_percent(self) -> Decimal:
        return self.discount_voucher.value if self.discount_voucher else Decimal("0")

    @property
    def subtotal(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    @property
    def discount(self) -> Decimal:
        return (self.subtotal * self.discount_percent / 100).quantize(MONEY)

    @property
    def total(self) -> Decimal:
        return self.subtotal - self.discount

    def is_empty(self) -> bool:
        return not self.lines

    def validate(self):
        """
        Check the cart before submission.

        Raises:
            OrderValidationError: On the first problem found
        """
        if self.is_empty():
            raise OrderValidationError("The order is empty.")

        if len(self.lines) > MAX_ORDER_LINES:
            raise OrderValidationError(f"An order cannot have more than {MAX_ORDER_LINES} lines.")

        for index, line in enumerate(self.lines, start=1):
            if line.quantity <= 0 or line.quantity > MAX_QUANTITY_PER_LINE:
                raise OrderValidationError(
                    f"Quantity of item {index} must be between 1 and {MAX_QUANTITY_PER_LINE}."
                )
            if line.price <= 0:
                raise OrderValidationError(f"Price of item {index} must be greater than 0.")
            if len(line.note) > MAX_NOTE_LENGTH:
                raise OrderValidationError(
                    f"Note of item {index} cannot exceed {MAX_NOTE_LENGTH} characters."
                )

        if not Decimal("0") <= self.discount_percent <= Decimal("100"):
            raise OrderValidationError("Discount must be between 0% and 100%.")

        if self.total > MAX_ORDER_TOTAL:
            raise OrderValidationError(f"Order total cannot exceed {MAX_ORDER_TOTAL}.")

    def clear(self):
        """Empty the cart and reset customer, discount and payment method."""
        self.lines = []
        self.customer = None
        self.discount_voucher = None
        self.payment_method = Order.CASH
