"""
Pytest configuration and fixtures for the POS fulfillment service.
"""

from decimal import Decimal

import pytest

from apps.core.context import ShopContext
from apps.core.models import Shop
from apps.core.transactions import TransactionRunner
from apps.crm.models import Customer
from apps.inventory.measurement import MeasurementUnit
from apps.inventory.models import Ingredient
from apps.menu.catalog import DatabaseMenuCatalog
from apps.menu.models import MenuItem, Recipe
from apps.notifications.services import RecordingNotificationSink
from apps.sales.models import Order, OrderItem


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def authenticated_client(api_client, django_user_model):
    """
    Fixture for authenticated API client.
    """
    user = django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="testpass123"
    )
    api_client.force_authenticate(user=user)
    return api_client, user


@pytest.fixture
def shop(db):
    """A shop in UTC with the default point rate."""
    return Shop.objects.create(name="Corner Cafe", address="12 Market Street")


@pytest.fixture
def other_shop(db):
    return Shop.objects.create(name="Harbour Cafe")


@pytest.fixture
def milk(shop):
    """
    Milk stocked as 10 cartons of 1000 ml with 9500 ml already used.

    500 ml are available and the low-stock alert fires at or below 1200 ml.
    """
    return Ingredient.objects.create(
        shop=shop,
        name="Milk",
        quantity=Decimal("10"),
        unit_value=Decimal("1000"),
        unit=MeasurementUnit.MILLILITER,
        used=Decimal("9500"),
        min_quantity=Decimal("1"),
    )


@pytest.fixture
def coffee_beans(shop):
    return Ingredient.objects.create(
        shop=shop,
        name="Coffee Beans",
        quantity=Decimal("5"),
        unit_value=Decimal("1000"),
        unit=MeasurementUnit.GRAM,
        used=Decimal("0"),
        min_quantity=Decimal("1"),
    )


@pytest.fixture
def latte(shop, milk, coffee_beans):
    """Latte: 300 ml milk and 18 g coffee beans per cup."""
    item = MenuItem.objects.create(shop=shop, name="Latte", category="Coffee", price="4.50")
    Recipe.objects.create(
        menu_item=item,
        ingredient=milk,
        required_value=Decimal("300"),
        required_unit=MeasurementUnit.MILLILITER,
    )
    Recipe.objects.create(
        menu_item=item,
        ingredient=coffee_beans,
        required_value=Decimal("18"),
        required_unit=MeasurementUnit.GRAM,
    )
    return item


@pytest.fixture
def cappuccino(shop, milk):
    """Cappuccino: 0.4 l milk per cup (recipe unit differs from the storage unit)."""
    item = MenuItem.objects.create(shop=shop, name="Cappuccino", category="Coffee", price="4.00")
    Recipe.objects.create(
        menu_item=item,
        ingredient=milk,
        required_value=Decimal("0.4"),
        required_unit=MeasurementUnit.LITER,
    )
    return item


@pytest.fixture
def catalog(shop, latte, cappuccino):
    return DatabaseMenuCatalog(shop)


@pytest.fixture
def runner():
    """Transaction runner that retries without sleeping."""
    return TransactionRunner(max_attempts=5, backoff=0, max_backoff=0, sleep=lambda seconds: None)


@pytest.fixture
def customer(shop):
    return Customer.objects.create(shop=shop, name="Linh Tran", phone_number="0901234567")


@pytest.fixture
def notifications():
    return RecordingNotificationSink()


@pytest.fixture
def shop_context(shop, catalog, notifications):
    return ShopContext(
        shop=shop, terminal_id="counter-1", catalog=catalog, notifications=notifications
    )


@pytest.fixture
def make_order(shop):
    """
    Factory writing a PLACED order directly, without reserving stock.

    Items are (menu_item_id, name, quantity, price) tuples.
    """

    def _make_order(items=None, customer=None, payment_method=Order.CASH, discount="0"):
        items = items or [("latte", "Latte", 1, Decimal("4.50"))]
        subtotal = sum((Decimal(price) * quantity for _, _, quantity, price in items), Decimal("0"))
        discount = Decimal(discount)
        order = Order.objects.create(
            shop=shop,
            customer=customer,
            subtotal=subtotal,
            discount=discount,
            total=subtotal - discount,
            payment_method=payment_method,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    menu_item_id=menu_item_id,
                    name=name,
                    quantity=quantity,
                    price=Decimal(price),
                )
                for menu_item_id, name, quantity, price in items
            ]
        )
        return order

    return _make_order
