"""
Serializers for POS orders.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.crm.models import Customer
from apps.menu.models import MenuItem

from .cart import Cart, CartLine, DiscountVoucher
from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Serializer for OrderItem model."""

    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "menu_item_id",
            "name",
            "quantity",
            "price",
            "temperature",
            "consumption",
            "note",
            "subtotal",
        ]
        read_only_fields = fields


class OrderDetailSerializer(serializers.ModelSerializer):
    """Detailed serializer for Order with its items."""

    items = OrderItemSerializer(many=True, read_only=True)
    reference = serializers.CharField(source="short_reference", read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "reference",
            "terminal_id",
            "customer",
            "customer_name",
            "items",
            "subtotal",
            "discount",
            "total",
            "payment_method",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderLineInputSerializer(serializers.Serializer):
    """One line of an order submission."""

    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    temperature = serializers.ChoiceField(
        choices=OrderItem.TEMPERATURE_CHOICES, default=OrderItem.HOT
    )
    consumption = serializers.ChoiceField(
        choices=OrderItem.CONSUMPTION_CHOICES, default=OrderItem.STAY
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class OrderSubmitSerializer(serializers.Serializer):
    """
    Serializer for submitting an order from a POS terminal.

    The shop is passed in the serializer context; menu items and the customer
    must belong to it. Prices and names come from the menu, never from the
    request.
    """

    terminal_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    items = OrderLineInputSerializer(many=True)
    payment_method = serializers.ChoiceField(
        choices=Order.PAYMENT_METHOD_CHOICES, default=Order.CASH
    )
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
        default=Decimal("0"),
    )
    customer_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_items(self, value):
        """Validate that at least one item is provided and every item is on the menu."""
        if not value:
            raise serializers.ValidationError("At least one item is required.")

        shop = self.context["shop"]
        ids = {line["menu_item_id"] for line in value}
        menu_items = {item.id: item for item in MenuItem.objects.filter(shop=shop, id__in=ids)}

        missing = ids - set(menu_items)
        if missing:
            raise serializers.ValidationError(
                f"Menu item(s) not found: {', '.join(sorted(str(item_id) for item_id in missing))}"
            )

        unavailable = [item.name for item in menu_items.values() if not item.is_available]
        if unavailable:
            raise serializers.ValidationError(
                f"Currently unavailable: {', '.join(sorted(unavailable))}"
            )

        self._menu_items = menu_items
        return value

    def validate_customer_id(self, value):
        """Validate that customer exists and belongs to the shop."""
        if value is None:
            return value

        try:
            self._customer = Customer.objects.get(id=value, shop=self.context["shop"])
        except Customer.DoesNotExist:
            raise serializers.ValidationError("Customer not found.")
        return value

    def build_cart(self) -> Cart:
        """Turn the validated payload into a Cart."""
        data = self.validated_data
        cart = Cart()

        for line in data["items"]:
            menu_item = self._menu_items[line["menu_item_id"]]
            cart.lines.append(
                CartLine(
                    menu_item_id=str(menu_item.id),
                    name=menu_item.name,
                    price=menu_item.price,
                    quantity=line["quantity"],
                    temperature=line["temperature"],
                    consumption=line["consumption"],
                    note=line.get("note", ""),
                )
            )

        cart.set_payment_method(data["payment_method"])
        if data.get("discount_percent"):
            cart.select_discount(DiscountVoucher.percent(data["discount_percent"]))
        if data.get("customer_id"):
            cart.select_customer(self._customer)
        return cart
