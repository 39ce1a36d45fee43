"""
Customer lookup and maintenance for the POS checkout.
"""

import logging
import re
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db.models import Q

from apps.core.exceptions import OrderValidationError
from apps.core.transactions import TransactionRunner

from .models import Customer

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20
MIN_NAME_LENGTH = 2
PHONE_NUMBER_RE = re.compile(r"^[0-9]{10,11}$")


class CustomerDirectory:
    """
    Customers of one shop.

    Args:
        shop: Shop whose customers are managed
        runner: TransactionRunner used for updates
    """

    def __init__(self, shop, runner: Optional[TransactionRunner] = None):
        self.shop = shop
        self.runner = runner or TransactionRunner()

    def get(self, customer_id) -> Optional[Customer]:
        try:
            return Customer.objects.get(pk=customer_id, shop=self.shop)
        except (Customer.DoesNotExist, ValidationError, ValueError):
            return None

    def search(self, term: str) -> List[Customer]:
        """Find customers whose name or phone number contains the term."""
        term = (term or "").strip()
        queryset = Customer.objects.filter(shop=self.shop)
        if term:
            queryset = queryset.filter(Q(name__icontains=term) | Q(phone_number__icontains=term))
        return list(queryset.order_by("name")[:SEARCH_LIMIT])

    def quick_add(self, name: str, phone_number: str = "", gender: str = "") -> Customer:
        """
        Create a customer on the spot during checkout.

        Raises:
            OrderValidationError: If the name or phone number is invalid, or
                the phone number is already registered in this shop
        """
        name = (name or "").strip()
        phone_number = (phone_number or "").strip()

        if len(name) < MIN_NAME_LENGTH:
            raise OrderValidationError(
                f"Customer name must have at least {MIN_NAME_LENGTH} characters."
            )
        if not PHONE_NUMBER_RE.match(phone_number):
            raise OrderValidationError("Phone number must have 10 or 11 digits.")
        if Customer.objects.filter(shop=self.shop, phone_number=phone_number).exists():
            raise OrderValidationError("This phone number is already registered.")

        customer = Customer.objects.create(
            shop=self.shop,
            name=name,
            phone_number=phone_number,
            gender=gender or "",
        )
        logger.info(f"Added customer {customer.pk} to shop {self.shop.pk}")
        return customer

    def update(self, customer) -> Customer:
        """
        Save the contact details of a customer.

        The point balance is never written here; it only changes through
        loyalty accrual.
        """

        def body(tx):
            current = tx.read(Customer, customer.pk)
            current.name = customer.name
            current.phone_number = customer.phone_number
            current.gender = customer.gender
            tx.write(current, ["name", "phone_number", "gender"])
            return current

        current = self.runner.run(body, label=f"update customer {customer.pk}")
        customer.point = current.point
        customer.version = current.version
        return customer
