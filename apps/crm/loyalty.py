"""
Loyalty point accrual for completed orders.

Accrual is the last post-reservation step of an order. The customer's
balance, the LoyaltyTransaction entry and the order's move to COMPLETED are
committed together, so retrying or resuming an order never credits it twice.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import DatabaseError
from django_fsm import can_proceed

from apps.core.exceptions import PersistenceError
from apps.core.transactions import TransactionRunner

from .models import Customer, LoyaltyTransaction

logger = logging.getLogger(__name__)

POINT_PRECISION = Decimal("0.0001")


def points_for(total, rate) -> Decimal:
    """Points earned for an order total at the given rate."""
    return (Decimal(total) * Decimal(rate)).quantize(POINT_PRECISION)


class LoyaltyAccrual:
    """
    Credit loyalty points for an order and mark it completed.

    Args:
        runner: TransactionRunner used for the accrual transaction
    """

    def __init__(self, runner: Optional[TransactionRunner] = None):
        self.runner = runner or TransactionRunner()

    def accrue(self, order) -> Optional[LoyaltyTransaction]:
        """
        Credit the order's customer and advance the order to COMPLETED.

        Orders without a customer are only advanced. Orders that are already
        completed are left untouched.

        Returns:
            The LoyaltyTransaction created, or None if no points were credited

        Raises:
            PersistenceError: If the order is not ready for accrual or the
                database write failed
            TransientConflict: If concurrent updates exhausted the retries
        """
        from apps.sales.models import Order

        rate = order.shop.effective_point_rate()

        def body(tx):
            current = tx.read(Order, order.pk)
            if current.status == Order.COMPLETED:
                return current, None
            if not can_proceed(current.mark_completed):
                raise PersistenceError(
                    f"Order {current.short_reference} cannot be completed from {current.status}."
                )

            entry = None
            if current.customer_id:
                customer = tx.read(Customer, current.customer_id)
                earned = points_for(current.total, rate)
                customer.point += earned
                tx.write(customer, ["point"])
                entry = LoyaltyTransaction(
                    customer=customer, order=current, points=earned, point_rate=rate
                )
                tx.create(entry)

            current.mark_completed()
            tx.write(current, ["status"])
            return current, entry

        try:
            current, entry = self.runner.run(
                body, label=f"loyalty accrual #{order.short_reference}"
            )
        except Customer.DoesNotExist as exc:
            raise PersistenceError(
                f"Customer of order {order.short_reference} no longer exists."
            ) from exc
        except DatabaseError as exc:
            logger.exception(f"Failed to credit loyalty points for order {order.pk}")
            raise PersistenceError(f"Could not update customer points: {exc}") from exc

        order.status = current.status
        order.version = current.version

        if entry is not None:
            logger.info(
                f"Credited {entry.points} points to customer {entry.customer_id} "
                f"for order {order.short_reference}"
            )
        return entry
