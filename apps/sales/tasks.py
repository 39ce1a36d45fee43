"""
Celery tasks for POS orders.
"""

import logging
from datetime import timedelta

from django.utils import timezone

from celery import shared_task

from apps.core.conf import fulfillment_setting
from apps.core.context import ShopContext
from apps.core.exceptions import PrinterError

from .models import Order
from .receipt_service import ReceiptPrinterService

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def print_receipt_task(self, order_id: str):
    """
    Print the receipt of an order.

    The task result is the outcome of the print job; revoking the task
    cancels a job that has not started yet.

    Args:
        order_id: UUID of the Order to print

    Returns:
        {"printed": bool, "error": str or None}
    """
    try:
        order = Order.objects.select_related("shop", "customer").get(pk=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found, receipt not printed")
        return {"printed": False, "error": "Order not found."}

    try:
        ReceiptPrinterService().print_receipt(order)
    except PrinterError as exc:
        logger.info(f"Receipt for order {order.short_reference} not printed: {exc.message}")
        return {"printed": False, "error": exc.message}

    return {"printed": True, "error": None}


@shared_task
def resume_pending_orders(older_than_seconds=None):
    """
    Finish orders whose post-reservation steps were interrupted.

    Only orders that have not been touched for a while are picked up, so a
    submission still in progress is left alone.

    Args:
        older_than_seconds: Minimum idle time (defaults to
            POS_FULFILLMENT["RESUME_AFTER_SECONDS"])

    Returns:
        {"resumed": int, "failed": int}
    """
    from .orchestrator import OrderOrchestrator

    if older_than_seconds is None:
        older_than_seconds = fulfillment_setting("RESUME_AFTER_SECONDS")
    cutoff = timezone.now() - timedelta(seconds=older_than_seconds)

    pending = (
        Order.objects.filter(status__in=Order.PENDING_STATUSES, updated_at__lte=cutoff)
        .select_related("shop", "customer")
        .order_by("created_at")
    )

    resumed = failed = 0
    for order in pending:
        context = ShopContext.for_shop(order.shop, terminal_id=order.terminal_id)
        result = OrderOrchestrator(context).resume(order)
        if result.succeeded:
            resumed += 1
        else:
            failed += 1

    if resumed or failed:
        logger.info(f"Resumed {resumed} pending orders, {failed} still pending")
    return {"resumed": resumed, "failed": failed}
