"""
Order submission workflow.

A submission walks through these states:

    BUILDING -> RESERVING -> PERSISTING -> AGGREGATING -> ACCRUING
             -> PRINTING -> CLEARED

Reservation failures (invalid order, insufficient stock, persistent
conflicts) end in ABORTED with nothing written and the cart untouched.
Failures after the reservation end in FAILED: whatever was committed stays
committed and the order keeps its last durable status, from which
resume() (or the resume_pending_orders task) finishes it later. Printing
problems never fail a submission.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from django.db import DatabaseError, transaction

from apps.core.context import ShopContext
from apps.core.exceptions import (
    FulfillmentError,
    InsufficientStock,
    OrderValidationError,
    PersistenceError,
    PrinterError,
    TransientConflict,
)
from apps.core.transactions import TransactionRunner
from apps.crm.loyalty import LoyaltyAccrual
from apps.inventory.alerts import IngredientAlert
from apps.inventory.reservation import ReservationEngine
from apps.notifications.services import ERROR, INFO, SUCCESS, Notice
from apps.reporting.services import RevenueAggregator

from .models import Order, OrderItem
from .receipt_service import ReceiptPrinterService

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong while creating the order."


class SubmissionState(str, Enum):
    BUILDING = "BUILDING"
    RESERVING = "RESERVING"
    PERSISTING = "PERSISTING"
    AGGREGATING = "AGGREGATING"
    ACCRUING = "ACCRUING"
    PRINTING = "PRINTING"
    CLEARED = "CLEARED"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


@dataclass
class SubmissionResult:
    """Outcome of one submission (or resume) of an order."""

    state: SubmissionState = SubmissionState.BUILDING
    order: Optional[Order] = None
    alerts: List[IngredientAlert] = field(default_factory=list)
    error: Optional[Exception] = None
    notices: List[Notice] = field(default_factory=list)
    print_job: Optional[object] = None

    @property
    def succeeded(self) -> bool:
        return self.state == SubmissionState.CLEARED

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "order_id": str(self.order.pk) if self.order else None,
            "reference": self.order.short_reference if self.order else None,
            "alerts": [alert.to_dict() for alert in self.alerts],
            "error": getattr(self.error, "message", None) if self.error else None,
            "notices": [notice.to_dict() for notice in self.notices],
        }


class OrderOrchestrator:
    """
    Submit carts of one shop terminal.

    Args:
        context: ShopContext with the shop, catalog and notification sink
        runner: TransactionRunner shared by the transactional steps
        printer: ReceiptPrinterService used to check the printer before a
            print job is queued
    """

    def __init__(
        self,
        context: ShopContext,
        runner: Optional[TransactionRunner] = None,
        printer: Optional[ReceiptPrinterService] = None,
    ):
        self.context = context
        self.runner = runner or TransactionRunner()
        self.reservation = ReservationEngine(context.catalog, runner=self.runner)
        self.revenue = RevenueAggregator(runner=self.runner)
        self.loyalty = LoyaltyAccrual(runner=self.runner)
        self.printer = printer

    # Notices

    def _notify(self, result: SubmissionResult, level: str, message: str):
        sink = self.context.notifications
        if sink is not None:
            if level == SUCCESS:
                sink.show_success(message)
            elif level == ERROR:
                sink.show_error(message)
            else:
                sink.show_info(message)
        result.notices.append(Notice(level=level, message=message))

    def _fail(self, result: SubmissionResult, state: SubmissionState, error: Exception):
        result.state = state
        result.error = error
        message = error.message if isinstance(error, FulfillmentError) else UNEXPECTED_ERROR_MESSAGE
        self._notify(result, ERROR, message)
        return result

    # Submission

    def submit(self, cart) -> SubmissionResult:
        """
        Reserve stock for the cart, write the order and run the remaining steps.

        The cart is cleared only when the submission reaches CLEARED.

        Returns:
            SubmissionResult describing how far the submission got
        """
        result = SubmissionResult()
        shop = self.context.shop

        try:
            cart.validate()
            if cart.customer is not None and cart.customer.shop_id != shop.pk:
                raise OrderValidationError("The selected customer belongs to another shop.")
        except OrderValidationError as exc:
            logger.info(f"Rejected order for shop {shop.pk}: {exc.message}")
            return self._fail(result, SubmissionState.BUILDING, exc)

        result.state = SubmissionState.RESERVING
        try:
            reservation = self._reserve(cart.lines)
        except (OrderValidationError, InsufficientStock, TransientConflict) as exc:
            logger.info(f"Order for shop {shop.pk} aborted: {exc.message}")
            return self._fail(result, SubmissionState.ABORTED, exc)
        except Exception as exc:
            logger.exception(f"Unexpected error reserving stock for shop {shop.pk}")
            return self._fail(result, SubmissionState.FAILED, exc)
        result.alerts = reservation.alerts

        result.state = SubmissionState.PERSISTING
        try:
            result.order = self._persist(cart)
        except PersistenceError as exc:
            logger.error(f"Stock reserved but order for shop {shop.pk} was not saved: {exc}")
            return self._fail(result, SubmissionState.FAILED, exc)

        if not self._complete(result):
            return result

        result.state = SubmissionState.PRINTING
        self._print(result)

        cart.clear()
        result.state = SubmissionState.CLEARED
        self._notify(result, SUCCESS, f"Order created with ID#{result.order.short_reference}")
        return result

    def resume(self, order: Order) -> SubmissionResult:
        """
        Run the post-reservation steps an order has not committed yet.

        Returns:
            SubmissionResult in CLEARED once every step is committed, FAILED
            otherwise
        """
        result = SubmissionResult(state=SubmissionState.PERSISTING, order=order)
        if self._complete(result):
            result.state = SubmissionState.CLEARED
            logger.info(f"Resumed order {order.short_reference} to {order.status}")
        return result

    def _reserve(self, lines):
        try:
            return self.reservation.reserve(lines, shop=self.context.shop)
        except TransientConflict:
            logger.warning("Reservation kept conflicting, retrying the whole reservation once")
            return self.reservation.reserve(lines, shop=self.context.shop)

    def _persist(self, cart) -> Order:
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    shop=self.context.shop,
                    terminal_id=self.context.terminal_id,
                    customer=cart.customer,
                    subtotal=cart.subtotal,
                    discount=cart.discount,
                    total=cart.total,
                    payment_method=cart.payment_method,
                )
                OrderItem.objects.bulk_create(
                    [
                        OrderItem(
                            order=order,
                            menu_item_id=line.menu_item_id,
                            name=line.name,
                            quantity=line.quantity,
                            price=line.price,
                            temperature=line.temperature,
                            consumption=line.consumption,
                            note=line.note,
                        )
                        for line in cart.lines
                    ]
                )
        except DatabaseError as exc:
            raise PersistenceError(f"Could not save the order: {exc}") from exc

        logger.info(f"Created order {order.short_reference} for shop {order.shop_id}")
        return order

    def _complete(self, result: SubmissionResult) -> bool:
        order = result.order
        try:
            if order.status == Order.PLACED:
                result.state = SubmissionState.AGGREGATING
                self.revenue.record_order(order)
            if order.status == Order.REVENUE_RECORDED:
                result.state = SubmissionState.ACCRUING
                self.loyalty.accrue(order)
        except FulfillmentError as exc:
            logger.error(f"Order {order.short_reference} stopped at {order.status}: {exc.message}")
            self._fail(result, SubmissionState.FAILED, exc)
            return False
        except Exception as exc:
            logger.exception(f"Unexpected error completing order {order.short_reference}")
            self._fail(result, SubmissionState.FAILED, exc)
            return False
        return True

    def _print(self, result: SubmissionResult):
        from .tasks import print_receipt_task

        order = result.order
        try:
            printer = self.printer or ReceiptPrinterService()
            printer.ensure_connected()
        except PrinterError as exc:
            self._notify(result, INFO, exc.message)
            return

        try:
            job = print_receipt_task.delay(str(order.pk))
        except Exception:
            logger.exception(f"Could not queue receipt for order {order.short_reference}")
            self._notify(result, INFO, PrinterError.default_message)
            return
        result.print_job = job

        if job.ready():
            outcome = job.get(propagate=False)
            if not (isinstance(outcome, dict) and outcome.get("printed")):
                error = outcome.get("error") if isinstance(outcome, dict) else None
                self._notify(result, INFO, error or PrinterError.default_message)
