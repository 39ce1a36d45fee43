"""
Revenue aggregation for the shop POS.

- Daily revenue upsert, applied exactly once per order
- Read helpers for revenue dashboards (period summaries, growth)
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from django.db import DatabaseError
from django.utils import timezone

from apps.core.exceptions import PersistenceError
from apps.core.transactions import TransactionRunner
from apps.reporting.models import RevenueRecord

logger = logging.getLogger(__name__)

AVERAGE_PRECISION = Decimal("0.000001")

RECORD_FIELDS = [
    "revenue",
    "total_orders",
    "average_order_value",
    "top_selling_items",
    "peak_hours",
    "day_of_week_revenue",
    "new_customers",
    "returning_customers",
    "total_customers",
    "payment_methods",
]


def local_slot(order) -> Tuple:
    """
    Return (date, hour, weekday) of an order in its shop's time zone.

    Weekdays count from Sunday = 0.
    """
    local = timezone.localtime(order.created_at, order.shop.zone)
    return local.date(), local.hour, local.isoweekday() % 7


def _add_money(mapping: Dict[str, str], key, amount: Decimal):
    key = str(key)
    mapping[key] = str(Decimal(mapping.get(key, "0")) + amount)


def merge_order(record: RevenueRecord, order, items, hour: int, weekday: int) -> RevenueRecord:
    """
    Add one order's contribution to a revenue record in place.

    Works the same on a fresh record (all counters at zero) and on one loaded
    from the database.
    """
    total = Decimal(order.total)

    record.revenue = Decimal(record.revenue) + total
    record.total_orders += 1
    record.average_order_value = (record.revenue / record.total_orders).quantize(
        AVERAGE_PRECISION
    )

    top_items = dict(record.top_selling_items or {})
    for item in items:
        key = str(item.menu_item_id)
        top_items[key] = int(top_items.get(key, 0)) + item.quantity
    record.top_selling_items = top_items

    peak_hours = dict(record.peak_hours or {})
    _add_money(peak_hours, hour, total)
    record.peak_hours = peak_hours

    day_of_week = dict(record.day_of_week_revenue or {})
    _add_money(day_of_week, weekday, total)
    record.day_of_week_revenue = day_of_week

    # Orders without a customer count as new customers
    if order.customer_id is None:
        record.new_customers += 1
    else:
        record.returning_customers += 1
    record.total_customers = record.new_customers + record.returning_customers

    payment_methods = dict(record.payment_methods or {})
    payment_methods[order.payment_method] = int(payment_methods.get(order.payment_method, 0)) + 1
    record.payment_methods = payment_methods

    return record


class RevenueAggregator:
    """
    Upsert the daily revenue record of an order's shop.

    Args:
        runner: TransactionRunner used for the upsert transaction
    """

    def __init__(self, runner: Optional[TransactionRunner] = None):
        self.runner = runner or TransactionRunner()

    def record_order(self, order) -> Optional[RevenueRecord]:
        """
        Add an order to its day's revenue record and mark it REVENUE_RECORDED.

        The record and the order status are committed together; an order that
        has already been recorded is skipped.

        Returns:
            The committed RevenueRecord, or None if the order was already
            recorded

        Raises:
            PersistenceError: If the database write failed
            TransientConflict: If concurrent updates exhausted the retries
        """
        from apps.sales.models import Order

        day, hour, weekday = local_slot(order)
        items = list(order.items.all())

        def body(tx):
            current = tx.read(Order, order.pk)
            if current.status != Order.PLACED:
                return current, None

            record = tx.read_or_none(RevenueRecord, shop_id=order.shop_id, date=day)
            if record is None:
                record = RevenueRecord(shop_id=order.shop_id, date=day)
                merge_order(record, current, items, hour, weekday)
                tx.create(record)
            else:
                merge_order(record, current, items, hour, weekday)
                tx.write(record, RECORD_FIELDS)

            current.mark_revenue_recorded()
            tx.write(current, ["status"])
            return current, record

        try:
            current, record = self.runner.run(
                body, label=f"revenue upsert #{order.short_reference}"
            )
        except DatabaseError as exc:
            logger.exception(f"Failed to record revenue for order {order.pk}")
            raise PersistenceError(f"Could not update the revenue record: {exc}") from exc

        order.status = current.status
        order.version = current.version

        if record is not None:
            logger.info(
                f"Recorded order {order.short_reference} in revenue of {day}: "
                f"{record.revenue} over {record.total_orders} orders"
            )
        return record


def records_between(shop, start, end) -> List[RevenueRecord]:
    """Revenue records of a shop from start to end (inclusive), oldest first."""
    return list(RevenueRecord.objects.filter(shop=shop, date__range=(start, end)).order_by("date"))


@dataclass
class RevenueSummary:
    total_revenue: Decimal = Decimal("0")
    total_orders: int = 0
    average_order_value: Decimal = Decimal("0")
    average_daily_revenue: Decimal = Decimal("0")
    top_selling_items: List[Tuple[str, int]] = field(default_factory=list)
    peak_hours: Dict[int, Decimal] = field(default_factory=dict)
    peak_hour: Optional[int] = None
    best_day_of_week: Optional[int] = None
    most_popular_payment_method: Optional[str] = None
    new_customers: int = 0
    returning_customers: int = 0

    def to_dict(self) -> dict:
        return {
            "total_revenue": str(self.total_revenue),
            "total_orders": self.total_orders,
            "average_order_value": str(self.average_order_value),
            "average_daily_revenue": str(self.average_daily_revenue),
            "top_selling_items": [
                {"menu_item_id": item_id, "quantity": quantity}
                for item_id, quantity in self.top_selling_items
            ],
            "peak_hours": {str(hour): str(value) for hour, value in self.peak_hours.items()},
            "peak_hour": self.peak_hour,
            "best_day_of_week": self.best_day_of_week,
            "most_popular_payment_method": self.most_popular_payment_method,
            "new_customers": self.new_customers,
            "returning_customers": self.returning_customers,
        }


def summarize(records) -> RevenueSummary:
    """
    Merge daily records into one summary.

    Args:
        records: RevenueRecord instances, typically from records_between()

    Returns:
        RevenueSummary (all zero for an empty list)
    """
    records = list(records)
    summary = RevenueSummary()
    if not records:
        return summary

    items = Counter()
    hours = defaultdict(Decimal)
    weekdays = defaultdict(Decimal)
    payments = Counter()

    for record in records:
        summary.total_revenue += Decimal(record.revenue)
        summary.total_orders += record.total_orders
        summary.new_customers += record.new_customers
        summary.returning_customers += record.returning_customers
        for item_id, quantity in (record.top_selling_items or {}).items():
            items[item_id] += int(quantity)
        for hour, value in (record.peak_hours or {}).items():
            hours[int(hour)] += Decimal(value)
        for weekday, value in (record.day_of_week_revenue or {}).items():
            weekdays[int(weekday)] += Decimal(value)
        for method, count in (record.payment_methods or {}).items():
            payments[method] += int(count)

    if summary.total_orders:
        summary.average_order_value = (summary.total_revenue / summary.total_orders).quantize(
            AVERAGE_PRECISION
        )
    summary.average_daily_revenue = (summary.total_revenue / len(records)).quantize(
        AVERAGE_PRECISION
    )
    summary.top_selling_items = items.most_common()
    summary.peak_hours = dict(sorted(hours.items()))
    if hours:
        summary.peak_hour = max(hours, key=lambda hour: (hours[hour], -hour))
    if weekdays:
        summary.best_day_of_week = max(weekdays, key=lambda day: (weekdays[day], -day))
    if payments:
        summary.most_popular_payment_method = payments.most_common(1)[0][0]

    return summary


def revenue_growth(current, previous) -> Decimal:
    """
    Percentage change from previous to current.

    Returns 0 when there is nothing to compare against (previous is 0).
    """
    current, previous = Decimal(current), Decimal(previous)
    if previous == 0:
        return Decimal("0")
    return ((current - previous) / previous * 100).quantize(Decimal("0.01"))
