"""
Tests for daily revenue aggregation and reporting helpers.
"""

from datetime import date, datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError

import pytest

from apps.core.exceptions import PersistenceError
from apps.core.transactions import Transaction
from apps.reporting.models import RevenueRecord
from apps.reporting.services import (
    RevenueAggregator,
    local_slot,
    records_between,
    revenue_growth,
    summarize,
)
from apps.sales.models import Order


def created_at(order, moment):
    """Move an order to a given creation time."""
    Order.objects.filter(pk=order.pk).update(created_at=moment)
    order.refresh_from_db()
    return order


@pytest.mark.django_db
class TestLocalSlot:
    """Day, hour and weekday are taken in the shop's time zone."""

    def test_utc_shop(self, make_order):
        # 2024-01-07 is a Sunday
        order = created_at(make_order(), datetime(2024, 1, 7, 9, 30, tzinfo=dt_timezone.utc))
        assert local_slot(order) == (date(2024, 1, 7), 9, 0)

    def test_shop_time_zone_moves_the_day(self, shop, make_order):
        shop.timezone = "Asia/Tokyo"
        shop.save()
        order = created_at(make_order(), datetime(2024, 1, 7, 20, 30, tzinfo=dt_timezone.utc))
        assert local_slot(order) == (date(2024, 1, 8), 5, 1)


@pytest.mark.django_db
class TestRevenueAggregator:
    """Test RevenueAggregator.record_order()."""

    def test_first_order_creates_record(self, shop, make_order, runner):
        order = make_order(items=[("latte", "Latte", 2, "4.50")], payment_method=Order.CARD)

        record = RevenueAggregator(runner).record_order(order)

        record.refresh_from_db()
        assert record.shop == shop
        assert record.revenue == Decimal("9.00")
        assert record.total_orders == 1
        assert record.average_order_value == Decimal("9.00")
        assert record.top_selling_items == {"latte": 2}
        assert record.payment_methods == {Order.CARD: 1}
        hour = str(local_slot(order)[1])
        assert Decimal(record.peak_hours[hour]) == Decimal("9.00")
        order.refresh_from_db()
        assert order.status == Order.REVENUE_RECORDED

    def test_second_order_same_day_updates_record(self, make_order, runner):
        aggregator = RevenueAggregator(runner)
        aggregator.record_order(make_order(items=[("latte", "Latte", 1, "12.50")]))
        aggregator.record_order(make_order(items=[("mocha", "Mocha", 1, "20.00")]))

        record = RevenueRecord.objects.get()
        assert record.total_orders == 2
        assert record.revenue == Decimal("32.50")
        assert record.average_order_value == Decimal("16.25")
        assert record.top_selling_items == {"latte": 1, "mocha": 1}

    def test_average_matches_revenue_over_orders(self, make_order, runner):
        aggregator = RevenueAggregator(runner)
        for price in ("10.00", "10.00", "20.00"):
            aggregator.record_order(make_order(items=[("latte", "Latte", 1, price)]))

        record = RevenueRecord.objects.get()
        expected = (record.revenue / record.total_orders).quantize(Decimal("0.000001"))
        assert record.average_order_value == expected

    def test_new_and_returning_customers(self, make_order, customer, runner):
        """Orders without a customer count as new, orders with one as returning."""
        aggregator = RevenueAggregator(runner)
        aggregator.record_order(make_order())
        aggregator.record_order(make_order(customer=customer))

        record = RevenueRecord.objects.get()
        assert record.new_customers == 1
        assert record.returning_customers == 1
        assert record.total_customers == 2

    def test_weekday_bucket(self, make_order, runner):
        order = created_at(
            make_order(items=[("latte", "Latte", 1, "4.50")]),
            datetime(2024, 1, 10, 14, 0, tzinfo=dt_timezone.utc),
        )

        record = RevenueAggregator(runner).record_order(order)

        assert record.date == date(2024, 1, 10)
        assert record.day_of_week_revenue == {"3": "4.50"}
        assert record.peak_hours == {"14": "4.50"}

    def test_order_is_recorded_only_once(self, make_order, runner):
        order = make_order()
        aggregator = RevenueAggregator(runner)

        aggregator.record_order(order)
        assert aggregator.record_order(order) is None

        record = RevenueRecord.objects.get()
        assert record.total_orders == 1

    def test_database_errors_become_persistence_errors(self, make_order, runner):
        order = make_order()

        with patch.object(Transaction, "commit", side_effect=DatabaseError("disk full")):
            with pytest.raises(PersistenceError):
                RevenueAggregator(runner).record_order(order)

        order.refresh_from_db()
        assert order.status == Order.PLACED
        assert not RevenueRecord.objects.exists()


@pytest.mark.django_db
class TestConcurrentRevenueUpserts:
    """Two orders of the same day racing to create the day's record."""

    def test_both_orders_are_counted(self, make_order, runner):
        first = make_order(items=[("latte", "Latte", 1, "12.50")])
        second = make_order(items=[("mocha", "Mocha", 1, "20.00")])
        aggregator = RevenueAggregator(runner)

        original_commit = Transaction.commit
        interleaved = []

        def interleaving_commit(tx):
            # The second order creates the record between our read and our insert
            if not interleaved:
                interleaved.append(True)
                aggregator.record_order(second)
            return original_commit(tx)

        with patch.object(Transaction, "commit", new=interleaving_commit):
            aggregator.record_order(first)

        record = RevenueRecord.objects.get()
        assert record.total_orders == 2
        assert record.revenue == Decimal("32.50")
        assert record.average_order_value == Decimal("16.25")
        first.refresh_from_db()
        second.refresh_from_db()
        assert first.status == Order.REVENUE_RECORDED
        assert second.status == Order.REVENUE_RECORDED


class TestSummaries:
    """Test summarize() and revenue_growth() on unsaved records."""

    def make_record(self, day, revenue, orders, **extra):
        return RevenueRecord(date=day, revenue=Decimal(revenue), total_orders=orders, **extra)

    def test_empty_summary(self):
        summary = summarize([])
        assert summary.total_revenue == Decimal("0")
        assert summary.peak_hour is None

    def test_summary_merges_days(self):
        records = [
            self.make_record(
                date(2024, 1, 7),
                "30.00",
                2,
                top_selling_items={"latte": 3, "mocha": 1},
                peak_hours={"9": "10.00", "15": "20.00"},
                day_of_week_revenue={"0": "30.00"},
                payment_methods={"cash": 2},
                new_customers=1,
                returning_customers=1,
            ),
            self.make_record(
                date(2024, 1, 8),
                "10.00",
                2,
                top_selling_items={"mocha": 4},
                peak_hours={"9": "10.00"},
                day_of_week_revenue={"1": "10.00"},
                payment_methods={"card": 1, "cash": 1},
                new_customers=2,
            ),
        ]

        summary = summarize(records)

        assert summary.total_revenue == Decimal("40.00")
        assert summary.total_orders == 4
        assert summary.average_order_value == Decimal("10")
        assert summary.average_daily_revenue == Decimal("20")
        assert summary.top_selling_items == [("mocha", 5), ("latte", 3)]
        assert summary.peak_hours == {9: Decimal("20.00"), 15: Decimal("20.00")}
        # Ties go to the earlier hour
        assert summary.peak_hour == 9
        assert summary.best_day_of_week == 0
        assert summary.most_popular_payment_method == "cash"
        assert summary.new_customers == 3
        assert summary.returning_customers == 1

        data = summary.to_dict()
        assert data["total_revenue"] == "40.00"
        assert data["top_selling_items"][0] == {"menu_item_id": "mocha", "quantity": 5}

    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            ("150", "100", Decimal("50.00")),
            ("50", "100", Decimal("-50.00")),
            ("100", "0", Decimal("0")),
            ("0", "0", Decimal("0")),
        ],
    )
    def test_revenue_growth(self, current, previous, expected):
        assert revenue_growth(current, previous) == expected


@pytest.mark.django_db
def test_records_between(shop):
    for day in (1, 2, 3):
        RevenueRecord.objects.create(shop=shop, date=date(2024, 3, day))

    records = records_between(shop, date(2024, 3, 2), date(2024, 3, 3))

    assert [record.date for record in records] == [date(2024, 3, 2), date(2024, 3, 3)]
