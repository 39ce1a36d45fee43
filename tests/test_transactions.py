"""
Tests for optimistic transactions over versioned documents.
"""

from decimal import Decimal
from unittest.mock import MagicMock

from django.db.models import F

import pytest

from apps.core.exceptions import ReadConflict, TransientConflict
from apps.core.transactions import Transaction, TransactionRunner
from apps.inventory.models import Ingredient


def bump(ingredient, **values):
    """Simulate another writer committing a change to the ingredient."""
    Ingredient.objects.filter(pk=ingredient.pk).update(version=F("version") + 1, **values)


@pytest.mark.django_db
class TestTransaction:
    """Test a single transaction attempt."""

    def test_commit_applies_writes_and_bumps_version(self, milk):
        tx = Transaction()
        ingredient = tx.read(Ingredient, milk.pk)
        ingredient.used = Decimal("9600")
        tx.write(ingredient, ["used"])
        tx.commit()

        milk.refresh_from_db()
        assert milk.used == Decimal("9600")
        assert milk.version == 1
        assert ingredient.version == 1
        assert tx.committed_instances == [ingredient]

    def test_repeated_read_returns_same_instance(self, milk):
        tx = Transaction()
        assert tx.read(Ingredient, milk.pk) is tx.read(Ingredient, milk.pk)

    def test_write_requires_read(self, milk):
        tx = Transaction()
        with pytest.raises(ValueError):
            tx.write(milk, ["used"])

    def test_modified_write_target_conflicts(self, milk):
        tx = Transaction()
        ingredient = tx.read(Ingredient, milk.pk)
        ingredient.used = Decimal("9600")
        tx.write(ingredient, ["used"])

        bump(milk, used=Decimal("9700"))

        with pytest.raises(ReadConflict):
            tx.commit()
        milk.refresh_from_db()
        assert milk.used == Decimal("9700")

    def test_modified_read_only_document_conflicts(self, milk, coffee_beans):
        """A document that was only read still invalidates the commit if it changed."""
        tx = Transaction()
        tx.read(Ingredient, milk.pk)
        beans = tx.read(Ingredient, coffee_beans.pk)
        beans.used = Decimal("100")
        tx.write(beans, ["used"])

        bump(milk)

        with pytest.raises(ReadConflict):
            tx.commit()
        coffee_beans.refresh_from_db()
        assert coffee_beans.used == Decimal("0")

    def test_read_or_none(self, milk, shop):
        tx = Transaction()
        assert tx.read_or_none(Ingredient, shop=shop, name="Milk") == milk
        assert tx.read_or_none(Ingredient, shop=shop, name="Cocoa") is None

    def test_has_changes(self, milk):
        tx = Transaction()
        tx.read(Ingredient, milk.pk)
        assert not tx.has_changes
        tx.write(tx.read(Ingredient, milk.pk), ["used"])
        assert tx.has_changes


@pytest.mark.django_db
class TestTransactionRunner:
    """Test retries, backoff and exhaustion."""

    def test_returns_body_result(self, milk, runner):
        def body(tx):
            ingredient = tx.read(Ingredient, milk.pk)
            ingredient.used += Decimal("100")
            tx.write(ingredient, ["used"])
            return ingredient.used

        assert runner.run(body) == Decimal("9600")
        milk.refresh_from_db()
        assert milk.used == Decimal("9600")

    def test_retries_after_conflict_with_fresh_reads(self, milk):
        sleep = MagicMock()
        runner = TransactionRunner(max_attempts=3, backoff=0.05, max_backoff=1.0, sleep=sleep)
        attempts = []

        def body(tx):
            attempts.append(tx.attempt)
            ingredient = tx.read(Ingredient, milk.pk)
            if tx.attempt == 1:
                bump(milk, used=Decimal("9550"))
            ingredient.used += Decimal("100")
            tx.write(ingredient, ["used"])

        runner.run(body)

        assert attempts == [1, 2]
        sleep.assert_called_once_with(0.05)
        milk.refresh_from_db()
        # The retry started from the concurrent writer's value
        assert milk.used == Decimal("9650")
        assert milk.version == 2

    def test_gives_up_after_max_attempts(self, milk):
        sleep = MagicMock()
        runner = TransactionRunner(max_attempts=3, backoff=0.05, max_backoff=1.0, sleep=sleep)

        def body(tx):
            ingredient = tx.read(Ingredient, milk.pk)
            bump(milk)
            ingredient.used += Decimal("100")
            tx.write(ingredient, ["used"])

        with pytest.raises(TransientConflict) as exc_info:
            runner.run(body)

        assert exc_info.value.attempts == 3
        assert sleep.call_count == 2
        milk.refresh_from_db()
        assert milk.used == Decimal("9500")

    def test_body_errors_propagate_without_retry(self, milk, runner):
        calls = []

        def body(tx):
            calls.append(tx.attempt)
            ingredient = tx.read(Ingredient, milk.pk)
            ingredient.used = Decimal("0")
            tx.write(ingredient, ["used"])
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            runner.run(body)

        assert calls == [1]
        milk.refresh_from_db()
        assert milk.used == Decimal("9500")

    def test_backoff_doubles_up_to_cap(self):
        runner = TransactionRunner(max_attempts=6, backoff=0.05, max_backoff=0.3)
        assert [runner.delay_for(attempt) for attempt in range(1, 6)] == [
            0.05,
            0.1,
            0.2,
            0.3,
            0.3,
        ]

    def test_defaults_come_from_settings(self, settings):
        settings.POS_FULFILLMENT = {**settings.POS_FULFILLMENT, "TRANSACTION_MAX_ATTEMPTS": 7}
        assert TransactionRunner().max_attempts == 7

    def test_rejects_zero_attempts(self, settings):
        settings.POS_FULFILLMENT = {**settings.POS_FULFILLMENT, "TRANSACTION_MAX_ATTEMPTS": 0}
        with pytest.raises(ValueError):
            TransactionRunner()

    @pytest.mark.parametrize("max_attempts", [0, -1])
    def test_rejects_explicit_attempts_below_one(self, max_attempts):
        with pytest.raises(ValueError):
            TransactionRunner(max_attempts=max_attempts)
