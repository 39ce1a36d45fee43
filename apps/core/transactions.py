"""
Optimistic read-modify-write transactions over versioned documents.

A transaction body reads documents through a Transaction, mutates the returned
instances and stages writes. Nothing touches the database until commit, which
runs in a single atomic block and applies every write as a compare-and-swap on
the document version. If any document read by the body changed in the
meantime, the commit is rolled back and the body runs again from scratch with
fresh reads, up to a bounded number of attempts.

Example:
    >>> runner = TransactionRunner()
    >>> def body(tx):
    ...     ingredient = tx.read(Ingredient, ingredient_id)
    ...     ingredient.used += Decimal("250")
    ...     tx.write(ingredient, ["used"])
    ...     return ingredient
    >>> runner.run(body, label="adjust stock")
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from django.core.exceptions import FieldDoesNotExist
from django.db import IntegrityError, models, transaction
from django.db.models import F
from django.utils import timezone

from apps.core.conf import fulfillment_setting
from apps.core.exceptions import ReadConflict, TransientConflict

logger = logging.getLogger(__name__)


class Transaction:
    """
    Read set and staged writes of one transaction attempt.

    Instances handed out by read() are private to the attempt; a retry always
    starts from a new Transaction.
    """

    def __init__(self, attempt: int = 1):
        self.attempt = attempt
        self._reads: Dict[Tuple[str, str], Tuple[models.Model, int]] = {}
        self._writes: Dict[Tuple[str, str], set] = {}
        self._creates: List[models.Model] = []
        self.committed_instances: List[models.Model] = []

    @staticmethod
    def _key(model, pk) -> Tuple[str, str]:
        return (model._meta.label, str(pk))

    def _track(self, instance):
        key = self._key(type(instance), instance.pk)
        if key in self._reads:
            return self._reads[key][0]
        self._reads[key] = (instance, instance.version)
        return instance

    def read(self, model, pk):
        """
        Read a document by primary key and record its version.

        Raises:
            model.DoesNotExist: If no such document exists
        """
        key = self._key(model, pk)
        if key in self._reads:
            return self._reads[key][0]
        return self._track(model._default_manager.get(pk=pk))

    def read_or_none(self, model, **lookup):
        """Read the first document matching lookup, or None if there is none."""
        instance = model._default_manager.filter(**lookup).order_by("pk").first()
        if instance is None:
            return None
        return self._track(instance)

    def write(self, instance, fields):
        """
        Stage an update of a document previously read in this transaction.

        Args:
            instance: Instance returned by read() or read_or_none()
            fields: Names of the fields to persist
        """
        key = self._key(type(instance), instance.pk)
        if key not in self._reads:
            raise ValueError(
                f"{type(instance).__name__} {instance.pk} must be read before it is written"
            )
        self._writes.setdefault(key, set()).update(fields)

    def create(self, instance):
        """Stage the insert of a new document."""
        self._creates.append(instance)

    @property
    def has_changes(self) -> bool:
        return bool(self._writes or self._creates)

    def commit(self):
        """
        Apply staged writes atomically.

        Raises:
            ReadConflict: If any document read by this transaction was modified
                by another writer, or a staged insert collided with one
        """
        now = timezone.now()
        committed = []

        with transaction.atomic():
            for key, (instance, version) in self._reads.items():
                model = type(instance)
                manager = model._default_manager
                fields = self._writes.get(key)

                if fields:
                    values = {name: getattr(instance, name) for name in fields}
                    if _has_field(model, "updated_at"):
                        instance.updated_at = now
                        values["updated_at"] = now
                    updated = manager.filter(pk=instance.pk, version=version).update(
                        version=F("version") + 1, **values
                    )
                    if updated != 1:
                        raise ReadConflict(
                            f"{model.__name__} {instance.pk} was modified concurrently"
                        )
                    instance.version = version + 1
                    committed.append(instance)
                else:
                    current = list(
                        manager.select_for_update()
                        .filter(pk=instance.pk)
                        .values_list("version", flat=True)
                    )
                    if current != [version]:
                        raise ReadConflict(
                            f"{model.__name__} {instance.pk} was modified concurrently"
                        )

            for instance in self._creates:
                try:
                    with transaction.atomic():
                        instance.save(force_insert=True)
                except IntegrityError as exc:
                    raise ReadConflict(
                        f"{type(instance).__name__} was created concurrently: {exc}"
                    ) from exc
                committed.append(instance)

        self.committed_instances = committed


def _has_field(model, name) -> bool:
    try:
        model._meta.get_field(name)
    except FieldDoesNotExist:
        return False
    return True


class TransactionRunner:
    """
    Run a transaction body with bounded retries on concurrent modification.

    Args:
        max_attempts: Attempts before giving up (defaults to
            POS_FULFILLMENT["TRANSACTION_MAX_ATTEMPTS"])
        backoff: Initial delay in seconds, doubled after every conflict
        max_backoff: Upper bound for the delay
        sleep: Sleep function, replaceable in tests
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        backoff: Optional[float] = None,
        max_backoff: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts is None:
            max_attempts = fulfillment_setting("TRANSACTION_MAX_ATTEMPTS")
        self.max_attempts = max_attempts
        self.backoff = fulfillment_setting("TRANSACTION_BACKOFF") if backoff is None else backoff
        self.max_backoff = (
            fulfillment_setting("TRANSACTION_MAX_BACKOFF") if max_backoff is None else max_backoff
        )
        self.sleep = sleep

        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        return min(self.max_backoff, self.backoff * (2 ** (attempt - 1)))

    def run(self, fn: Callable[[Transaction], Any], label: str = "transaction") -> Any:
        """
        Run fn(tx) and commit its staged writes, retrying on conflicts.

        Exceptions raised by fn propagate immediately and nothing is written.

        Returns:
            Whatever fn returned in the attempt that committed

        Raises:
            TransientConflict: If every attempt hit a concurrent modification
        """
        for attempt in range(1, self.max_attempts + 1):
            tx = Transaction(attempt)
            result = fn(tx)
            try:
                tx.commit()
            except ReadConflict as exc:
                logger.warning(
                    f"{label}: attempt {attempt}/{self.max_attempts} conflicted ({exc.message})"
                )
                if attempt < self.max_attempts:
                    self.sleep(self.delay_for(attempt))
                continue

            if attempt > 1:
                logger.info(f"{label}: committed after {attempt} attempts")
            return result

        logger.error(f"{label}: giving up after {self.max_attempts} conflicting attempts")
        raise TransientConflict(
            f"{label} kept conflicting with concurrent updates", attempts=self.max_attempts
        )
