"""
Exception taxonomy for order fulfillment.

Reservation-stage errors (validation, insufficient stock, transient conflicts)
abort a submission before anything is written. Post-reservation errors are
reported to the user but the steps already committed are kept.
"""


class FulfillmentError(Exception):
    """Base class for every error raised by the fulfillment engine."""

    default_message = "Order fulfillment failed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OrderValidationError(FulfillmentError):
    """The order is empty or invalid and was rejected before reservation."""

    default_message = "The order is invalid."


class UnitConversionError(OrderValidationError):
    """A recipe amount cannot be expressed in its ingredient's storage unit."""

    def __init__(self, ingredient_name, from_unit, to_unit):
        self.ingredient_name = ingredient_name
        self.from_unit = from_unit
        self.to_unit = to_unit
        super().__init__(
            f"Cannot convert {from_unit} to {to_unit} for ingredient '{ingredient_name}'."
        )


class UnknownIngredient(OrderValidationError):
    """A recipe references an ingredient that has no ledger entry."""

    def __init__(self, ingredient_id, ingredient_name=""):
        self.ingredient_id = ingredient_id
        self.ingredient_name = ingredient_name
        super().__init__(f"Ingredient '{ingredient_name or ingredient_id}' was not found.")


class InsufficientStock(FulfillmentError):
    """An ingredient does not have enough stock for the order."""

    def __init__(self, ingredient_name, available=None, required=None):
        self.ingredient_name = ingredient_name
        self.available = available
        self.required = required
        super().__init__(f"Insufficient stock for {ingredient_name}.")


class ReadConflict(FulfillmentError):
    """
    A document read inside a transaction changed before commit.

    Only raised inside the transaction runner; callers see TransientConflict
    once the retries are exhausted.
    """

    default_message = "A document was modified concurrently."


class TransientConflict(FulfillmentError):
    """Concurrent modification persisted across every retry attempt."""

    default_message = "The shop is busy, please try again."

    def __init__(self, message=None, attempts=0):
        self.attempts = attempts
        super().__init__(message)


class PersistenceError(FulfillmentError):
    """Writing the order, revenue record or customer failed."""

    default_message = "Could not save the order data."


class PrinterError(FulfillmentError):
    """The receipt printer is missing or failed. Never fatal."""

    default_message = "Printer is not connected, the receipt was not printed."
