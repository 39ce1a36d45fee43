"""
Access to the POS_FULFILLMENT settings block with defaults.
"""

from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    "TRANSACTION_MAX_ATTEMPTS": 5,
    "TRANSACTION_BACKOFF": 0.05,
    "TRANSACTION_MAX_BACKOFF": 1.0,
    "LOW_STOCK_ALERT_RATIO": Decimal("1.2"),
    "DEFAULT_POINT_RATE": Decimal("0.05"),
    "STRICT_UNIT_CONVERSION": False,
    "RECEIPT_PRINTER_BACKEND": None,
    "RESUME_AFTER_SECONDS": 60,
}


def fulfillment_setting(name):
    """
    Return a POS_FULFILLMENT setting, falling back to the built-in default.

    Args:
        name: Key inside the POS_FULFILLMENT dict

    Raises:
        KeyError: If the name is not a known setting
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown POS_FULFILLMENT setting: {name}")
    overrides = getattr(settings, "POS_FULFILLMENT", {}) or {}
    return overrides.get(name, DEFAULTS[name])
