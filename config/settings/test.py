"""
Settings for the test suite.

SQLite in memory, eager Celery tasks and no retry backoff.
"""

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Run tasks inline so print jobs finish before submit() returns
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

POS_FULFILLMENT = {
    **POS_FULFILLMENT,  # noqa: F405
    "TRANSACTION_BACKOFF": 0,
    "TRANSACTION_MAX_BACKOFF": 0,
    "RECEIPT_PRINTER_BACKEND": None,
}

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["apps"]["level"] = "WARNING"  # noqa: F405
