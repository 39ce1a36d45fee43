"""
Celery configuration for the POS fulfillment service.
"""

import os

from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("pos_fulfillment")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Finish orders stuck between revenue and loyalty every minute
    "resume-pending-orders": {
        "task": "apps.sales.tasks.resume_pending_orders",
        "schedule": 60.0,
        "options": {"queue": "orders", "priority": 8},
    },
}

app.conf.task_routes = {
    "apps.sales.tasks.print_receipt_task": {"queue": "printing", "priority": 5},
    "apps.sales.tasks.resume_pending_orders": {"queue": "orders", "priority": 8},
}


@app.task(bind=True, ignore_result=True)
def debug_task(self):
    """Debug task for testing Celery setup."""
    print(f"Request: {self.request!r}")
