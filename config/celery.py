"""
Celery configuration for the jewellery POS back end.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("jewellery_pos")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Reprice the whole catalog nightly at 2 AM
    "recalculate-all-product-prices": {
        "task": "apps.pricing.tasks.recalculate_all_product_prices",
        "schedule": crontab(hour=2, minute=0),
        "options": {"queue": "pricing", "priority": 8},
    },
}

# Task routing configuration
app.conf.task_routes = {
    "apps.pricing.tasks.*": {"queue": "pricing", "priority": 8},
}
