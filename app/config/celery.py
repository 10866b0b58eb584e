"""
Celery configuration for the Django application.

Celery runs the periodic ledger audit (payments.tasks.audit_ledger_balances)
outside the request cycle. Redis is the broker and result backend; tasks are
auto-discovered from every installed app's tasks.py.

Usage:
    # Run a worker and the beat scheduler:
    celery -A config worker -l info
    celery -A config beat -l info

    # Trigger the audit by hand:
    from payments.tasks import audit_ledger_balances
    audit_ledger_balances.delay()

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
