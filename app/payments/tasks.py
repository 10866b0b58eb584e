"""
Celery tasks for the credit ledger.

This module provides periodic tasks for:
- Auditing that every balance equals the sum of its completed ledger rows

Usage:
    from payments.tasks import audit_ledger_balances

    audit_ledger_balances.delay()
"""

from __future__ import annotations

import logging

from celery import shared_task

from authentication.models import User
from payments.ledger.services import LedgerService

logger = logging.getLogger(__name__)


AUDIT_BATCH_SIZE = 500


@shared_task
def audit_ledger_balances() -> dict:
    """
    Periodic task comparing balances with the ledger.

    Mismatches are logged as InconsistencyWarning for out-of-band
    reconciliation. Balances are never corrected automatically.

    This task should be scheduled via celery-beat, e.g., nightly.

    Returns:
        Dict with checked and inconsistent counts
    """
    checked = 0
    inconsistent = 0

    for user in User.objects.only("pk").iterator(chunk_size=AUDIT_BATCH_SIZE):
        checked += 1
        warning = LedgerService.audit_account(user)
        if warning is None:
            continue

        inconsistent += 1
        logger.warning(
            str(warning),
            extra=warning.details,
        )

    logger.info(
        f"Ledger audit checked {checked} accounts, {inconsistent} inconsistent",
        extra={"checked": checked, "inconsistent": inconsistent},
    )
    return {"checked": checked, "inconsistent": inconsistent}
