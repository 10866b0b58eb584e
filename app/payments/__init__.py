"""
Payments app for credit purchases.

This app handles:
- The credit ledger (payments.ledger)
- Credit plans and checkout
- Payment processor notifications (webhooks)
- Periodic audit of balances against the ledger

Related apps:
    - authentication: Accounts provisioned for unknown payers
    - analysis: Credit reservations and refunds

Usage:
    from payments.services import PaymentReconciler

    result = PaymentReconciler.apply_payment(notification)
"""
