"""
Analysis app - personality analyses paid for with credits.

Submitting an analysis reserves its credits through the ledger; the
external pipeline later reports the outcome and a failed analysis is
refunded exactly once.
"""
