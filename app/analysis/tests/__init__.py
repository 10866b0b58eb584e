"""
Tests for analysis app.

Usage:
    pytest analysis/tests/
    pytest -m e2e
"""
