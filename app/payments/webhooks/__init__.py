"""
Payment processor webhook endpoint.
"""
