"""
Pagination classes shared by list endpoints.

- StandardPagination: Page-number pagination for analyses and ledger rows

Query parameters:
    page: 1-based page number
    limit: Items per page (optional override)
"""

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Page-number pagination, newest first by the view's queryset ordering.

    Default: 20 items per page
    Maximum: 100 items per page
    """

    page_size = 20
    max_page_size = 100
    page_size_query_param = "limit"


class AnalysisPagination(StandardPagination):
    page_size = 10
