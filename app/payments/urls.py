"""
URL configuration for the credits endpoints.

Routes:
    - GET  /            - Balance and ledger rows
    - GET  /plans/      - Plan catalogue
    - POST /purchase/   - Start a checkout
    - GET  /history/    - Filtered history with totals

All routes are prefixed with /api/v1/credits/ when included in the main URLconf.
"""

from django.urls import path

from payments import views

app_name = "payments"

urlpatterns = [
    path("", views.CreditBalanceView.as_view(), name="balance"),
    path("plans/", views.PlanListView.as_view(), name="plans"),
    path("purchase/", views.CheckoutView.as_view(), name="purchase"),
    path("history/", views.CreditHistoryView.as_view(), name="history"),
]
