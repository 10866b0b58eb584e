"""
URL configuration for the Django application.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Create an account (JWT pair returned)
        login/                     - Email/password login (JWT pair)
        refresh/                   - Refresh an access token
        profile/                   - Current account (GET/PATCH)
        complete-setup/            - Finish setup of a payment-provisioned account
        deactivate/                - Soft-delete the account
    /api/v1/users/                 - Current account pages
        settings/                  - Name, phone, preferences (GET/PUT/PATCH)
        dashboard/                 - Balance, analysis stats, recent analyses
    /api/v1/credits/               - Credits
        (root)                     - Balance and ledger rows
        plans/                     - Plan catalogue
        purchase/                  - Start a checkout
        history/                   - Filtered history with totals
    /api/v1/analyses/              - Analyses
        (root)                     - List (GET) / submit (POST)
        {id}/                      - Detail (owner) or teaser (public)
        {id}/status/               - Status
        {id}/public/               - Share / unshare
        share/{token}/             - Shared analysis
    /api/v1/webhooks/              - Inbound webhooks (POST, CSRF exempt)
        payments/                  - Payment processor notifications
        analysis/                  - Analysis pipeline status reports

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from analysis.webhooks import analysis_webhook
from core.views import health_check
from payments.webhooks.views import payment_webhook

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
webhook_patterns = [
    path("payments/", payment_webhook, name="payment_webhook"),
    path("analysis/", analysis_webhook, name="analysis_webhook"),
]

api_v1_patterns = [
    # Authentication
    path("auth/", include("authentication.urls")),
    path("users/", include("authentication.user_urls")),
    # Credits
    path("credits/", include("payments.urls")),
    # Analyses
    path("analyses/", include("analysis.urls")),
    # Webhooks
    path("webhooks/", include(webhook_patterns)),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Personality Analysis Admin"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Accounts, credits and analyses"
