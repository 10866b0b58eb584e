"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/        - Registration (POST)
    /api/v1/auth/login/           - JWT login (POST)
    /api/v1/auth/refresh/         - JWT refresh (POST)
    /api/v1/auth/profile/         - Current account (GET/PATCH)
    /api/v1/auth/complete-setup/  - Finish setup of a provisioned account (POST)
    /api/v1/auth/deactivate/      - Soft deactivation (POST)

The account pages (settings, dashboard) live in user_urls.py and are
mounted at /api/v1/users/.
"""

from django.urls import path

from authentication.views import (
    CompleteSetupView,
    DeactivateAccountView,
    LoginView,
    ProfileView,
    RefreshView,
    RegisterView,
)

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshView.as_view(), name="token-refresh"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("complete-setup/", CompleteSetupView.as_view(), name="complete-setup"),
    path("deactivate/", DeactivateAccountView.as_view(), name="deactivate"),
]
