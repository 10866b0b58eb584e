"""
Account page routes, mounted at /api/v1/users/.

    settings/   - Name, phone and preferences (GET/PUT/PATCH)
    dashboard/  - Balance and analysis statistics (GET)
"""

from django.urls import path

from authentication.views import DashboardView, SettingsView

app_name = "users"

urlpatterns = [
    path("settings/", SettingsView.as_view(), name="settings"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
]
