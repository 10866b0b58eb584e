"""
URL configuration for analysis endpoints.

Mounted at /api/v1/analyses/.
"""

from django.urls import path

from analysis import views

app_name = "analysis"

urlpatterns = [
    path("", views.AnalysisListCreateView.as_view(), name="list"),
    path("share/<str:token>/", views.SharedAnalysisView.as_view(), name="shared"),
    path("<uuid:analysis_id>/", views.AnalysisDetailView.as_view(), name="detail"),
    path(
        "<uuid:analysis_id>/status/",
        views.AnalysisStatusView.as_view(),
        name="status",
    ),
    path(
        "<uuid:analysis_id>/public/",
        views.AnalysisVisibilityView.as_view(),
        name="visibility",
    ),
]
