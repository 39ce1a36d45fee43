"""
URL patterns for the reporting app.
"""

from django.urls import path

from . import views

app_name = "reporting"

urlpatterns = [
    path(
        "api/shops/<uuid:shop_id>/revenue/",
        views.RevenueSummaryView.as_view(),
        name="revenue_summary",
    ),
    path(
        "api/shops/<uuid:shop_id>/revenue/<str:date>/",
        views.RevenueRecordDetailView.as_view(),
        name="revenue_detail",
    ),
]
