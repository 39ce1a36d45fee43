"""
URL configuration for CRM app.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    path(
        "api/shops/<uuid:shop_id>/customers/",
        views.CustomerListCreateView.as_view(),
        name="customer_list",
    ),
]
