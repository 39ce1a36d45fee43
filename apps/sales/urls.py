"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path(
        "api/shops/<uuid:shop_id>/orders/",
        views.OrderSubmitView.as_view(),
        name="order_submit",
    ),
    path(
        "api/shops/<uuid:shop_id>/orders/<uuid:id>/",
        views.OrderDetailView.as_view(),
        name="order_detail",
    ),
]
