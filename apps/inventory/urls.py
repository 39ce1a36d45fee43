"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path(
        "api/shops/<uuid:shop_id>/ingredients/",
        views.IngredientListView.as_view(),
        name="ingredient_list",
    ),
]
