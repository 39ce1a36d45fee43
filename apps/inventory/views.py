"""
Views for ingredient stock.
"""

from rest_framework import filters, generics, permissions

from apps.core.mixins import ShopScopedMixin

from .models import Ingredient
from .serializers import IngredientSerializer


class IngredientListView(ShopScopedMixin, generics.ListAPIView):
    """
    API endpoint listing a shop's ingredient ledger.

    Supports:
    - Search by name (`search`)
    - Filter by stock status (`status=in_stock|low_stock|out_of_stock`)
    """

    serializer_class = IngredientSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["name", "quantity", "used", "updated_at"]
    ordering = ["name"]
    pagination_class = None

    def get_queryset(self):
        queryset = Ingredient.objects.filter(shop=self.shop)

        search = self.request.query_params.get("search", None)
        if search:
            queryset = queryset.filter(name__icontains=search)

        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)

        # Stock status is derived, so it is filtered in Python
        status = self.request.query_params.get("status", None)
        if status:
            queryset = [ingredient for ingredient in queryset if ingredient.stock_status == status]

        return queryset
