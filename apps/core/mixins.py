"""
Mixins for API views scoped to a shop.
"""

from django.shortcuts import get_object_or_404

from .models import Shop


class ShopScopedMixin:
    """
    Resolve the shop named by the `shop_id` URL kwarg.

    Usage:
        class IngredientListView(ShopScopedMixin, generics.ListAPIView):
            def get_queryset(self):
                return Ingredient.objects.filter(shop=self.shop)
    """

    shop_url_kwarg = "shop_id"

    def initial(self, request, *args, **kwargs):
        """Load the shop after authentication."""
        super().initial(request, *args, **kwargs)
        self.shop = get_object_or_404(Shop, pk=kwargs[self.shop_url_kwarg], is_active=True)
