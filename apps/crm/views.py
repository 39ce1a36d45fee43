"""
Views for customer lookup during checkout.

- Customer search by name or phone number
- Quick add of a new customer
"""

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import OrderValidationError
from apps.core.mixins import ShopScopedMixin

from .serializers import CustomerQuickAddSerializer, CustomerSerializer
from .services import CustomerDirectory


class CustomerListCreateView(ShopScopedMixin, APIView):
    """
    API endpoint for the customers of a shop.

    GET ?search=<term> lists matching customers.
    POST {"name", "phone_number", "gender"} adds a customer.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, shop_id):
        customers = CustomerDirectory(self.shop).search(request.query_params.get("search", ""))
        return Response(CustomerSerializer(customers, many=True).data)

    def post(self, request, shop_id):
        serializer = CustomerQuickAddSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            customer = CustomerDirectory(self.shop).quick_add(**serializer.validated_data)
        except OrderValidationError as e:
            return Response({"detail": e.message}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)
