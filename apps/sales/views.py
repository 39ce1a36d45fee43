"""
Views for POS order submission.
"""

import logging

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.context import ShopContext
from apps.core.exceptions import InsufficientStock, TransientConflict
from apps.core.mixins import ShopScopedMixin

from .models import Order
from .orchestrator import OrderOrchestrator, SubmissionState
from .serializers import OrderDetailSerializer, OrderSubmitSerializer

logger = logging.getLogger(__name__)


def submission_status(result) -> int:
    """HTTP status code for a submission result."""
    if result.state == SubmissionState.CLEARED:
        return status.HTTP_201_CREATED
    if isinstance(result.error, (InsufficientStock, TransientConflict)):
        return status.HTTP_409_CONFLICT
    if result.state in (SubmissionState.BUILDING, SubmissionState.ABORTED):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class OrderSubmitView(ShopScopedMixin, APIView):
    """
    API endpoint submitting an order from a POS terminal.

    Request body:
    {
        "terminal_id": "counter-1" (optional),
        "items": [
            {
                "menu_item_id": "uuid",
                "quantity": 1,
                "temperature": "hot|cold",
                "consumption": "stay|take_away",
                "note": "" (optional)
            }
        ],
        "payment_method": "cash|card|bank_transfer",
        "discount_percent": "10.00" (optional),
        "customer_id": "uuid" (optional)
    }

    Responses:
    - 201: order created; body has the order, low-stock alerts and notices
    - 400: invalid payload or order
    - 409: insufficient stock or the shop was too busy to reserve it
    - 500: the order was reserved but a later step failed
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, shop_id):
        serializer = OrderSubmitSerializer(data=request.data, context={"shop": self.shop})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        cart = serializer.build_cart()
        context = ShopContext.for_shop(
            self.shop, terminal_id=serializer.validated_data.get("terminal_id", "")
        )
        result = OrderOrchestrator(context).submit(cart)

        data = result.to_dict()
        if result.order is not None:
            data["order"] = OrderDetailSerializer(result.order).data
        if result.error is not None:
            data["detail"] = data["error"] or "Order could not be created."

        return Response(data, status=submission_status(result))


class OrderDetailView(ShopScopedMixin, generics.RetrieveAPIView):
    """API endpoint returning one order of a shop."""

    serializer_class = OrderDetailSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_field = "id"

    def get_queryset(self):
        return (
            Order.objects.filter(shop=self.shop)
            .select_related("customer")
            .prefetch_related("items")
        )
