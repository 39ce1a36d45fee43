"""
Views for revenue reporting.

- Daily revenue record of a shop
- Revenue summary over a date range, compared with the preceding period
"""

from datetime import datetime, timedelta

from django.http import Http404

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import ShopScopedMixin

from .models import RevenueRecord
from .serializers import RevenuePeriodSerializer, RevenueRecordSerializer
from .services import records_between, revenue_growth, summarize


class RevenueRecordDetailView(ShopScopedMixin, generics.RetrieveAPIView):
    """
    API endpoint returning a shop's revenue record for one day.

    The date is given as YYYY-MM-DD in the shop's time zone.
    """

    serializer_class = RevenueRecordSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        try:
            day = datetime.strptime(self.kwargs["date"], "%Y-%m-%d").date()
        except ValueError:
            raise Http404("Invalid date.")

        try:
            return RevenueRecord.objects.get(shop=self.shop, date=day)
        except RevenueRecord.DoesNotExist:
            raise Http404("No revenue recorded for this day.")


class RevenueSummaryView(ShopScopedMixin, APIView):
    """
    API endpoint summarizing a shop's revenue between two dates.

    Query parameters:
        start: First day (YYYY-MM-DD)
        end: Last day (YYYY-MM-DD)

    The response includes the growth of revenue and order count compared
    with the period of the same length right before `start`.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, shop_id):
        serializer = RevenuePeriodSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        start = serializer.validated_data["start"]
        end = serializer.validated_data["end"]
        length = end - start + timedelta(days=1)

        current = summarize(records_between(self.shop, start, end))
        previous = summarize(records_between(self.shop, start - length, start - timedelta(days=1)))

        data = current.to_dict()
        data["start"] = start.isoformat()
        data["end"] = end.isoformat()
        data["revenue_growth"] = str(revenue_growth(current.total_revenue, previous.total_revenue))
        data["orders_growth"] = str(revenue_growth(current.total_orders, previous.total_orders))
        return Response(data)
