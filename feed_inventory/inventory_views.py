"""
Legacy Feed Inventory API Views

Plain inventory items without a month bucket. They share storage with
the monthly stock buckets but never take part in usage deduction.
"""

import math

from django.conf import settings
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import RecordDetailView, RecordListCreateView

from . import calculations
from .filters import FeedInventoryFilter
from .models import FeedInventory
from .serializers import FeedInventorySerializer


class FeedInventoryListCreateView(RecordListCreateView):
    """
    GET  /api/feed-inventory - List inventory items
    POST /api/feed-inventory - Add an inventory item
    """

    queryset = FeedInventory.objects.all()
    serializer_class = FeedInventorySerializer
    filterset_class = FeedInventoryFilter
    sort_fields = ('feed_type', 'current_quantity', 'expiry_date', 'last_restocked', 'created_at')
    default_sort = 'created_at'
    required_fields = ('feed_type', 'current_quantity', 'supplier', 'last_restocked', 'expiry_date')
    create_message = 'Feed inventory item created successfully'

    def perform_create(self, serializer):
        serializer.save(baseline_quantity=serializer.validated_data['current_quantity'])


class FeedInventoryDetailView(RecordDetailView):
    """
    GET    /api/feed-inventory/<id>
    PUT    /api/feed-inventory/<id>
    DELETE /api/feed-inventory/<id>
    """

    queryset = FeedInventory.objects.all()
    serializer_class = FeedInventorySerializer
    not_found_message = 'Feed inventory item not found'
    update_message = 'Feed inventory item updated successfully'
    delete_message = 'Feed inventory item deleted successfully'


class FeedInventorySummaryView(APIView):
    """
    GET /api/feed-inventory/summary - Totals, low stock and days of feed left

    Days left assume FEED_INVENTORY_DAILY_CONSUMPTION per day.
    """

    def get(self, request):
        items = FeedInventory.objects.all()

        totals = items.aggregate(
            total_items=Count('id'),
            total_quantity=Coalesce(Sum('current_quantity'), calculations.ZERO),
            total_value=Coalesce(Sum('total_cost'), calculations.ZERO),
            low_stock_items=Count('id', filter=Q(is_low_stock=True)),
        )

        daily_consumption = settings.FEED_INVENTORY_DAILY_CONSUMPTION
        days_will_last = (
            math.floor(totals['total_quantity'] / daily_consumption)
            if daily_consumption > 0 else None
        )

        inventory_by_type = [
            {
                'feed_type': row['feed_type'],
                'total_quantity': float(row['total_quantity']),
                'total_value': float(row['total_value']),
                'item_count': row['item_count'],
            }
            for row in items.values('feed_type')
            .annotate(
                total_quantity=Sum('current_quantity'),
                total_value=Sum('total_cost'),
                item_count=Count('id'),
            )
            .order_by('feed_type')
        ]

        low_stock = items.filter(is_low_stock=True).order_by('current_quantity')

        return Response({
            'success': True,
            'data': {
                'total_items': totals['total_items'],
                'total_quantity': float(totals['total_quantity']),
                'total_value': float(totals['total_value']),
                'low_stock_items': totals['low_stock_items'],
                'days_will_last': days_will_last,
                'inventory_by_type': inventory_by_type,
                'low_stock_items_list': FeedInventorySerializer(low_stock, many=True).data,
            },
        })
