"""
Feed Stock API Views

Monthly stock buckets: upsert, list, detail, manual deduction and the
stock dashboard. Quantity changes go through FeedLedgerService.
"""

import logging
import math

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import (
    RecordDetailView,
    RecordListCreateView,
    missing_fields_response,
    missing_required_fields,
    validation_error_response,
)

from . import calculations
from .exceptions import FeedLedgerError
from .filters import FeedStockFilter
from .models import FeedStock, FeedUsage
from .serializers import (
    FeedStockSerializer,
    FeedStockUpdateSerializer,
    FeedStockUpsertSerializer,
    FeedUsageSerializer,
    StockDeductionSerializer,
)
from .services import FeedLedgerService

logger = logging.getLogger(__name__)


def ledger_error_response(exc):
    """Envelope for a FeedLedgerError with its own status code."""
    return Response({'success': False, 'message': exc.message}, status=exc.status_code)


def usage_stats(stock):
    """Month usage average, total and record count for a stock bucket."""
    if not stock.month:
        return {'average_daily_usage': 0.0, 'total_usage': 0.0, 'usage_count': 0}
    totals = FeedUsage.objects.month_totals(stock.feed_type, stock.month)
    return {
        'average_daily_usage': float(calculations.rolling_daily_average(totals['total'], totals['count'])),
        'total_usage': float(totals['total']),
        'usage_count': totals['count'],
    }


class FeedStockListCreateView(RecordListCreateView):
    """
    GET  /api/feed-stock - List stock buckets (Active unless ?status is given)
    POST /api/feed-stock - Create or overwrite the bucket for (feed_type, month)
    """

    serializer_class = FeedStockSerializer
    filterset_class = FeedStockFilter
    sort_fields = ('feed_type', 'month', 'current_quantity', 'expiry_date', 'created_at')
    default_sort = 'feed_type'
    default_sort_order = 'asc'
    required_fields = ('feed_type', 'month', 'year', 'baseline_quantity', 'supplier', 'expiry_date')

    def get_queryset(self):
        queryset = FeedStock.objects.filter(month__isnull=False)
        if 'status' not in self.request.query_params:
            queryset = queryset.active()
        return queryset

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)

        data = []
        for stock in page:
            item = FeedStockSerializer(stock).data
            item['usage_stats'] = usage_stats(stock)
            data.append(item)

        return self.get_paginated_response(data)

    def create(self, request, *args, **kwargs):
        missing = missing_required_fields(request.data, self.required_fields)
        if missing:
            return missing_fields_response(missing)

        serializer = FeedStockUpsertSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            stock, created = FeedLedgerService().upsert_stock(serializer.validated_data)
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                'success': True,
                'message': 'Feed stock created successfully' if created else 'Feed stock updated successfully',
                'data': FeedStockSerializer(stock).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class FeedStockDetailView(RecordDetailView):
    """
    GET    /api/feed-stock/<id> - Stock bucket with its month's usage history
    PUT    /api/feed-stock/<id> - Partial update
    DELETE /api/feed-stock/<id> - Delete the bucket
    """

    queryset = FeedStock.objects.filter(month__isnull=False)
    serializer_class = FeedStockSerializer
    not_found_message = 'Feed stock not found'
    update_message = 'Feed stock updated successfully'
    delete_message = 'Feed stock deleted successfully'

    def retrieve(self, request, *args, **kwargs):
        stock = self.get_object()
        usage_history = (
            FeedUsage.objects.filter(feed_type=stock.feed_type)
            .in_month(stock.month)
            .order_by('-date')
        )
        return Response({
            'success': True,
            'data': {
                'stock': FeedStockSerializer(stock).data,
                'usage_history': FeedUsageSerializer(usage_history, many=True).data,
            },
        })

    def update(self, request, *args, **kwargs):
        stock = self.get_object()
        serializer = FeedStockUpdateSerializer(stock, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            stock = FeedLedgerService().update_stock(stock.pk, serializer.validated_data)
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        return Response({
            'success': True,
            'message': self.update_message,
            'data': FeedStockSerializer(stock).data,
        })


class FeedStockDeductView(APIView):
    """
    POST /api/feed-stock/<id>/deduct - Manually remove feed from a bucket

    Body: {quantity_used, reason}
    """

    def post(self, request, pk):
        serializer = StockDeductionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {
                    'success': False,
                    'message': 'Quantity used must be a positive number',
                    'errors': serializer.errors,
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            stock = FeedLedgerService().deduct_stock(
                pk,
                serializer.validated_data['quantity_used'],
                serializer.validated_data.get('reason', ''),
            )
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        return Response({
            'success': True,
            'message': 'Stock deducted successfully',
            'data': FeedStockSerializer(stock).data,
        })


class FeedStockDashboardView(APIView):
    """
    GET /api/feed-stock/dashboard - Current month stock dashboard

    Covers Active buckets of the current month plus six months of trends.
    """

    TREND_MONTHS = 6
    TOP_CONSUMERS = 5

    def _alert_item(self, stock, today):
        return {
            'id': str(stock.id),
            'feed_type': stock.feed_type,
            'current_quantity': float(stock.current_quantity),
            'minimum_threshold': float(stock.minimum_threshold),
            'unit': stock.unit,
            'expiry_date': stock.expiry_date.isoformat(),
            'days_until_expiry': calculations.days_until(stock.expiry_date, today),
        }

    def _monthly_trends(self, today):
        months = calculations.recent_months(today, self.TREND_MONTHS)

        stock_rows = {
            row['month']: row
            for row in FeedStock.objects.filter(month__in=months)
            .values('month')
            .annotate(
                baseline_quantity=Sum('baseline_quantity'),
                remaining_quantity=Sum('current_quantity'),
            )
        }

        year, month_number = (int(part) for part in months[0].split('-'))
        usage_rows = {
            row['period'].strftime('%Y-%m'): row['total_usage']
            for row in FeedUsage.objects.filter(date__gte=today.replace(year=year, month=month_number, day=1))
            .annotate(period=TruncMonth('date'))
            .values('period')
            .annotate(total_usage=Sum('quantity_used'))
        }

        trends = []
        for month in months:
            stock_row = stock_rows.get(month, {})
            trends.append({
                'month': month,
                'baseline_quantity': float(stock_row.get('baseline_quantity') or 0),
                'remaining_quantity': float(stock_row.get('remaining_quantity') or 0),
                'total_usage': float(usage_rows.get(month) or 0),
            })
        return trends

    def get(self, request):
        today = timezone.localdate()
        month = calculations.month_key(today)

        stocks = list(FeedStock.objects.active().filter(month=month).order_by('feed_type'))

        low_stock = [stock for stock in stocks if stock.is_low_stock]
        critical = [stock for stock in stocks if stock.is_critical]
        expiring = [
            stock for stock in stocks
            if calculations.days_until(stock.expiry_date, today) <= 30
        ]

        total_stock = sum((stock.current_quantity for stock in stocks), calculations.ZERO)
        total_value = sum((stock.total_cost for stock in stocks), calculations.ZERO)
        total_daily_consumption = sum(
            (stock.average_daily_consumption for stock in stocks), calculations.ZERO
        )
        overall_days_remaining = (
            math.floor(total_stock / total_daily_consumption)
            if total_daily_consumption > 0 else None
        )

        stock_with_usage = []
        for stock in stocks:
            item = FeedStockSerializer(stock).data
            item['usage_stats'] = usage_stats(stock)
            stock_with_usage.append(item)

        top_consumers = [
            {'feed_type': row['feed_type'], 'total_usage': float(row['total_usage'])}
            for row in FeedUsage.objects.in_month(month)
            .values('feed_type')
            .annotate(total_usage=Sum('quantity_used'))
            .order_by('-total_usage')[:self.TOP_CONSUMERS]
        ]

        inventory_by_type = [
            {
                'feed_type': row['feed_type'],
                'total_quantity': float(row['total_quantity']),
                'total_value': float(row['total_value']),
                'low_stock_count': row['low_stock_count'],
            }
            for row in FeedStock.objects.active().filter(month=month)
            .values('feed_type')
            .annotate(
                total_quantity=Coalesce(Sum('current_quantity'), calculations.ZERO),
                total_value=Coalesce(Sum('total_cost'), calculations.ZERO),
                low_stock_count=Count('id', filter=Q(is_low_stock=True)),
            )
            .order_by('feed_type')
        ]

        return Response({
            'success': True,
            'data': {
                'month': month,
                'summary': {
                    'total_stock': float(total_stock),
                    'total_value': float(total_value),
                    'low_stock_items': len(low_stock),
                    'critical_items': len(critical),
                    'expiring_items': len(expiring),
                    'total_daily_consumption': float(total_daily_consumption),
                    'overall_days_remaining': overall_days_remaining,
                    'active_stock_types': len(stocks),
                },
                'stock_with_usage': stock_with_usage,
                'top_consumers': top_consumers,
                'inventory_by_type': inventory_by_type,
                'monthly_trends': self._monthly_trends(today),
                'alerts': {
                    'low_stock': [self._alert_item(stock, today) for stock in low_stock],
                    'critical': [self._alert_item(stock, today) for stock in critical],
                    'expiring': [self._alert_item(stock, today) for stock in expiring],
                },
            },
        })
