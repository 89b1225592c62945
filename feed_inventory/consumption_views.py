"""
Feed Usage API Views

Daily feed usage: recording (with stock deduction), edits and deletes
(with stock reconciliation), verification and consumption analytics.
"""

from datetime import timedelta

from django.db.models import Avg, Case, Count, F, IntegerField, Sum, Value, When
from django.db.models.functions import TruncMonth, TruncWeek
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import (
    DateRangeMixin,
    RecordDetailView,
    RecordListCreateView,
    missing_fields_response,
    missing_required_fields,
    validation_error_response,
)

from .exceptions import FeedLedgerError
from .filters import FeedUsageFilter
from .models import FeedKind, FeedUsage
from .serializers import FeedUsageSerializer, FeedUsageUpdateSerializer
from .services import FeedLedgerService
from .views import ledger_error_response


class FeedUsageListCreateView(RecordListCreateView):
    """
    GET  /api/feed-usage - List usage records, newest first
    POST /api/feed-usage - Record usage and deduct it from the month's Active stock
    """

    queryset = FeedUsage.objects.all()
    serializer_class = FeedUsageSerializer
    filterset_class = FeedUsageFilter
    sort_fields = ('date', 'feed_type', 'quantity_used', 'created_at')
    default_sort = 'date'
    required_fields = ('feed_type', 'date', 'quantity_used', 'recorded_by')

    def create(self, request, *args, **kwargs):
        missing = missing_required_fields(request.data, self.required_fields)
        if missing:
            return missing_fields_response(missing)

        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            usage, stock = FeedLedgerService().record_usage(serializer.validated_data)
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            {
                'success': True,
                'message': 'Feed usage recorded successfully',
                'data': {
                    'usage': FeedUsageSerializer(usage).data,
                    'remaining_stock': float(stock.current_quantity),
                    'stock_status': stock.status,
                    'is_low_stock': stock.is_low_stock,
                },
            },
            status=status.HTTP_201_CREATED
        )


class FeedUsageDetailView(RecordDetailView):
    """
    GET    /api/feed-usage/<id> - Usage record
    PUT    /api/feed-usage/<id> - Partial update, reconciling quantity changes with stock
    DELETE /api/feed-usage/<id> - Delete and return the quantity to stock
    """

    queryset = FeedUsage.objects.all()
    serializer_class = FeedUsageSerializer
    not_found_message = 'Feed usage record not found'
    update_message = 'Feed usage record updated successfully'
    delete_message = 'Feed usage record deleted successfully'

    def update(self, request, *args, **kwargs):
        usage = self.get_object()
        serializer = FeedUsageUpdateSerializer(usage, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            usage, stock = FeedLedgerService().update_usage(usage.pk, serializer.validated_data)
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        data = {'usage': FeedUsageSerializer(usage).data}
        if stock is not None:
            data['remaining_stock'] = float(stock.current_quantity)

        return Response({
            'success': True,
            'message': self.update_message,
            'data': data,
        })

    def destroy(self, request, *args, **kwargs):
        usage = self.get_object()

        try:
            stock = FeedLedgerService().delete_usage(usage.pk)
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        response = {'success': True, 'message': self.delete_message}
        if stock is not None:
            response['data'] = {'remaining_stock': float(stock.current_quantity)}
        return Response(response)


class FeedUsageVerifyView(APIView):
    """
    PUT /api/feed-usage/<id>/verify - Mark a usage record as verified

    Body: {verifier_name}
    """

    def put(self, request, pk):
        verifier_name = request.data.get('verifier_name')
        if not verifier_name or not str(verifier_name).strip():
            return Response(
                {'success': False, 'message': 'Verifier name is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            usage = FeedLedgerService().verify_usage(pk, str(verifier_name).strip())
        except FeedLedgerError as exc:
            return ledger_error_response(exc)

        return Response({
            'success': True,
            'message': 'Feed usage record verified successfully',
            'data': FeedUsageSerializer(usage).data,
        })


class FeedUsageAnalyticsView(DateRangeMixin, APIView):
    """
    GET /api/feed-usage/analytics - Consumption analytics

    Query params:
    - start_date / end_date: YYYY-MM-DD (default: last 30 days)
    - period: daily | weekly | monthly (default: daily)
    - feed_type: limit to one feed type
    """

    PERIODS = {
        'daily': F('date'),
        'weekly': TruncWeek('date'),
        'monthly': TruncMonth('date'),
    }

    # Ratings averaged as 4 (Excellent) down to 1 (Poor)
    RATING_SCORE = {'Excellent': 4, 'Good': 3, 'Fair': 2, 'Poor': 1}

    def _rating_score(self, field):
        return Case(
            *[When(**{field: rating}, then=Value(score)) for rating, score in self.RATING_SCORE.items()],
            default=Value(3),
            output_field=IntegerField(),
        )

    def _as_float(self, value, digits=2):
        return round(float(value), digits) if value is not None else 0.0

    def get(self, request):
        start_date, end_date = self.get_date_range(request)
        end_date = end_date or timezone.localdate()
        start_date = start_date or end_date - timedelta(days=30)

        period = request.query_params.get('period', 'daily')
        if period not in self.PERIODS:
            period = 'daily'

        queryset = FeedUsage.objects.filter(date__gte=start_date, date__lte=end_date)
        feed_type = request.query_params.get('feed_type')
        if feed_type:
            if feed_type not in FeedKind.values:
                return validation_error_response({'feed_type': [f'"{feed_type}" is not a valid choice.']})
            queryset = queryset.filter(feed_type=feed_type)

        consumption_trends = [
            {
                'period': row['period'].isoformat(),
                'feed_type': row['feed_type'],
                'total_usage': self._as_float(row['total_usage']),
                'average_feed_per_bird': self._as_float(row['average_feed_per_bird'], 3),
                'total_cost': self._as_float(row['total_cost']),
                'record_count': row['record_count'],
            }
            for row in queryset.annotate(period=self.PERIODS[period])
            .values('period', 'feed_type')
            .annotate(
                total_usage=Sum('quantity_used'),
                average_feed_per_bird=Avg('feed_per_bird'),
                total_cost=Sum('daily_cost'),
                record_count=Count('id'),
            )
            .order_by('period', 'feed_type')
        ]

        efficiency_metrics = [
            {
                'feed_type': row['feed_type'],
                'total_usage': self._as_float(row['total_usage']),
                'average_feed_per_bird': self._as_float(row['average_feed_per_bird'], 3),
                'average_waste_percentage': self._as_float(row['average_waste']),
                'average_feed_efficiency': self._as_float(row['average_efficiency']),
                'average_birds': self._as_float(row['average_birds']),
            }
            for row in queryset.values('feed_type')
            .annotate(
                total_usage=Sum('quantity_used'),
                average_feed_per_bird=Avg('feed_per_bird'),
                average_waste=Avg('waste_percentage'),
                average_efficiency=Avg('feed_efficiency'),
                average_birds=Avg('total_birds'),
            )
            .order_by('feed_type')
        ]

        weather_impact = [
            {
                'weather': row['weather'],
                'average_usage': self._as_float(row['average_usage']),
                'average_feed_per_bird': self._as_float(row['average_feed_per_bird'], 3),
                'record_count': row['record_count'],
            }
            for row in queryset.exclude(weather='')
            .values('weather')
            .annotate(
                average_usage=Avg('quantity_used'),
                average_feed_per_bird=Avg('feed_per_bird'),
                record_count=Count('id'),
            )
            .order_by('weather')
        ]

        quality = queryset.aggregate(
            bird_appearance_score=Avg(self._rating_score('bird_appearance')),
            feed_acceptance_score=Avg(self._rating_score('feed_acceptance')),
            total_mortality=Sum('mortality'),
            total_eggs=Sum('egg_production'),
            average_weight=Avg('average_weight'),
        )
        quality_summary = {
            'bird_appearance_score': self._as_float(quality['bird_appearance_score']),
            'feed_acceptance_score': self._as_float(quality['feed_acceptance_score']),
            'total_mortality': quality['total_mortality'] or 0,
            'total_eggs': quality['total_eggs'] or 0,
            'average_weight': self._as_float(quality['average_weight']),
        }

        cost_analysis = [
            {
                'feed_type': row['feed_type'],
                'total_cost': self._as_float(row['total_cost']),
                'total_usage': self._as_float(row['total_usage']),
                'average_cost_per_kg': self._as_float(row['average_cost_per_kg']),
                'average_cost_per_bird': self._as_float(row['average_cost_per_bird']),
            }
            for row in queryset.values('feed_type')
            .annotate(
                total_cost=Sum('daily_cost'),
                total_usage=Sum('quantity_used'),
                average_cost_per_kg=Avg('cost_per_kg'),
                average_cost_per_bird=Avg('cost_per_bird'),
            )
            .order_by('-total_cost')
        ]

        totals = queryset.aggregate(
            total_records=Count('id'),
            total_usage=Sum('quantity_used'),
            total_cost=Sum('daily_cost'),
        )
        days = (end_date - start_date).days + 1
        total_usage = float(totals['total_usage'] or 0)

        return Response({
            'success': True,
            'data': {
                'consumption_trends': consumption_trends,
                'efficiency_metrics': efficiency_metrics,
                'weather_impact': weather_impact,
                'quality_summary': quality_summary,
                'cost_analysis': cost_analysis,
                'summary': {
                    'total_records': totals['total_records'],
                    'total_usage': total_usage,
                    'total_cost': self._as_float(totals['total_cost']),
                    'average_daily_usage': round(total_usage / days, 2) if days > 0 else 0.0,
                    'period': {
                        'start_date': start_date.isoformat(),
                        'end_date': end_date.isoformat(),
                        'type': period,
                    },
                },
            },
        })
