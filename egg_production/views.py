"""
Egg Production API Views
"""

from django.db.models import Avg, Count, Sum
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import DateRangeMixin, RecordDetailView, RecordListCreateView

from .filters import EggProductionFilter
from .models import EggProduction
from .serializers import EggProductionSerializer


class EggProductionListCreateView(RecordListCreateView):
    """
    GET  /api/egg-production - List production records (newest first)
    POST /api/egg-production - Record a day's collection for a batch
    """

    queryset = EggProduction.objects.all()
    serializer_class = EggProductionSerializer
    filterset_class = EggProductionFilter
    sort_fields = ('date', 'batch_number', 'eggs_collected', 'egg_production_rate', 'created_at')
    default_sort = 'date'
    required_fields = ('date', 'batch_number', 'birds', 'eggs_collected')
    create_message = 'Egg production record created successfully'
    duplicate_message = 'A record for this batch already exists on this date'


class EggProductionDetailView(RecordDetailView):
    """
    GET    /api/egg-production/<id>
    PUT    /api/egg-production/<id>
    DELETE /api/egg-production/<id>
    """

    queryset = EggProduction.objects.all()
    serializer_class = EggProductionSerializer
    not_found_message = 'Egg production record not found'
    update_message = 'Egg production record updated successfully'
    delete_message = 'Egg production record deleted successfully'
    duplicate_message = 'A record for this batch already exists on this date'


class EggProductionSummaryView(DateRangeMixin, APIView):
    """
    GET /api/egg-production/summary - Production totals

    Query params: start_date, end_date (YYYY-MM-DD)
    """

    def get(self, request):
        records = self.filter_date_range(EggProduction.objects.all(), request)

        totals = records.aggregate(
            total_records=Count('id'),
            total_eggs=Sum('eggs_collected'),
            total_damaged_eggs=Sum('damaged_eggs'),
            average_production_rate=Avg('egg_production_rate'),
        )
        total_eggs = totals['total_eggs'] or 0
        total_damaged_eggs = totals['total_damaged_eggs'] or 0
        average_rate = totals['average_production_rate']

        return Response({
            'success': True,
            'data': {
                'total_records': totals['total_records'],
                'total_eggs': total_eggs,
                'total_damaged_eggs': total_damaged_eggs,
                'average_production_rate': round(float(average_rate), 2) if average_rate is not None else 0.0,
                'effective_eggs': total_eggs - total_damaged_eggs,
            },
        })
