"""
Financial Record API Views
"""

from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce, TruncMonth
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import DateRangeMixin, RecordDetailView, RecordListCreateView

from .filters import FinancialRecordFilter
from .models import FinancialRecord
from .serializers import FinancialRecordSerializer


class FinancialRecordListCreateView(RecordListCreateView):
    """
    GET  /api/financial-records - List income and expense records (newest first)
    POST /api/financial-records - Add a record
    """

    queryset = FinancialRecord.objects.all()
    serializer_class = FinancialRecordSerializer
    filterset_class = FinancialRecordFilter
    sort_fields = ('date', 'amount', 'category', 'subcategory', 'payment_method', 'created_at')
    default_sort = 'date'
    required_fields = ('date', 'description', 'category', 'amount', 'payment_method', 'reference')
    create_message = 'Financial record created successfully'
    duplicate_message = 'Reference number already exists'


class FinancialRecordDetailView(RecordDetailView):
    """
    GET    /api/financial-records/<id>
    PUT    /api/financial-records/<id>
    DELETE /api/financial-records/<id>
    """

    queryset = FinancialRecord.objects.all()
    serializer_class = FinancialRecordSerializer
    not_found_message = 'Financial record not found'
    update_message = 'Financial record updated successfully'
    delete_message = 'Financial record deleted successfully'
    duplicate_message = 'Reference number already exists'


class FinancialSummaryView(DateRangeMixin, APIView):
    """
    GET /api/financial-records/summary - Income, expenses and profit

    Query params: start_date, end_date (YYYY-MM-DD). The this_month block
    and monthly trends ignore the range.
    """

    TREND_MONTHS = 6

    def _income_expense(self, records):
        totals = records.aggregate(
            income=Coalesce(Sum('amount', filter=Q(category='Income')), Decimal('0')),
            expenses=Coalesce(Sum('amount', filter=Q(category='Expense')), Decimal('0')),
        )
        return {
            'income': float(totals['income']),
            'expenses': float(totals['expenses']),
            'profit': float(totals['income'] - totals['expenses']),
        }

    def _by_subcategory(self, records, category):
        return [
            {'subcategory': row['subcategory'] or 'Uncategorized', 'total': float(row['total'])}
            for row in records.filter(category=category)
            .values('subcategory')
            .annotate(total=Sum('amount'))
            .order_by('-total')
        ]

    def _monthly_trends(self, today):
        first_month = today.replace(day=1)
        for _ in range(self.TREND_MONTHS - 1):
            first_month = (first_month - timedelta(days=1)).replace(day=1)

        rows = (
            FinancialRecord.objects.filter(date__gte=first_month)
            .annotate(month=TruncMonth('date'))
            .values('month')
            .annotate(
                income=Coalesce(Sum('amount', filter=Q(category='Income')), Decimal('0')),
                expenses=Coalesce(Sum('amount', filter=Q(category='Expense')), Decimal('0')),
            )
            .order_by('month')
        )
        return [
            {
                'month': row['month'].strftime('%Y-%m'),
                'income': float(row['income']),
                'expenses': float(row['expenses']),
                'profit': float(row['income'] - row['expenses']),
            }
            for row in rows
        ]

    def get(self, request):
        today = timezone.localdate()
        records = self.filter_date_range(FinancialRecord.objects.all(), request)

        overall = self._income_expense(records)
        this_month = self._income_expense(
            FinancialRecord.objects.filter(date__year=today.year, date__month=today.month)
        )

        by_payment_method = [
            {
                'payment_method': row['payment_method'],
                'count': row['count'],
                'total': float(row['total']),
            }
            for row in records.values('payment_method')
            .annotate(count=Count('id'), total=Sum('amount'))
            .order_by('-total')
        ]

        return Response({
            'success': True,
            'data': {
                'total_income': overall['income'],
                'total_expenses': overall['expenses'],
                'net_profit': overall['profit'],
                'this_month': this_month,
                'income_by_subcategory': self._by_subcategory(records, 'Income'),
                'expenses_by_subcategory': self._by_subcategory(records, 'Expense'),
                'by_payment_method': by_payment_method,
                'monthly_trends': self._monthly_trends(today),
            },
        })
