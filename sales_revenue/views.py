"""
Sales Order API Views
"""

from django.db.models import Count, Sum
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import DateRangeMixin, RecordDetailView, RecordListCreateView

from .filters import SalesOrderFilter
from .models import SalesOrder
from .serializers import SalesOrderSerializer


class SalesOrderListCreateView(RecordListCreateView):
    """
    GET  /api/sales-orders - List orders (newest order date first)
    POST /api/sales-orders - Create an order
    """

    queryset = SalesOrder.objects.all()
    serializer_class = SalesOrderSerializer
    filterset_class = SalesOrderFilter
    sort_fields = ('order_date', 'delivery_date', 'order_number', 'total_amount', 'customer_name', 'created_at')
    default_sort = 'order_date'
    required_fields = (
        'order_number', 'customer_name', 'customer_phone',
        'product_type', 'quantity', 'unit_price', 'order_date',
    )
    create_message = 'Sales order created successfully'
    duplicate_message = 'Order number already exists'


class SalesOrderDetailView(RecordDetailView):
    """
    GET    /api/sales-orders/<id>
    PUT    /api/sales-orders/<id>
    DELETE /api/sales-orders/<id>
    """

    queryset = SalesOrder.objects.all()
    serializer_class = SalesOrderSerializer
    not_found_message = 'Sales order not found'
    update_message = 'Sales order updated successfully'
    delete_message = 'Sales order deleted successfully'
    duplicate_message = 'Order number already exists'


class SalesSummaryView(DateRangeMixin, APIView):
    """
    GET /api/sales-orders/summary - Order counts, revenue and top products

    Query params: start_date, end_date (YYYY-MM-DD, on order_date)
    """

    TOP_PRODUCTS = 5

    def get(self, request):
        orders = self.filter_date_range(SalesOrder.objects.all(), request, field='order_date')

        totals = orders.aggregate(
            total_orders=Count('id'),
            total_revenue=Sum('total_amount'),
        )

        orders_by_status = [
            {'status': row['status'], 'count': row['count']}
            for row in orders.values('status').annotate(count=Count('id')).order_by('-count', 'status')
        ]

        top_products = [
            {
                'product_type': row['product_type'],
                'total_quantity': row['total_quantity'],
                'total_revenue': float(row['total_revenue'] or 0),
            }
            for row in orders.values('product_type')
            .annotate(total_quantity=Sum('quantity'), total_revenue=Sum('total_amount'))
            .order_by('-total_quantity')[:self.TOP_PRODUCTS]
        ]

        return Response({
            'success': True,
            'data': {
                'total_orders': totals['total_orders'],
                'total_revenue': float(totals['total_revenue'] or 0),
                'pending_orders': orders.filter(status='Pending').count(),
                'completed_orders': orders.filter(status='Delivered').count(),
                'orders_by_status': orders_by_status,
                'top_products': top_products,
            },
        })
