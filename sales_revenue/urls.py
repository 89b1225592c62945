"""
Sales & Revenue URL Configuration
"""

from django.urls import path

from core.api import with_trailing_slash

from .views import SalesOrderDetailView, SalesOrderListCreateView, SalesSummaryView

app_name = 'sales_revenue'

urlpatterns = with_trailing_slash([
    path('sales-orders', SalesOrderListCreateView.as_view(), name='sales-order-list'),
    path('sales-orders/summary', SalesSummaryView.as_view(), name='sales-order-summary'),
    path('sales-orders/<uuid:pk>', SalesOrderDetailView.as_view(), name='sales-order-detail'),
])
