"""
Feed Inventory URL Configuration
"""

from django.urls import path

from core.api import with_trailing_slash

from .automation_views import AutomationStatusView, AutomationTriggerView
from .consumption_views import (
    FeedUsageAnalyticsView,
    FeedUsageDetailView,
    FeedUsageListCreateView,
    FeedUsageVerifyView,
)
from .inventory_views import FeedInventoryDetailView, FeedInventoryListCreateView, FeedInventorySummaryView
from .views import FeedStockDashboardView, FeedStockDeductView, FeedStockDetailView, FeedStockListCreateView

app_name = 'feed_inventory'

urlpatterns = with_trailing_slash([
    # Monthly stock buckets
    path('feed-stock', FeedStockListCreateView.as_view(), name='feed-stock-list'),
    path('feed-stock/dashboard', FeedStockDashboardView.as_view(), name='feed-stock-dashboard'),
    path('feed-stock/<uuid:pk>', FeedStockDetailView.as_view(), name='feed-stock-detail'),
    path('feed-stock/<uuid:pk>/deduct', FeedStockDeductView.as_view(), name='feed-stock-deduct'),

    # Usage
    path('feed-usage', FeedUsageListCreateView.as_view(), name='feed-usage-list'),
    path('feed-usage/analytics', FeedUsageAnalyticsView.as_view(), name='feed-usage-analytics'),
    path('feed-usage/<uuid:pk>', FeedUsageDetailView.as_view(), name='feed-usage-detail'),
    path('feed-usage/<uuid:pk>/verify', FeedUsageVerifyView.as_view(), name='feed-usage-verify'),

    # Legacy inventory
    path('feed-inventory', FeedInventoryListCreateView.as_view(), name='feed-inventory-list'),
    path('feed-inventory/summary', FeedInventorySummaryView.as_view(), name='feed-inventory-summary'),
    path('feed-inventory/<uuid:pk>', FeedInventoryDetailView.as_view(), name='feed-inventory-detail'),

    # Automation
    path('automation/status', AutomationStatusView.as_view(), name='automation-status'),
    path('automation/trigger', AutomationTriggerView.as_view(), name='automation-trigger'),
])
