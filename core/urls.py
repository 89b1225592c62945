"""
URL configuration for the Farm Management backend.

Every entity app exposes its own routes under /api/; unmatched routes
fall through to the JSON 404 handler.
"""
from django.contrib import admin
from django.urls import path, include

from core.views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', health_check, name='health'),
    path('api/health/', health_check),
    path('api/', include('egg_production.urls')),  # Egg production records
    path('api/', include('sales_revenue.urls')),  # Sales orders
    path('api/', include('feed_inventory.urls')),  # Feed stock, usage, legacy inventory, automation
    path('api/', include('task_scheduling.urls')),  # Farm task scheduling
    path('api/', include('finance.urls')),  # Income and expense records
    path('api/', include('contact.urls')),  # Contact form email
]

handler404 = 'core.views.endpoint_not_found'
handler500 = 'core.views.server_error'
