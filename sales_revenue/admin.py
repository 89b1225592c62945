from django.contrib import admin
from django.utils.html import format_html

from .models import SalesOrder


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    """Admin interface for Sales Orders."""

    list_display = [
        'order_number',
        'order_date',
        'customer_name',
        'product_type',
        'quantity',
        'total_amount',
        'status_badge',
        'payment_status_badge',
    ]

    list_filter = [
        'status',
        'payment_status',
        'product_type',
        'order_date',
    ]

    search_fields = [
        'order_number',
        'customer_name',
        'customer_phone',
        'customer_email',
    ]

    readonly_fields = ['id', 'total_amount', 'created_at', 'updated_at']

    date_hierarchy = 'order_date'

    fieldsets = (
        ('Order', {
            'fields': ('id', 'order_number', 'order_date', 'delivery_date')
        }),
        ('Customer', {
            'fields': ('customer_name', 'customer_phone', 'customer_email')
        }),
        ('Product and Pricing', {
            'fields': ('product_type', 'quantity', 'unit_price', 'total_amount')
        }),
        ('Status', {
            'fields': ('status', 'payment_status')
        }),
        ('Additional Information', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        """Display order status with color-coded badge."""
        colors = {
            'Pending': '#ffc107',
            'Processing': '#17a2b8',
            'Ready': '#007bff',
            'Delivered': '#28a745',
            'Cancelled': '#dc3545',
        }
        color = colors.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def payment_status_badge(self, obj):
        """Display payment status with color-coded badge."""
        colors = {
            'Pending': '#ffc107',
            'Partial': '#17a2b8',
            'Paid': '#28a745',
        }
        color = colors.get(obj.payment_status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_payment_status_display()
        )
    payment_status_badge.short_description = 'Payment Status'
