from django.contrib import admin
from django.utils.html import format_html

from .models import FinancialRecord


@admin.register(FinancialRecord)
class FinancialRecordAdmin(admin.ModelAdmin):
    """Admin interface for Financial Records."""

    list_display = [
        'date',
        'reference',
        'description',
        'category_badge',
        'subcategory',
        'amount',
        'net_amount',
        'payment_method',
        'status',
    ]

    list_filter = [
        'category',
        'subcategory',
        'payment_method',
        'status',
        'date',
    ]

    search_fields = [
        'reference',
        'description',
        'customer_supplier',
    ]

    readonly_fields = ['id', 'net_amount', 'created_at', 'updated_at']

    date_hierarchy = 'date'

    def category_badge(self, obj):
        """Display income in green and expenses in red."""
        color = '#28a745' if obj.category == 'Income' else '#dc3545'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_category_display()
        )
    category_badge.short_description = 'Category'
