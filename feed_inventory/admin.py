"""
Feed Inventory Admin Configuration

Admin interface for monthly feed stock, legacy inventory items and
feed usage records.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import FeedInventory, FeedStock, FeedUsage


STATUS_COLORS = {
    'Active': '#28a745',
    'Reserved': '#17a2b8',
    'Depleted': '#dc3545',
    'Expired': '#6c757d',
}


def status_badge(obj):
    """Display stock status with color-coded badge."""
    color = STATUS_COLORS.get(obj.status, '#6c757d')
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
        color,
        obj.get_status_display()
    )
status_badge.short_description = 'Status'


@admin.register(FeedStock)
class FeedStockAdmin(admin.ModelAdmin):
    """Admin interface for monthly Feed Stock."""

    list_display = [
        'feed_type',
        'month',
        'current_quantity',
        'baseline_quantity',
        'stock_level',
        status_badge,
        'expiry_date',
        'supplier',
    ]

    list_filter = [
        'status',
        'feed_type',
        'is_low_stock',
        'month',
    ]

    search_fields = [
        'feed_type',
        'supplier',
        'batch_number',
    ]

    # Quantities move only through the API ledger
    readonly_fields = [
        'id', 'baseline_quantity', 'current_quantity', 'total_cost', 'is_low_stock',
        'days_until_expiry', 'average_daily_consumption', 'days_remaining',
        'projected_finish_date', 'status', 'created_at', 'last_updated',
    ]

    fieldsets = (
        ('Bucket', {
            'fields': ('id', 'feed_type', 'month', 'year', 'status')
        }),
        ('Stock Levels', {
            'fields': (
                'baseline_quantity',
                'current_quantity',
                'unit',
                'minimum_threshold',
                'is_low_stock',
            )
        }),
        ('Supplier', {
            'fields': ('supplier', 'supplier_contact', 'last_restocked', 'delivery_date', 'batch_number', 'quality_grade')
        }),
        ('Cost', {
            'fields': ('cost_per_unit', 'total_cost')
        }),
        ('Expiry and Projection', {
            'fields': (
                'expiry_date',
                'days_until_expiry',
                'average_daily_consumption',
                'days_remaining',
                'projected_finish_date',
            )
        }),
        ('Additional Information', {
            'fields': ('location', 'notes'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'last_updated'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).filter(month__isnull=False)

    def stock_level(self, obj):
        """Display remaining share of the baseline."""
        percentage = (obj.current_quantity / obj.baseline_quantity * 100) if obj.baseline_quantity > 0 else 0

        if obj.is_critical:
            color = '#dc3545'
        elif obj.is_low_stock:
            color = '#fd7e14'
        else:
            color = '#28a745'

        return format_html('<span style="color: {};">●</span> {}%', color, f'{percentage:.0f}')
    stock_level.short_description = 'Stock Level'


@admin.register(FeedInventory)
class FeedInventoryAdmin(admin.ModelAdmin):
    """Admin interface for legacy Feed Inventory items."""

    list_display = [
        'feed_type',
        'current_quantity',
        'unit',
        'minimum_threshold',
        'is_low_stock',
        status_badge,
        'expiry_date',
        'supplier',
    ]

    list_filter = [
        'feed_type',
        'is_low_stock',
    ]

    search_fields = [
        'feed_type',
        'supplier',
    ]

    readonly_fields = ['id', 'total_cost', 'is_low_stock', 'status', 'created_at', 'last_updated']

    exclude = ['month', 'year', 'days_until_expiry', 'days_remaining', 'projected_finish_date']


@admin.register(FeedUsage)
class FeedUsageAdmin(admin.ModelAdmin):
    """Admin interface for Feed Usage."""

    list_display = [
        'date',
        'feed_type',
        'quantity_used',
        'total_birds',
        'feed_per_bird',
        'daily_cost',
        'recorded_by',
        'verified_status',
    ]

    list_filter = [
        'feed_type',
        'verified',
        'date',
    ]

    search_fields = [
        'feed_type',
        'recorded_by',
        'verified_by',
    ]

    # Usage edits must reconcile stock, so records are read-only here
    readonly_fields = [
        'id', 'feed_type', 'date', 'quantity_used', 'feed_per_bird', 'actual_consumption',
        'cost_per_kg', 'daily_cost', 'cost_per_bird',
        'verified', 'verified_by', 'verified_at', 'created_at', 'updated_at',
    ]

    date_hierarchy = 'date'

    fieldsets = (
        ('Usage', {
            'fields': ('id', 'feed_type', 'date', 'quantity_used', 'unit', 'batches_used', 'recorded_by')
        }),
        ('Flock and Conditions', {
            'fields': (
                'total_birds',
                'feed_per_bird',
                'feeding_time',
                'weather',
                'temperature',
                'humidity',
                'waste_percentage',
                'actual_consumption',
                'feed_efficiency',
                'location',
            )
        }),
        ('Quality Observations', {
            'fields': ('bird_appearance', 'feed_acceptance', 'water_consumption'),
            'classes': ('collapse',)
        }),
        ('Health Indicators', {
            'fields': ('mortality', 'egg_production', 'average_weight'),
            'classes': ('collapse',)
        }),
        ('Cost Analysis', {
            'fields': ('cost_per_kg', 'daily_cost', 'cost_per_bird')
        }),
        ('Verification', {
            'fields': ('verified', 'verified_by', 'verified_at')
        }),
        ('Metadata', {
            'fields': ('notes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def verified_status(self, obj):
        """Display verification with badge."""
        if obj.verified:
            return format_html('<span style="color: green;">●</span> {}', obj.verified_by or 'Verified')
        return format_html('<span style="color: #ffc107;">●</span> {}', 'Unverified')
    verified_status.short_description = 'Verified'
