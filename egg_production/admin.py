from django.contrib import admin

from .models import EggProduction


@admin.register(EggProduction)
class EggProductionAdmin(admin.ModelAdmin):
    """Admin interface for Egg Production records."""

    list_display = [
        'date',
        'batch_number',
        'birds',
        'eggs_collected',
        'damaged_eggs',
        'egg_production_rate',
    ]

    list_filter = [
        'date',
        'batch_number',
    ]

    search_fields = [
        'batch_number',
        'notes',
    ]

    readonly_fields = ['id', 'egg_production_rate', 'created_at', 'updated_at']

    date_hierarchy = 'date'
