from django.contrib import admin
from django.utils.html import format_html

from .models import ScheduledTask


@admin.register(ScheduledTask)
class ScheduledTaskAdmin(admin.ModelAdmin):
    """Admin interface for Scheduled Tasks."""

    list_display = [
        'date',
        'time',
        'task_description',
        'category',
        'assigned_to',
        'priority_badge',
        'status',
    ]

    list_filter = [
        'status',
        'category',
        'priority',
        'is_recurring',
        'date',
    ]

    search_fields = [
        'task_description',
        'assigned_to',
        'location',
    ]

    readonly_fields = ['id', 'completed_at', 'created_at', 'updated_at']

    date_hierarchy = 'date'

    fieldsets = (
        ('Task', {
            'fields': ('id', 'date', 'time', 'task_description', 'category', 'estimated_duration', 'priority', 'location', 'equipment')
        }),
        ('Assignment', {
            'fields': ('assigned_to', 'assigned_to_contact')
        }),
        ('Progress', {
            'fields': ('status', 'completed_at', 'completed_by')
        }),
        ('Recurrence', {
            'fields': ('is_recurring', 'recurring_pattern'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('notes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def priority_badge(self, obj):
        """Display priority with color-coded badge."""
        colors = {
            'Low': '#28a745',
            'Medium': '#17a2b8',
            'High': '#fd7e14',
            'Critical': '#dc3545',
        }
        color = colors.get(obj.priority, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_priority_display()
        )
    priority_badge.short_description = 'Priority'
