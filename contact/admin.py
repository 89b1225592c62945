"""
Contact Management Django Admin Configuration
"""
from django.contrib import admin
from django.utils.html import format_html
from .models import ContactMessage


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    """Admin interface for contact messages."""

    list_display = [
        'ticket_id', 'name', 'email', 'subject', 'created_at', 'email_status'
    ]

    list_filter = ['created_at']

    search_fields = ['name', 'email', 'subject', 'message']

    readonly_fields = [
        'id', 'ticket_id', 'ip_address', 'user_agent',
        'owner_notified_at', 'auto_reply_sent_at', 'created_at'
    ]

    fieldsets = (
        ('Contact Information', {
            'fields': ('ticket_id', 'name', 'email', 'subject', 'message')
        }),
        ('Email Delivery', {
            'fields': ('owner_notified_at', 'auto_reply_sent_at')
        }),
        ('Security & Tracking', {
            'fields': ('ip_address', 'user_agent'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def email_status(self, obj):
        """Show whether both emails went out."""
        if obj.owner_notified_at and obj.auto_reply_sent_at:
            return format_html('<span style="color: {};">{}</span>', 'green', 'Sent')
        return format_html('<span style="color: {};">{}</span>', 'orange', 'Pending')
    email_status.short_description = 'Emails'
