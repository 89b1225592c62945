"""
Contact Management Models

Contact form submissions. Every accepted submission is stored before
its notification emails are queued.
"""
import uuid
from django.db import models
from django.core.validators import EmailValidator


class ContactMessage(models.Model):
    """
    Contact form submission from the public website.

    ``owner_notified_at`` and ``auto_reply_sent_at`` are set by the email
    tasks once each email has gone out.
    """

    DEFAULT_SUBJECT = 'General Inquiry'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Contact Information
    name = models.CharField(
        max_length=100,
        help_text="Name of the person contacting us"
    )

    email = models.EmailField(
        max_length=255,
        validators=[EmailValidator()],
        help_text="Email address for follow-up"
    )

    # Message Details
    subject = models.CharField(
        max_length=200,
        default=DEFAULT_SUBJECT,
        help_text="Subject of the inquiry"
    )

    message = models.TextField(
        help_text="The message content"
    )

    # Security and Tracking
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the submitter (for spam prevention)"
    )

    user_agent = models.TextField(
        blank=True,
        default='',
        help_text="Browser user agent (for spam prevention)"
    )

    # Email delivery
    owner_notified_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the owner notification was sent"
    )

    auto_reply_sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the auto-reply was sent to the submitter"
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the message was submitted"
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Contact Message'
        verbose_name_plural = 'Contact Messages'
        indexes = [
            models.Index(fields=['email']),
        ]

    def __str__(self):
        return f"{self.ticket_id} - {self.name} ({self.subject})"

    @property
    def ticket_id(self):
        """Short human-readable reference for this message."""
        return f"CT-{self.id.hex[:8].upper()}"
