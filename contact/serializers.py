"""
Contact Management Serializers

Validation for public contact form submissions.
"""
from rest_framework import serializers
from django.core.validators import EmailValidator
from django.utils.html import strip_tags

from .models import ContactMessage


DISPOSABLE_EMAIL_DOMAINS = [
    'tempmail.com', 'throwaway.email', '10minutemail.com',
    'guerrillamail.com', 'mailinator.com', 'trashmail.com',
]


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Validates and sanitizes user input from the contact form.
    """

    name = serializers.CharField(
        max_length=100,
        required=True,
        help_text="Name of the person contacting us"
    )

    email = serializers.EmailField(
        max_length=255,
        required=True,
        validators=[EmailValidator()],
        help_text="Valid email address for follow-up"
    )

    subject = serializers.CharField(
        max_length=200,
        required=False,
        allow_blank=True,
        help_text="Subject of the inquiry (default: General Inquiry)"
    )

    message = serializers.CharField(
        max_length=5000,
        required=True,
        help_text="Message content"
    )

    # Honeypot field for spam prevention (should be empty)
    website = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        help_text="Honeypot field - should be empty"
    )

    def validate_name(self, value):
        """Sanitize name field."""
        value = strip_tags(value).strip()
        if not value:
            raise serializers.ValidationError("Name cannot be empty")
        return value

    def validate_subject(self, value):
        return strip_tags(value).strip() or ContactMessage.DEFAULT_SUBJECT

    def validate_message(self, value):
        """Sanitize message field."""
        value = strip_tags(value).strip()
        if not value:
            raise serializers.ValidationError("Message cannot be empty")
        return value

    def validate_website(self, value):
        """Honeypot validation - should be empty."""
        if value:
            raise serializers.ValidationError("Spam detected")
        return value

    def validate_email(self, value):
        """Reject disposable email domains."""
        domain = value.split('@')[1].lower()
        if domain in DISPOSABLE_EMAIL_DOMAINS:
            raise serializers.ValidationError(
                "Disposable email addresses are not allowed"
            )

        return value.lower()

    def validate(self, attrs):
        attrs.setdefault('subject', ContactMessage.DEFAULT_SUBJECT)
        attrs.pop('website', None)
        return attrs
