"""
Contact Management Email Tasks

Celery tasks for sending contact-related emails.
"""
import logging

from celery import shared_task
from django.core.mail import EmailMultiAlternatives
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string
from django.conf import settings
from django.utils import timezone
from .models import ContactMessage

logger = logging.getLogger(__name__)


def _from_email():
    return getattr(settings, 'CONTACT_EMAIL_FROM', settings.DEFAULT_FROM_EMAIL)


def _render_html(template_name, context):
    """Render an HTML alternative, or None when the template is missing."""
    try:
        return render_to_string(template_name, context)
    except TemplateDoesNotExist:
        logger.warning("Email template %s not found, sending plain text", template_name)
        return None


def _send(subject, text_content, html_content, to, reply_to=None):
    email = EmailMultiAlternatives(
        subject=subject,
        body=text_content,
        from_email=_from_email(),
        to=to,
        reply_to=reply_to,
    )
    if html_content:
        email.attach_alternative(html_content, "text/html")
    email.send(fail_silently=False)


@shared_task(bind=True, max_retries=3)
def send_owner_notification(self, message_id):
    """
    Send notification email to the farm owner about a new contact submission.

    Args:
        message_id: UUID of the ContactMessage
    """
    try:
        message = ContactMessage.objects.get(id=message_id)

        subject = f"New Contact Form Submission - {message.subject or ContactMessage.DEFAULT_SUBJECT}"

        # Plain text version
        text_content = f"""New contact form submission received:

From: {message.name} ({message.email})
Subject: {message.subject}
Reference: {message.ticket_id}
Received: {message.created_at.strftime('%Y-%m-%d %H:%M:%S')}
IP Address: {message.ip_address or 'Unknown'}

Message:
{message.message}
"""

        html_content = _render_html('contact/emails/owner_notification.html', {
            'message': message,
            'farm_name': settings.FARM_NAME,
        })

        _send(subject, text_content, html_content, [settings.CONTACT_EMAIL_TO], reply_to=[message.email])

        message.owner_notified_at = timezone.now()
        message.save(update_fields=['owner_notified_at'])

        logger.info("Owner notification sent for %s", message.ticket_id)
        return f"Owner notification sent for {message.ticket_id}"

    except ContactMessage.DoesNotExist:
        return f"Contact message {message_id} not found"

    except Exception as exc:
        logger.error("Owner notification for %s failed: %s", message_id, exc)
        raise self.retry(exc=exc, countdown=60)


@shared_task(bind=True, max_retries=3)
def send_contact_auto_reply(self, message_id):
    """
    Send auto-reply email to contact form submitter.

    Args:
        message_id: UUID of the ContactMessage
    """
    try:
        message = ContactMessage.objects.get(id=message_id)
        farm_name = settings.FARM_NAME

        subject = f"Thank you for contacting {farm_name}"

        # Plain text version
        text_content = f"""Dear {message.name},

Thank you for contacting {farm_name}.

We have received your message regarding: {message.subject}

We will get back to you as soon as possible.

Your reference number: {message.ticket_id}

Best regards,
{farm_name}

---
This is an automated message. Please do not reply directly to this email.
"""

        html_content = _render_html('contact/emails/auto_reply.html', {
            'name': message.name,
            'subject': message.subject,
            'ticket_id': message.ticket_id,
            'message': message.message,
            'farm_name': farm_name,
        })

        _send(subject, text_content, html_content, [message.email])

        message.auto_reply_sent_at = timezone.now()
        message.save(update_fields=['auto_reply_sent_at'])

        logger.info("Auto-reply sent for %s", message.ticket_id)
        return f"Auto-reply sent to {message.email}"

    except ContactMessage.DoesNotExist:
        return f"Contact message {message_id} not found"

    except Exception as exc:
        logger.error("Auto-reply for %s failed: %s", message_id, exc)
        raise self.retry(exc=exc, countdown=60)


def send_test_email():
    """
    Send a configuration test email to the owner address.

    Runs synchronously so the caller sees delivery errors directly.
    """
    sent_at = timezone.now()
    subject = f"Email Configuration Test - {sent_at.strftime('%Y-%m-%d %H:%M:%S')}"

    text_content = f"""This is a test email from {settings.FARM_NAME}.

If you are reading this, outgoing email is configured correctly.

Sent at: {sent_at.isoformat()}
"""

    html_content = _render_html('contact/emails/test_email.html', {
        'farm_name': settings.FARM_NAME,
        'sent_at': sent_at,
    })

    _send(subject, text_content, html_content, [settings.CONTACT_EMAIL_TO])
    return settings.CONTACT_EMAIL_TO
