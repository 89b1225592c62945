"""
Contact Management Views

Public contact form submission and an email configuration check.
"""
import logging
import smtplib

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import missing_required_fields, validation_error_response

from .models import ContactMessage
from .serializers import ContactFormSubmitSerializer
from .tasks import send_contact_auto_reply, send_owner_notification, send_test_email

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    The message is stored, then the owner notification and the auto-reply
    are queued.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        """Submit a contact form."""
        if missing_required_fields(request.data, ('name', 'email', 'message')):
            return Response(
                {
                    'success': False,
                    'message': 'Please provide name, email, and message',
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = ContactFormSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        contact_message = ContactMessage.objects.create(
            name=serializer.validated_data['name'],
            email=serializer.validated_data['email'],
            subject=serializer.validated_data['subject'],
            message=serializer.validated_data['message'],
            ip_address=get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', '')[:500]
        )
        logger.info("Contact message %s received from %s", contact_message.ticket_id, contact_message.email)

        # Send emails asynchronously
        send_owner_notification.delay(str(contact_message.id))
        send_contact_auto_reply.delay(str(contact_message.id))

        return Response(
            {
                'success': True,
                'message': 'Thank you for your message! We will get back to you soon.',
                'data': {'ticket_id': contact_message.ticket_id},
            },
            status=status.HTTP_200_OK
        )


class ContactEmailTestView(APIView):
    """
    GET /api/contact/test - Send a test email to the configured owner address
    """

    permission_classes = [AllowAny]

    def get(self, request):
        try:
            recipient = send_test_email()
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email configuration test failed: %s", exc)
            body = {
                'success': False,
                'message': 'Email configuration test failed. Please check your email settings.',
            }
            if settings.DEBUG:
                body['errors'] = {'email': [str(exc)]}
            return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            'success': True,
            'message': 'Email configuration test successful! Check your inbox for the test email.',
            'data': {'recipient': recipient},
        })
