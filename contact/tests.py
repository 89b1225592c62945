"""
Tests for the contact form and email configuration check
"""
import smtplib
from unittest.mock import patch

import pytest
from django.core import mail
from django.test import override_settings
from rest_framework import status

from contact.models import ContactMessage
from contact.tasks import send_contact_auto_reply, send_owner_notification

pytestmark = pytest.mark.django_db


@pytest.fixture
def farm_email_settings(settings):
    settings.FARM_NAME = 'Sunrise Farm'
    settings.CONTACT_EMAIL_TO = 'owner@sunrise.test'
    settings.CONTACT_EMAIL_FROM = 'noreply@sunrise.test'
    return settings


@pytest.fixture
def sample_contact_message():
    return ContactMessage.objects.create(
        name='John Doe',
        email='john@example.com',
        subject='Egg prices',
        message='How much is a crate of eggs this week?',
        ip_address='192.168.1.1'
    )


class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, farm_email_settings):
        data = {
            'name': 'Test User',
            'email': 'Test@Example.com',
            'subject': 'Bulk order',
            'message': 'I would like to order 50 crates of eggs.'
        }

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['message'] == 'Thank you for your message! We will get back to you soon.'

        message = ContactMessage.objects.get()
        assert message.email == 'test@example.com'
        assert response.data['data']['ticket_id'] == message.ticket_id

    def test_submission_sends_owner_notification_and_auto_reply(self, api_client, farm_email_settings):
        api_client.post('/api/contact', {
            'name': 'Ama Mensah',
            'email': 'ama@example.com',
            'subject': 'Visit',
            'message': 'Can I visit the farm on Saturday?',
        }, format='json')

        assert len(mail.outbox) == 2
        by_recipient = {email.to[0]: email for email in mail.outbox}

        owner_email = by_recipient['owner@sunrise.test']
        assert owner_email.subject == 'New Contact Form Submission - Visit'
        assert owner_email.reply_to == ['ama@example.com']
        assert 'Can I visit the farm on Saturday?' in owner_email.body

        reply = by_recipient['ama@example.com']
        assert reply.subject == 'Thank you for contacting Sunrise Farm'
        assert reply.from_email == 'noreply@sunrise.test'

        message = ContactMessage.objects.get()
        assert message.owner_notified_at is not None
        assert message.auto_reply_sent_at is not None

    def test_subject_defaults_to_general_inquiry(self, api_client, farm_email_settings):
        api_client.post('/api/contact', {
            'name': 'Kofi',
            'email': 'kofi@example.com',
            'message': 'Do you sell layer feed?',
        }, format='json')

        assert ContactMessage.objects.get().subject == 'General Inquiry'
        subjects = [email.subject for email in mail.outbox]
        assert 'New Contact Form Submission - General Inquiry' in subjects

    def test_submit_with_trailing_slash(self, api_client, farm_email_settings):
        data = {'name': 'Test User', 'email': 'test@example.com', 'message': 'Hello'}

        response = api_client.post('/api/contact/', data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert ContactMessage.objects.count() == 1

    def test_submit_missing_required_fields(self, api_client):
        response = api_client.post('/api/contact', {'name': 'Test User'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert response.data['message'] == 'Please provide name, email, and message'
        assert ContactMessage.objects.count() == 0
        assert len(mail.outbox) == 0

    def test_submit_invalid_email(self, api_client):
        response = api_client.post('/api/contact', {
            'name': 'Test User',
            'email': 'invalid-email',
            'message': 'Test message'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Validation error'
        assert 'email' in response.data['errors']

    def test_disposable_email_rejected(self, api_client):
        response = api_client.post('/api/contact', {
            'name': 'Test User',
            'email': 'someone@mailinator.com',
            'message': 'Test message'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['errors']

    def test_honeypot_spam_detection(self, api_client):
        response = api_client.post('/api/contact', {
            'name': 'Spammer',
            'email': 'spam@example.com',
            'message': 'Buy now',
            'website': 'http://spam.example.com'
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ContactMessage.objects.count() == 0

    def test_html_is_stripped(self, api_client):
        api_client.post('/api/contact', {
            'name': '<b>Yaw</b>',
            'email': 'yaw@example.com',
            'message': '<script>alert(1)</script>Hello',
        }, format='json')

        message = ContactMessage.objects.get()
        assert message.name == 'Yaw'
        assert '<script>' not in message.message

    def test_client_ip_from_forwarded_header(self, api_client):
        api_client.post(
            '/api/contact',
            {'name': 'Esi', 'email': 'esi@example.com', 'message': 'Hi'},
            format='json',
            HTTP_X_FORWARDED_FOR='10.0.0.7, 172.16.0.1'
        )

        assert ContactMessage.objects.get().ip_address == '10.0.0.7'


class TestEmailTasks:

    def test_owner_notification_for_missing_message(self):
        result = send_owner_notification('00000000-0000-0000-0000-000000000000')
        assert 'not found' in result
        assert len(mail.outbox) == 0

    def test_auto_reply_marks_message(self, sample_contact_message, farm_email_settings):
        send_contact_auto_reply(str(sample_contact_message.id))

        sample_contact_message.refresh_from_db()
        assert sample_contact_message.auto_reply_sent_at is not None
        assert mail.outbox[0].to == ['john@example.com']
        assert sample_contact_message.ticket_id in mail.outbox[0].body

    def test_html_alternative_attached(self, sample_contact_message, farm_email_settings):
        send_owner_notification(str(sample_contact_message.id))

        email = mail.outbox[0]
        assert email.alternatives
        assert 'Egg prices' in email.alternatives[0][0]

    def test_plain_text_notification_keeps_reply_to(self, sample_contact_message, farm_email_settings):
        with patch('contact.tasks._render_html', return_value=None):
            send_owner_notification(str(sample_contact_message.id))

        email = mail.outbox[0]
        assert email.alternatives == []
        assert email.reply_to == ['john@example.com']


class TestEmailConfigurationCheck:

    def test_test_email_sent(self, api_client, farm_email_settings):
        response = api_client.get('/api/contact/test')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['message'] == (
            'Email configuration test successful! Check your inbox for the test email.'
        )
        assert mail.outbox[0].to == ['owner@sunrise.test']
        assert mail.outbox[0].subject.startswith('Email Configuration Test - ')

    @override_settings(DEBUG=False)
    def test_test_email_failure(self, api_client):
        with patch('contact.views.send_test_email', side_effect=smtplib.SMTPException('auth failed')):
            response = api_client.get('/api/contact/test')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['success'] is False
        assert response.data['message'] == (
            'Email configuration test failed. Please check your email settings.'
        )
        assert 'errors' not in response.data

    @override_settings(DEBUG=True)
    def test_test_email_failure_shows_error_in_debug(self, api_client):
        with patch('contact.views.send_test_email', side_effect=smtplib.SMTPException('auth failed')):
            response = api_client.get('/api/contact/test')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert 'auth failed' in response.data['errors']['email'][0]
