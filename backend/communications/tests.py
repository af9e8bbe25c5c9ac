"""
Test suite for Communications module
Tests: templates, provider configuration, dispatch, bulk send, scheduling and analytics
"""
from datetime import timedelta
from unittest.mock import MagicMock, patch
import requests
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.communications.models import MessageLog
from backend.communications.services import (
    send_message, send_bulk_messages, process_scheduled_messages, communication_analytics,
    ProviderNotConfigured, TemplateNotFound,
)


def _twilio_ok(sid='SM100'):
    response = MagicMock(status_code=201)
    response.json.return_value = {'sid': sid}
    return response


class TemplateAPITests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))

    def test_create_template_lists_placeholders(self):
        response = self.client.post('/api/v1/communication-templates/', {
            'name': 'Ready',
            'category': 'ORDER_STATUS',
            'communication_type': 'SMS',
            'content': 'Hello {{customerName}}, {{orderNumber}} is ready. Thanks {{customerName}}!',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['placeholders'], ['customerName', 'orderNumber'])

    def test_email_template_needs_subject(self):
        response = self.client.post('/api/v1/communication-templates/', {
            'name': 'Mail', 'category': 'CUSTOM', 'communication_type': 'EMAIL', 'content': 'Hi',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('subject', response.data)

    def test_preview_reports_missing_variables(self):
        template = TestDataFactory.create_template()
        response = self.client.post(
            f'/api/v1/communication-templates/{template.id}/preview/',
            {'variables': {'customerName': 'Sara'}},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['content'], 'Hi Sara, order {{orderNumber}} is {{status}}.')
        self.assertEqual(response.data['missing_variables'], ['orderNumber', 'status'])
        self.assertFalse(MessageLog.objects.exists())


class ProviderAPITests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_providers_require_admin(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))
        response = self.client.get('/api/v1/communication-providers/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_api_key_is_write_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='ADMIN'))
        response = self.client.post('/api/v1/communication-providers/', {
            'provider': 'TWILIO',
            'communication_type': 'SMS',
            'name': 'Main SMS',
            'account_sid': 'AC999',
            'api_key': 'token',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('api_key', response.data)
        self.assertTrue(response.data['has_api_key'])


class SendMessageTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.template = TestDataFactory.create_template()
        self.customer = TestDataFactory.create_customer(first_name='Huda', last_name='Saleh')

    def test_no_provider_raises_before_logging(self):
        with self.assertRaises(ProviderNotConfigured):
            send_message(self.template, '+971501234567')
        self.assertFalse(MessageLog.objects.exists())

    def test_unknown_template(self):
        TestDataFactory.create_provider()
        with self.assertRaises(TemplateNotFound):
            send_message(999999, '+971501234567')

    @patch('backend.communications.providers.requests.post')
    def test_sent_message_is_rendered_and_logged(self, mock_post):
        TestDataFactory.create_provider()
        mock_post.return_value = _twilio_ok('SM42')
        log = send_message(
            self.template, self.customer.phone,
            variables={'customerName': 'Huda', 'orderNumber': 'ORD-7', 'status': 'READY'},
            customer=self.customer,
        )
        self.assertEqual(log.status, 'SENT')
        self.assertEqual(log.content, 'Hi Huda, order ORD-7 is READY.')
        self.assertEqual(log.provider_message_id, 'SM42')
        self.assertIsNotNone(log.sent_at)

    @patch('backend.communications.providers.requests.post')
    def test_http_error_logged_as_failed(self, mock_post):
        TestDataFactory.create_provider()
        mock_post.return_value = MagicMock(status_code=500, text='upstream down')
        log = send_message(self.template, self.customer.phone)
        self.assertEqual(log.status, 'FAILED')
        self.assertIn('500', log.error_message)

    @patch('backend.communications.providers.requests.post')
    def test_send_endpoint_fills_customer_variables(self, mock_post):
        TestDataFactory.create_provider()
        mock_post.return_value = _twilio_ok()
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.post('/api/v1/messages/send/', {
            'template': self.template.id,
            'customer': self.customer.id,
            'variables': {'orderNumber': 'ORD-1', 'status': 'CUTTING'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['recipient'], self.customer.phone)
        self.assertEqual(response.data['content'], 'Hi Huda Saleh, order ORD-1 is CUTTING.')

    def test_send_endpoint_without_provider(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.post('/api/v1/messages/send/', {
            'template': self.template.id, 'recipient': '+971501234567',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)


class BulkSendTests(TestCase):

    def setUp(self):
        self.template = TestDataFactory.create_template()
        TestDataFactory.create_provider()
        self.customers = [TestDataFactory.create_customer() for _ in range(3)]

    @patch('backend.communications.providers.requests.post')
    def test_failure_for_one_customer_does_not_stop_the_rest(self, mock_post):
        mock_post.side_effect = [
            _twilio_ok('SM1'),
            requests.exceptions.ConnectionError('connection reset'),
            _twilio_ok('SM3'),
        ]
        logs = send_bulk_messages(self.template, [c.id for c in self.customers])

        self.assertEqual(len(logs), 3)
        self.assertEqual(MessageLog.objects.count(), 3)
        self.assertEqual([log.status for log in logs], ['SENT', 'FAILED', 'SENT'])
        self.assertEqual(logs[2].customer, self.customers[2])
        self.assertTrue(all(log.metadata['bulk'] for log in logs))

    @patch('backend.communications.providers.requests.post')
    def test_unreadable_gateway_reply_fails_one_row_only(self, mock_post):
        html_page = MagicMock(status_code=200, text='<html>gateway</html>')
        html_page.json.side_effect = ValueError('Expecting value')
        mock_post.side_effect = [_twilio_ok('SM1'), html_page, _twilio_ok('SM3')]

        logs = send_bulk_messages(self.template, [c.id for c in self.customers])

        self.assertEqual([log.status for log in logs], ['SENT', 'FAILED', 'SENT'])
        self.assertIn('unreadable body', logs[1].error_message)
        self.assertFalse(MessageLog.objects.filter(status='PENDING').exists())

    @patch('backend.communications.services.get_provider')
    def test_unexpected_provider_error_is_logged_as_failed(self, mock_get_provider):
        mock_get_provider.return_value.send.side_effect = KeyError('sid')
        logs = send_bulk_messages(self.template, [c.id for c in self.customers])
        self.assertEqual([log.status for log in logs], ['FAILED'] * 3)
        self.assertIsNotNone(logs[0].failed_at)

    @patch('backend.communications.providers.requests.post')
    def test_inactive_customers_skipped(self, mock_post):
        mock_post.return_value = _twilio_ok()
        self.customers[0].is_active = False
        self.customers[0].save()
        logs = send_bulk_messages(self.template, [c.id for c in self.customers])
        self.assertEqual(len(logs), 2)

    @patch('backend.communications.providers.requests.post')
    def test_bulk_endpoint_counts(self, mock_post):
        mock_post.side_effect = [_twilio_ok(), requests.exceptions.Timeout('slow'), _twilio_ok()]
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))
        response = client.post('/api/v1/messages/bulk/', {
            'template': self.template.id,
            'customer_ids': [c.id for c in self.customers],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual((response.data['total'], response.data['sent'], response.data['failed']), (3, 2, 1))

    def test_bulk_endpoint_requires_manager(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='DELIVERY'))
        response = client.post('/api/v1/messages/bulk/', {
            'template': self.template.id, 'customer_ids': [self.customers[0].id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ScheduledMessageTests(TestCase):

    def setUp(self):
        self.template = TestDataFactory.create_template()
        TestDataFactory.create_provider()

    @patch('backend.communications.providers.requests.post')
    def test_future_message_waits_until_processed(self, mock_post):
        mock_post.return_value = _twilio_ok()
        log = send_message(self.template, '+971501234567', scheduled_for=timezone.now() + timedelta(hours=2))
        self.assertEqual(log.status, 'PENDING')
        mock_post.assert_not_called()

        self.assertEqual(process_scheduled_messages(), 0)
        self.assertEqual(process_scheduled_messages(now=timezone.now() + timedelta(hours=3)), 1)
        log.refresh_from_db()
        self.assertEqual(log.status, 'SENT')

    @patch('backend.communications.providers.requests.post')
    def test_process_scheduled_endpoint(self, mock_post):
        mock_post.return_value = _twilio_ok()
        log = send_message(self.template, '+971501234567', scheduled_for=timezone.now() + timedelta(hours=1))
        MessageLog.objects.filter(pk=log.pk).update(scheduled_for=timezone.now() - timedelta(minutes=5))

        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='ADMIN'))
        response = client.post('/api/v1/messages/process-scheduled/')
        self.assertEqual(response.data, {'processed': 1})


class MessageStatusAndAnalyticsTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def _log(self, communication_type='SMS', status='SENT'):
        return MessageLog.objects.create(
            communication_type=communication_type, recipient='+971500000001', content='Hello', status=status,
        )

    def test_delivery_report(self):
        log = self._log()
        response = self.client.post(f'/api/v1/messages/{log.id}/status/', {'status': 'DELIVERED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['delivered_at'])

    def test_analytics_success_rate(self):
        self._log(status='SENT')
        self._log(status='DELIVERED')
        self._log(status='FAILED')
        self._log(status='PENDING')
        self._log(communication_type='EMAIL', status='FAILED')

        data = communication_analytics()
        self.assertEqual(data['total_messages'], 5)
        rates = {row['communication_type']: row for row in data['delivery_rates']}
        self.assertEqual(rates['SMS']['success_rate'], 66.67)
        self.assertEqual(rates['EMAIL']['success_rate'], 0)

        response = self.client.get('/api/v1/messages/analytics/?communication_type=EMAIL')
        self.assertEqual(response.data['total_messages'], 1)
