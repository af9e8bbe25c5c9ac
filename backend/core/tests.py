"""
Test suite for Core module
Tests: auth, role permissions, settings, audit logs, events, health, navigation and placeholder templating
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog, Event, Setting
from backend.core.utils import create_audit_log, record_event, get_setting, generate_number
from backend.core.templating import render_placeholders, extract_placeholders
from backend.core.navigation import navigation_for_role
from backend.parties.models import Customer


class AuthTests(TestCase):
    """Test JWT login, register and me"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(username='cutter1', password='testpass123', role='CUTTER')

    def test_login_returns_tokens_and_role_claim(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'cutter1', 'password': 'testpass123'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'cutter1')

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'cutter1', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_register_ignores_requested_role(self):
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'newbie',
            'email': 'newbie@test.com',
            'password': 'Str0ng-Passw0rd!',
            'password_confirm': 'Str0ng-Passw0rd!',
            'role': 'ADMIN',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], 'STITCHER')

    def test_register_password_mismatch(self):
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'newbie',
            'password': 'Str0ng-Passw0rd!',
            'password_confirm': 'different-Passw0rd!',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_includes_navigation(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['effective_role'], 'CUTTER')
        self.assertFalse(response.data['can_manage'])
        keys = [item['key'] for item in response.data['navigation']]
        self.assertIn('measurements', keys)
        self.assertNotIn('payroll', keys)

    def test_unauthenticated_request_rejected(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RolePermissionTests(TestCase):
    """Admin-only endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.manager = TestDataFactory.create_user(role='MANAGER')

    def test_user_list_admin_only(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_user_list_filter_by_role(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/users/?role=MANAGER')
        self.assertEqual([u['id'] for u in response.data], [self.manager.id])

    def test_superuser_is_admin(self):
        superuser = TestDataFactory.create_user(role='DELIVERY', is_superuser=True)
        self.assertEqual(superuser.effective_role, 'ADMIN')
        self.client.authenticate_user(superuser)
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class SettingTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='ADMIN'))

    def test_create_and_read_setting(self):
        response = self.client.post('/api/v1/settings/', {'key': 'payroll_tax_rate', 'value': '5'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(get_setting('payroll_tax_rate'), '5')

    def test_get_setting_default(self):
        self.assertEqual(get_setting('missing_key', 'fallback'), 'fallback')

    def test_duplicate_key_rejected(self):
        Setting.objects.create(key='company_name', value='A')
        response = self.client.post('/api/v1/settings/', {'key': 'company_name', 'value': 'B'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AuditAndEventTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()

    def test_create_audit_log(self):
        log = create_audit_log(user=self.user, action='create', model_name='Customer', object_id=5)
        self.assertIsNotNone(log)
        self.assertEqual(log.object_id, '5')

    def test_audit_log_skipped_without_required_fields(self):
        self.assertIsNone(create_audit_log(user=self.user, action='create'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_non_admin_sees_only_own_audit_logs(self):
        create_audit_log(user=self.user, action='create', model_name='Order', object_id=1)
        create_audit_log(user=self.admin, action='create', model_name='Order', object_id=2)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(len(response.data), 1)

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(len(response.data), 2)

    def test_event_feed_filters(self):
        record_event('order.created', 'Order', 1, {'order_number': 'ORD-1'}, user=self.user)
        record_event('task.assigned', 'Task', 9, user=self.user)
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/events/?entity_type=Order&entity_id=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['type'], 'order.created')
        self.assertEqual(Event.objects.count(), 2)

    def test_system_health(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/system/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(response.data['status'], ('healthy', 'warning'))
        self.assertEqual(response.data['components'][0]['component'], 'database')


class UtilityTests(TestCase):

    def test_generate_number_format(self):
        number = generate_number('CUST', Customer, 'customer_number')
        prefix, date_part, suffix = number.split('-')
        self.assertEqual(prefix, 'CUST')
        self.assertEqual(len(date_part), 8)
        self.assertEqual(len(suffix), 6)

    def test_render_placeholders(self):
        content = 'Hi {{customerName}}, order {{orderNumber}} is {{status}}'
        rendered = render_placeholders(content, {'customerName': 'Ana', 'orderNumber': 'ORD-1'})
        self.assertEqual(rendered, 'Hi Ana, order ORD-1 is {{status}}')

    def test_extract_placeholders_keeps_first_appearance_order(self):
        self.assertEqual(
            extract_placeholders('{{b}} and {{a}} then {{b}} again'),
            ['b', 'a'],
        )

    def test_navigation_for_delivery_role(self):
        keys = [item['key'] for item in navigation_for_role('DELIVERY')]
        self.assertEqual(keys, ['dashboard', 'orders', 'deliveries'])
