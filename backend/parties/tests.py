"""
Test suite for Parties module
Tests: customer CRUD, soft delete, search, loyalty, supplier CRUD and validation
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.parties.models import Customer, Supplier


class CustomerAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer_generates_number(self):
        response = self.client.post('/api/v1/customers/', {
            'first_name': 'Layla',
            'last_name': 'Hassan',
            'phone': '+971501112233',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['customer_number'].startswith('CUST-'))
        self.assertEqual(response.data['full_name'], 'Layla Hassan')
        self.assertTrue(AuditLog.objects.filter(model_name='Customer', action='create').exists())

    def test_invalid_phone_rejected(self):
        response = self.client.post('/api/v1/customers/', {
            'first_name': 'Bad', 'last_name': 'Phone', 'phone': '0123',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data)

    def test_email_required_for_email_contact(self):
        response = self.client.post('/api/v1/customers/', {
            'first_name': 'No', 'last_name': 'Email', 'phone': '+971501112233',
            'preferred_contact_method': 'EMAIL',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_search_and_pagination(self):
        TestDataFactory.create_customer(first_name='Zainab')
        for _ in range(3):
            TestDataFactory.create_customer()
        response = self.client.get('/api/v1/customers/?search=zain')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/customers/?limit=2')
        self.assertEqual(response.data['count'], 4)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)

    def test_delete_is_soft(self):
        customer = TestDataFactory.create_customer()
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        customer.refresh_from_db()
        self.assertFalse(customer.is_active)

        response = self.client.get('/api/v1/customers/')
        self.assertEqual(response.data['count'], 0)
        response = self.client.get('/api/v1/customers/?is_active=false')
        self.assertEqual(response.data['count'], 1)

    def test_detail_includes_counts(self):
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_order(customer=customer)
        TestDataFactory.create_measurement(customer=customer)
        response = self.client.get(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.data['order_count'], 1)
        self.assertEqual(response.data['measurement_count'], 1)

    def test_patch_records_changes(self):
        customer = TestDataFactory.create_customer(first_name='Old')
        response = self.client.patch(f'/api/v1/customers/{customer.id}/', {'first_name': 'New'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(model_name='Customer', action='update')
        self.assertEqual(log.changes['first_name']['new'], 'New')

    def test_loyalty_points(self):
        customer = TestDataFactory.create_customer()
        response = self.client.post(f'/api/v1/customers/{customer.id}/loyalty/', {'points': 50})
        self.assertEqual(response.data['loyalty_points'], 50)
        response = self.client.post(f'/api/v1/customers/{customer.id}/loyalty/', {'points': -80})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        customer.refresh_from_db()
        self.assertEqual(customer.loyalty_points, 50)


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        response = self.client.post('/api/v1/suppliers/', {
            'name': 'Gulf Textiles',
            'phone': '+97143334444',
            'lead_time_days': 14,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['supplier_number'].startswith('SUP-'))

    def test_lead_time_limit(self):
        response = self.client.post('/api/v1/suppliers/', {'name': 'Slow', 'lead_time_days': 400})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_marks_inactive(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        supplier.refresh_from_db()
        self.assertFalse(supplier.is_active)
        self.assertEqual(supplier.status, 'INACTIVE')
        self.assertTrue(Supplier.objects.filter(pk=supplier.pk).exists())

    def test_customer_str(self):
        customer = TestDataFactory.create_customer(first_name='Omar', last_name='Ali')
        self.assertEqual(str(customer), f'Omar Ali ({customer.customer_number})')
        self.assertEqual(Customer.objects.count(), 1)
