"""
Test suite for Inventory module
Tests: fabrics, stock transactions, low stock, valuation, material usage and waste cost checks
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import InventoryTransaction, MaterialUsage
from backend.inventory.services import apply_stock_transaction, inventory_value, InsufficientStock, InvalidTransactionType


class StockTransactionTests(TestCase):
    """Test apply_stock_transaction"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.item = TestDataFactory.create_inventory_item(current_stock=Decimal('10'))

    def test_stock_in_adds(self):
        item = apply_stock_transaction(self.item, Decimal('5'), 'STOCK_IN', user=self.user)
        self.assertEqual(item.current_stock, Decimal('15'))
        tx = InventoryTransaction.objects.get(inventory_item=self.item)
        self.assertEqual(tx.previous_stock, Decimal('10'))
        self.assertEqual(tx.new_stock, Decimal('15'))

    def test_stock_out_below_zero_rejected(self):
        with self.assertRaises(InsufficientStock):
            apply_stock_transaction(self.item, Decimal('11'), 'STOCK_OUT')
        self.item.refresh_from_db()
        self.assertEqual(self.item.current_stock, Decimal('10'))
        self.assertFalse(InventoryTransaction.objects.exists())

    def test_adjustment_sets_stock(self):
        item = apply_stock_transaction(self.item, Decimal('3'), 'ADJUSTMENT')
        self.assertEqual(item.current_stock, Decimal('3'))

    def test_unknown_type_rejected(self):
        with self.assertRaises(InvalidTransactionType):
            apply_stock_transaction(self.item, Decimal('1'), 'GIFT')

    def test_inventory_value(self):
        TestDataFactory.create_inventory_item(current_stock=Decimal('4'), unit_price=Decimal('2.50'))
        # 10 * 10.00 + 4 * 2.50
        self.assertEqual(inventory_value(), Decimal('110.00'))


class InventoryAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_stock_endpoint_and_history(self):
        item = TestDataFactory.create_inventory_item(current_stock=Decimal('10'))
        response = self.client.post(f'/api/v1/inventory-items/{item.id}/stock/', {'quantity': '4', 'type': 'STOCK_OUT'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['current_stock']), Decimal('6'))

        response = self.client.post(f'/api/v1/inventory-items/{item.id}/stock/', {'quantity': '40', 'type': 'STOCK_OUT'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(f'/api/v1/inventory-items/{item.id}/transactions/')
        self.assertEqual(len(response.data), 1)

    def test_current_stock_not_writable(self):
        item = TestDataFactory.create_inventory_item(current_stock=Decimal('10'))
        self.client.patch(f'/api/v1/inventory-items/{item.id}/', {'current_stock': '999'})
        item.refresh_from_db()
        self.assertEqual(item.current_stock, Decimal('10'))

    def test_low_stock_lists(self):
        TestDataFactory.create_inventory_item(current_stock=Decimal('5'), min_stock_level=Decimal('10'))
        TestDataFactory.create_inventory_item(current_stock=Decimal('50'), min_stock_level=Decimal('10'))
        TestDataFactory.create_fabric(stock_quantity=Decimal('2.00'), low_stock_threshold=Decimal('5.00'))
        TestDataFactory.create_fabric(stock_quantity=Decimal('20.00'))

        response = self.client.get('/api/v1/inventory-items/low-stock/')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/fabrics/low-stock/')
        self.assertEqual(len(response.data), 1)

    def test_fabric_negative_price_rejected(self):
        response = self.client.post('/api/v1/fabrics/', {'name': 'Bad', 'category': 'SILK', 'price_per_meter': '-1'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_fabric_delete_deactivates(self):
        fabric = TestDataFactory.create_fabric()
        self.client.delete(f'/api/v1/fabrics/{fabric.id}/')
        fabric.refresh_from_db()
        self.assertFalse(fabric.is_active)


class MaterialUsageTests(TestCase):
    """Total cost must equal quantity * unit price within 0.01"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_order()
        self.item = TestDataFactory.create_inventory_item(current_stock=Decimal('100'))

    def _payload(self, total_cost):
        return {
            'order': self.order.id,
            'inventory_item': self.item.id,
            'quantity': '2.5',
            'unit_price': '10.00',
            'total_cost': total_cost,
            'usage_date': '2026-10-01',
        }

    def test_mismatched_total_rejected(self):
        response = self.client.post('/api/v1/material-usage/', self._payload('25.01'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('total_cost', response.data)
        self.assertFalse(MaterialUsage.objects.exists())

    def test_exact_total_accepted(self):
        response = self.client.post('/api/v1/material-usage/', self._payload('25.00'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order_number'], self.order.order_number)

    def test_usage_does_not_move_stock(self):
        self.client.post('/api/v1/material-usage/', self._payload('25.00'))
        self.item.refresh_from_db()
        self.assertEqual(self.item.current_stock, Decimal('100'))

    def test_partial_update_checks_against_stored_values(self):
        usage_id = self.client.post('/api/v1/material-usage/', self._payload('25.00')).data['id']
        response = self.client.patch(f'/api/v1/material-usage/{usage_id}/', {'quantity': '3'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/v1/material-usage/{usage_id}/', {'quantity': '3', 'total_cost': '30.00'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_waste_total_check(self):
        payload = {
            'inventory_item': self.item.id,
            'quantity': '1.5',
            'unit_cost': '4.00',
            'total_cost': '6.00',
            'reason': 'CUTTING_LOSS',
            'waste_date': '2026-10-02',
        }
        response = self.client.post('/api/v1/waste/', payload)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        payload['total_cost'] = '7.00'
        response = self.client.post('/api/v1/waste/', payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
