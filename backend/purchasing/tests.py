"""
Test suite for Purchasing module
Tests: purchase order totals, edit locks, status changes, goods receipt, statistics,
supplier payments and supplier performance
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.inventory.models import InventoryTransaction
from backend.purchasing.models import PurchaseOrder, SupplierPayment
from backend.purchasing.services import receive_purchase_order, supplier_performance, PurchaseOrderError


class PurchaseOrderAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.supplier = TestDataFactory.create_supplier()
        self.thread = TestDataFactory.create_inventory_item(current_stock=Decimal('0'))
        self.buttons = TestDataFactory.create_inventory_item(current_stock=Decimal('0'))

    def _payload(self, total_amount='85.00'):
        return {
            'supplier': self.supplier.id,
            'total_amount': total_amount,
            'items': [
                {'inventory_item': self.thread.id, 'quantity': '10', 'unit_price': '5.00'},
                {'inventory_item': self.buttons.id, 'quantity': '50', 'unit_price': '0.70'},
            ],
        }

    def test_create_purchase_order(self):
        response = self.client.post('/api/v1/purchase-orders/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['po_number'].startswith('PO-'))
        self.assertEqual(response.data['status'], 'DRAFT')
        self.assertEqual(len(response.data['items']), 2)
        self.assertTrue(AuditLog.objects.filter(model_name='PurchaseOrder', action='create').exists())

    def test_total_must_match_items(self):
        response = self.client.post('/api/v1/purchase-orders/', self._payload('85.02'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['total_amount'][0]), 'Total amount must match the sum of item totals')
        self.assertFalse(PurchaseOrder.objects.exists())

    def test_at_least_one_item(self):
        payload = self._payload('0.00')
        payload['items'] = []
        response = self.client.post('/api/v1/purchase-orders/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_new_order_cannot_start_received(self):
        payload = self._payload()
        payload['status'] = 'RECEIVED'
        response = self.client.post('/api/v1/purchase-orders/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_replace_items_while_draft(self):
        po = TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.patch(f'/api/v1/purchase-orders/{po.id}/', {
            'total_amount': '20.00',
            'items': [{'inventory_item': self.thread.id, 'quantity': '4', 'unit_price': '5.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(po.items.count(), 1)

    def test_closed_order_cannot_be_edited(self):
        for closed in ('RECEIVED', 'CANCELLED'):
            po = TestDataFactory.create_purchase_order(supplier=self.supplier, status=closed)
            response = self.client.patch(f'/api/v1/purchase-orders/{po.id}/', {'notes': 'late edit'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_cannot_change_status(self):
        po = TestDataFactory.create_purchase_order(supplier=self.supplier)
        response = self.client.patch(f'/api/v1/purchase-orders/{po.id}/', {'status': 'APPROVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_only_drafts_can_be_deleted(self):
        draft = TestDataFactory.create_purchase_order(supplier=self.supplier)
        ordered = TestDataFactory.create_purchase_order(supplier=self.supplier, status='ORDERED')

        response = self.client.delete(f'/api/v1/purchase-orders/{ordered.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/v1/purchase-orders/{draft.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(list(PurchaseOrder.objects.values_list('id', flat=True)), [ordered.id])

    def test_filter_by_status(self):
        TestDataFactory.create_purchase_order(supplier=self.supplier)
        TestDataFactory.create_purchase_order(supplier=self.supplier, status='ORDERED')
        response = self.client.get('/api/v1/purchase-orders/?status=ORDERED')
        self.assertEqual(response.data['count'], 1)


class PurchaseOrderStatusTests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_approve_stamps_approver(self):
        po = TestDataFactory.create_purchase_order(status='PENDING_APPROVAL')
        response = self.client.post(f'/api/v1/purchase-orders/{po.id}/status/', {'status': 'APPROVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['approved_by_username'], self.manager.username)
        self.assertIsNotNone(response.data['approved_at'])

    def test_status_change_requires_manager(self):
        po = TestDataFactory.create_purchase_order(status='PENDING_APPROVAL')
        self.client.authenticate_user(TestDataFactory.create_user(role='CUTTER'))
        response = self.client.post(f'/api/v1/purchase-orders/{po.id}/status/', {'status': 'APPROVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cancelled_order_is_locked(self):
        po = TestDataFactory.create_purchase_order(status='CANCELLED')
        response = self.client.post(f'/api/v1/purchase-orders/{po.id}/status/', {'status': 'ORDERED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        po.refresh_from_db()
        self.assertEqual(po.status, 'CANCELLED')


class PurchaseOrderReceiveTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_inventory_item(current_stock=Decimal('2'))
        self.po = TestDataFactory.create_purchase_order(
            status='ORDERED', items=[(self.item, Decimal('10'), Decimal('5.00'))],
        )
        self.line = self.po.items.get()

    def test_receive_everything_outstanding(self):
        response = self.client.post(f'/api/v1/purchase-orders/{self.po.id}/receive/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'RECEIVED')
        self.assertIsNotNone(response.data['received_at'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.current_stock, Decimal('12'))
        tx = InventoryTransaction.objects.get(inventory_item=self.item)
        self.assertEqual(tx.type, 'STOCK_IN')
        self.assertEqual(tx.reference_type, 'PurchaseOrder')

    def test_partial_receipt(self):
        response = self.client.post(
            f'/api/v1/purchase-orders/{self.po.id}/receive/',
            {'items': [{'item': self.line.id, 'quantity': '4'}]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'PARTIALLY_RECEIVED')
        self.line.refresh_from_db()
        self.assertEqual(self.line.received_quantity, Decimal('4'))

        response = self.client.post(
            f'/api/v1/purchase-orders/{self.po.id}/receive/',
            {'items': [{'item': self.line.id, 'quantity': '6'}]},
            format='json',
        )
        self.assertEqual(response.data['status'], 'RECEIVED')

    def test_over_receipt_rejected(self):
        response = self.client.post(
            f'/api/v1/purchase-orders/{self.po.id}/receive/',
            {'items': [{'item': self.line.id, 'quantity': '11'}]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.item.refresh_from_db()
        self.assertEqual(self.item.current_stock, Decimal('2'))

    def test_draft_cannot_be_received(self):
        draft = TestDataFactory.create_purchase_order()
        with self.assertRaises(PurchaseOrderError):
            receive_purchase_order(draft)

    def test_stats(self):
        TestDataFactory.create_purchase_order(status='PENDING_APPROVAL')
        TestDataFactory.create_purchase_order(status='CANCELLED')
        response = self.client.get('/api/v1/purchase-orders/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_orders'], 3)
        self.assertEqual(response.data['open_orders'], 2)
        self.assertEqual(response.data['pending_approval'], 1)
        self.assertEqual(response.data['total_value'], Decimal('100.00'))


class SupplierPaymentTests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.supplier = TestDataFactory.create_supplier()
        self.po = TestDataFactory.create_purchase_order(supplier=self.supplier, status='ORDERED')
        self.today = timezone.localdate()

    def _payment(self, **overrides):
        payload = {
            'supplier': self.supplier.id,
            'purchase_order': self.po.id,
            'amount': '50.00',
            'payment_method': 'BANK_TRANSFER',
            'due_date': str(self.today + timedelta(days=30)),
            'reference': 'TRX-001',
        }
        payload.update(overrides)
        return self.client.post('/api/v1/supplier-payments/', payload, format='json')

    def test_create_payment(self):
        response = self._payment()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'PENDING')
        self.assertEqual(response.data['po_number'], self.po.po_number)
        self.assertTrue(AuditLog.objects.filter(model_name='SupplierPayment', action='create').exists())

    def test_amount_must_be_positive(self):
        response = self._payment(amount='0.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_payment_date_after_due_date_rejected(self):
        response = self._payment(due_date=str(self.today), payment_date=str(self.today + timedelta(days=1)))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('payment_date', response.data)

    def test_purchase_order_of_another_supplier_rejected(self):
        other_po = TestDataFactory.create_purchase_order()
        response = self._payment(purchase_order=other_po.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('purchase_order', response.data)

    def test_cannot_start_completed(self):
        response = self._payment(status='COMPLETED')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_complete_payment_then_locked(self):
        payment_id = self._payment().data['id']
        response = self.client.post(f'/api/v1/supplier-payments/{payment_id}/status/', {'status': 'COMPLETED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['processed_by_username'], self.manager.username)
        self.assertEqual(response.data['payment_date'], str(self.today))

        response = self.client.patch(f'/api/v1/supplier-payments/{payment_id}/', {'notes': 'changed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(f'/api/v1/supplier-payments/{payment_id}/status/', {'status': 'FAILED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/v1/supplier-payments/{payment_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pending_payment_can_be_deleted(self):
        payment_id = self._payment().data['id']
        response = self.client.delete(f'/api/v1/supplier-payments/{payment_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SupplierPayment.objects.exists())

    def test_filter_by_supplier(self):
        self._payment()
        other = TestDataFactory.create_supplier()
        self._payment(supplier=other.id, purchase_order=None)
        response = self.client.get(f'/api/v1/supplier-payments/?supplier={other.id}')
        self.assertEqual(response.data['count'], 1)

    def test_payments_require_manager(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='STITCHER'))
        response = self.client.get('/api/v1/supplier-payments/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SupplierPerformanceTests(TestCase):

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier()
        self.today = timezone.localdate()

    def _order(self, order_status, expected_date=None, received_at=None):
        po = TestDataFactory.create_purchase_order(supplier=self.supplier, status=order_status)
        PurchaseOrder.objects.filter(pk=po.pk).update(expected_date=expected_date, received_at=received_at)
        return po

    def _pay(self, amount, payment_status, due_date):
        return SupplierPayment.objects.create(
            supplier=self.supplier, amount=Decimal(amount), payment_method='CASH',
            status=payment_status, due_date=due_date,
        )

    def test_performance_metrics(self):
        now = timezone.now()
        self._order('RECEIVED', expected_date=self.today + timedelta(days=1), received_at=now)
        self._order('RECEIVED', expected_date=self.today - timedelta(days=10), received_at=now)
        self._order('ORDERED')
        self._order('CANCELLED')
        self._pay('40.00', 'COMPLETED', self.today)
        self._pay('20.00', 'PENDING', self.today - timedelta(days=1))
        self._pay('5.00', 'FAILED', self.today)

        data = supplier_performance(self.supplier)
        self.assertEqual(data['total_orders'], 3)
        self.assertEqual(data['completed_orders'], 2)
        self.assertEqual(data['total_order_value'], Decimal('150.00'))
        self.assertEqual(data['average_order_value'], Decimal('50.00'))
        self.assertEqual(data['completion_rate'], Decimal('66.67'))
        self.assertEqual(data['on_time_delivery'], Decimal('50.00'))
        self.assertEqual(data['total_payments'], Decimal('40.00'))
        self.assertEqual(data['pending_payments'], Decimal('20.00'))
        self.assertEqual(data['outstanding_balance'], Decimal('110.00'))
        self.assertEqual(data['overdue_payments'], 1)

    def test_supplier_without_orders_reports_zero(self):
        data = supplier_performance(self.supplier)
        self.assertEqual(data['total_orders'], 0)
        self.assertEqual(data['average_order_value'], Decimal('0.00'))
        self.assertEqual(data['completion_rate'], Decimal('0.00'))
        self.assertEqual(data['on_time_delivery'], Decimal('0.00'))
        self.assertEqual(data['outstanding_balance'], Decimal('0.00'))

    def test_performance_endpoint(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))
        self._order('ORDERED')
        response = client.get(f'/api/v1/suppliers/{self.supplier.id}/performance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['supplier_name'], self.supplier.name)
        self.assertEqual(response.data['total_orders'], 1)

        response = client.get('/api/v1/suppliers/999999/performance/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
