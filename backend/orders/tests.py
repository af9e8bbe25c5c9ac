"""
Comprehensive test suite for Orders module
Tests: order intake, status workflow, measurement versioning, tasks, lead times and notifications
"""
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, SHIRT_MEASUREMENTS
from backend.core.models import Event
from backend.communications.models import MessageLog
from backend.orders.models import Measurement, Task
from backend.orders.constants import get_lead_time_days
from backend.orders.services import change_order_status, create_measurement, mark_overdue_tasks
from backend.orders.workflow import InvalidStatusTransition, can_transition, stage_progress


class WorkflowTests(TestCase):
    """Stage transition table and progress"""

    def test_forward_one_stage_only(self):
        self.assertTrue(can_transition('RECEIVED', 'CUTTING'))
        self.assertFalse(can_transition('RECEIVED', 'STITCHING'))
        self.assertFalse(can_transition('CUTTING', 'RECEIVED'))

    def test_cancel_from_any_open_stage(self):
        for stage in ('RECEIVED', 'CUTTING', 'STITCHING', 'QUALITY_CHECK', 'PRESSING', 'READY'):
            self.assertTrue(can_transition(stage, 'CANCELLED'))

    def test_terminal_stages(self):
        self.assertFalse(can_transition('DELIVERED', 'CANCELLED'))
        self.assertFalse(can_transition('CANCELLED', 'RECEIVED'))

    def test_progress(self):
        self.assertEqual(stage_progress('RECEIVED'), 0)
        self.assertEqual(stage_progress('STITCHING'), 33)
        self.assertEqual(stage_progress('DELIVERED'), 100)
        self.assertEqual(stage_progress('CANCELLED'), 0)

    def test_lead_times(self):
        self.assertEqual(get_lead_time_days('SHIRT'), 5)
        self.assertEqual(get_lead_time_days('SHIRT', 'BESPOKE_SUIT'), 14)
        self.assertEqual(get_lead_time_days('SUIT', 'BESPOKE_SUIT', is_urgent=True), 2)
        self.assertEqual(get_lead_time_days(), 7)


class OrderAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer()

    def _create(self, **overrides):
        payload = {
            'customer': self.customer.id,
            'garment_type': 'SHIRT',
            'total_amount': '300.00',
            'deposit_amount': '100.00',
        }
        payload.update(overrides)
        return self.client.post('/api/v1/orders/', payload, format='json')

    def test_create_order_defaults(self):
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['order_number'].startswith('ORD-'))
        self.assertEqual(response.data['status'], 'RECEIVED')
        self.assertEqual(Decimal(response.data['balance_amount']), Decimal('200.00'))
        expected = timezone.localdate() + timedelta(days=5)
        self.assertEqual(response.data['delivery_date'], expected.isoformat())

    def test_urgent_order_gets_urgent_priority(self):
        response = self._create(is_urgent=True)
        self.assertEqual(response.data['priority'], 'URGENT')
        expected = timezone.localdate() + timedelta(days=2)
        self.assertEqual(response.data['delivery_date'], expected.isoformat())

    def test_deposit_cannot_exceed_total(self):
        response = self._create(deposit_amount='400.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('deposit_amount', response.data)

    def test_past_delivery_date_rejected(self):
        response = self._create(delivery_date=(timezone.localdate() - timedelta(days=1)).isoformat())
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_new_order_must_start_received(self):
        response = self._create(status='CUTTING')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_customer_rejected(self):
        self.customer.is_active = False
        self.customer.save()
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_measurement_of_other_customer_rejected(self):
        other = TestDataFactory.create_measurement()
        response = self._create(measurement=other.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('measurement', response.data)

    def test_patch_received_to_cancelled(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.patch(f'/api/v1/orders/{order.id}/', {'status': 'CANCELLED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(f'/api/v1/orders/{order.id}/')
        self.assertEqual(response.data['status'], 'CANCELLED')
        self.assertTrue(Event.objects.filter(type='order.status_changed', entity_id=str(order.id)).exists())

    def test_patch_skipping_stage_rejected(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.patch(f'/api/v1/orders/{order.id}/', {'status': 'READY'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['current_status'], 'RECEIVED')
        self.assertEqual(response.data['allowed'], ['CUTTING', 'CANCELLED'])
        order.refresh_from_db()
        self.assertEqual(order.status, 'RECEIVED')

    def test_patch_amounts_recomputes_balance(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.patch(f'/api/v1/orders/{order.id}/', {'deposit_amount': '150.00'}, format='json')
        self.assertEqual(Decimal(response.data['balance_amount']), Decimal('50.00'))

    def test_delete_cancels(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.delete(f'/api/v1/orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        order.refresh_from_db()
        self.assertEqual(order.status, 'CANCELLED')

    def test_delete_delivered_order_rejected(self):
        order = TestDataFactory.create_order(customer=self.customer, status='DELIVERED')
        response = self.client.delete(f'/api/v1/orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_with_list_body_is_rejected(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.patch(f'/api/v1/orders/{order.id}/', [{'status': 'CUTTING'}], format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        order.refresh_from_db()
        self.assertEqual(order.status, 'RECEIVED')

    def test_status_endpoint_and_history(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.post(f'/api/v1/orders/{order.id}/status/', {'status': 'CUTTING', 'notes': 'Fabric ready'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['progress'], 17)
        self.assertNotIn('notification', response.data)

        response = self.client.get(f'/api/v1/orders/{order.id}/history/')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['data'], {'from': 'RECEIVED', 'to': 'CUTTING', 'notes': 'Fabric ready'})

    def test_notification_skipped_without_template(self):
        order = TestDataFactory.create_order(customer=self.customer)
        response = self.client.post(
            f'/api/v1/orders/{order.id}/status/', {'status': 'CUTTING', 'notify_customer': True}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notification']['status'], 'SKIPPED')

    @patch('backend.communications.providers.requests.post')
    def test_notification_sent_through_provider(self, mock_post):
        mock_post.return_value.status_code = 201
        mock_post.return_value.json.return_value = {'sid': 'SM123'}
        TestDataFactory.create_template(communication_type='SMS')
        TestDataFactory.create_provider(provider='TWILIO', communication_type='SMS')
        order = TestDataFactory.create_order(customer=self.customer)

        response = self.client.post(
            f'/api/v1/orders/{order.id}/status/', {'status': 'CUTTING', 'notify_customer': True}, format='json',
        )
        self.assertEqual(response.data['notification']['status'], 'SENT')
        log = MessageLog.objects.get()
        self.assertIn(order.order_number, log.content)
        self.assertIn('CUTTING', log.content)

    def test_filter_by_multiple_statuses(self):
        TestDataFactory.create_order(customer=self.customer, status='RECEIVED')
        TestDataFactory.create_order(customer=self.customer, status='CUTTING')
        TestDataFactory.create_order(customer=self.customer, status='READY')
        response = self.client.get('/api/v1/orders/?status=RECEIVED&status=CUTTING')
        self.assertEqual(response.data['count'], 2)

    def test_lead_time_endpoint(self):
        response = self.client.get('/api/v1/orders/lead-time/?garment_type=SUIT&order_date=2026-11-01')
        self.assertEqual(response.data['lead_time_days'], 10)
        self.assertEqual(str(response.data['delivery_date']), '2026-11-11')

    def test_change_order_status_service_raises(self):
        order = TestDataFactory.create_order(customer=self.customer, status='CANCELLED')
        with self.assertRaises(InvalidStatusTransition):
            change_order_status(order, 'CUTTING')


class MeasurementTests(TestCase):
    """Versioning keeps at most one latest row per customer and garment type"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='CUTTER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer()

    def _post(self, measurements=None, garment_type='SHIRT'):
        return self.client.post('/api/v1/measurements/', {
            'customer': self.customer.id,
            'garment_type': garment_type,
            'measurements': measurements if measurements is not None else dict(SHIRT_MEASUREMENTS),
        }, format='json')

    def _latest_count(self):
        return Measurement.objects.filter(customer=self.customer, garment_type='SHIRT', is_latest=True).count()

    def test_new_versions_replace_latest(self):
        first = self._post()
        second = self._post()
        self.assertEqual(first.data['version'], 1)
        self.assertEqual(second.data['version'], 2)
        self.assertEqual(self._latest_count(), 1)
        self.assertTrue(Measurement.objects.get(pk=second.data['id']).is_latest)

    def test_versions_are_per_garment_type(self):
        self._post()
        trouser = {'waist': 84, 'hip': 100, 'inseam': 80, 'outseam': 104, 'thigh': 60, 'knee': 42, 'cuff': 38, 'rise': 28}
        response = self._post(trouser, garment_type='TROUSER')
        self.assertEqual(response.data['version'], 1)
        self.assertTrue(response.data['is_latest'])
        self.assertEqual(self._latest_count(), 1)

    def test_missing_required_field(self):
        data = dict(SHIRT_MEASUREMENTS)
        data.pop('neck')
        response = self._post(data)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('neck', response.data['measurements'])

    def test_unknown_field_and_bounds(self):
        data = dict(SHIRT_MEASUREMENTS, chest=600, tail=12)
        response = self._post(data)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('chest', response.data['measurements'])
        self.assertIn('tail', response.data['measurements'])

    def test_delete_retires_only_that_row(self):
        first = create_measurement({'customer': self.customer, 'garment_type': 'SHIRT', 'measurements': SHIRT_MEASUREMENTS})
        second = create_measurement({'customer': self.customer, 'garment_type': 'SHIRT', 'measurements': SHIRT_MEASUREMENTS})
        response = self.client.delete(f'/api/v1/measurements/{second.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        second.refresh_from_db()
        first.refresh_from_db()
        self.assertFalse(second.is_latest)
        self.assertFalse(first.is_latest)
        self.assertEqual(Measurement.objects.filter(customer=self.customer).count(), 2)

    def test_mark_older_version_latest(self):
        first = create_measurement({'customer': self.customer, 'garment_type': 'SHIRT', 'measurements': SHIRT_MEASUREMENTS})
        create_measurement({'customer': self.customer, 'garment_type': 'SHIRT', 'measurements': SHIRT_MEASUREMENTS})
        response = self.client.patch(f'/api/v1/measurements/{first.id}/', {'is_latest': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._latest_count(), 1)
        first.refresh_from_db()
        self.assertTrue(first.is_latest)

    def test_customer_is_immutable(self):
        measurement = create_measurement({'customer': self.customer, 'garment_type': 'SHIRT', 'measurements': SHIRT_MEASUREMENTS})
        other = TestDataFactory.create_customer()
        response = self.client.patch(f'/api/v1/measurements/{measurement.id}/', {'customer': other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_latest_filter(self):
        self._post()
        self._post()
        response = self.client.get(f'/api/v1/measurements/?customer={self.customer.id}&latest=true')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['version'], 2)

    def test_templates_endpoint(self):
        response = self.client.get('/api/v1/measurements/templates/?garment_type=SHIRT')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('SHIRT', response.data)
        response = self.client.get('/api/v1/measurements/templates/?garment_type=CAPE')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TaskTests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.order = TestDataFactory.create_order()
        self.employee = TestDataFactory.create_employee(role='CUTTER')

    def test_assign_task(self):
        task = TestDataFactory.create_task(order=self.order)
        response = self.client.post(f'/api/v1/tasks/{task.id}/assign/', {'employee': self.employee.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assigned_employee'], self.employee.id)
        self.assertIsNotNone(response.data['assigned_at'])

    def test_assign_requires_manager(self):
        task = TestDataFactory.create_task(order=self.order)
        self.client.authenticate_user(TestDataFactory.create_user(role='STITCHER'))
        response = self.client.post(f'/api/v1/tasks/{task.id}/assign/', {'employee': self.employee.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_timestamps(self):
        task = TestDataFactory.create_task(order=self.order)
        response = self.client.post(f'/api/v1/tasks/{task.id}/status/', {'status': 'IN_PROGRESS'}, format='json')
        self.assertIsNotNone(response.data['started_at'])
        response = self.client.post(
            f'/api/v1/tasks/{task.id}/status/', {'status': 'COMPLETED', 'actual_hours': '3.5'}, format='json',
        )
        self.assertIsNotNone(response.data['completed_at'])
        self.assertEqual(Decimal(response.data['actual_hours']), Decimal('3.50'))

    def test_task_status_does_not_move_order(self):
        task = TestDataFactory.create_task(order=self.order, stage='CUTTING')
        self.client.post(f'/api/v1/tasks/{task.id}/status/', {'status': 'COMPLETED'}, format='json')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'RECEIVED')

    def test_mark_overdue(self):
        past = timezone.now() - timedelta(hours=1)
        overdue = TestDataFactory.create_task(order=self.order, deadline=past)
        done = TestDataFactory.create_task(order=self.order, deadline=past, status='COMPLETED')
        future = TestDataFactory.create_task(order=self.order, deadline=timezone.now() + timedelta(days=1))
        self.assertEqual(mark_overdue_tasks(), 1)
        self.assertEqual(Task.objects.get(pk=overdue.pk).status, 'OVERDUE')
        self.assertEqual(Task.objects.get(pk=done.pk).status, 'COMPLETED')
        self.assertEqual(Task.objects.get(pk=future.pk).status, 'PENDING')

    def test_workload(self):
        TestDataFactory.create_task(order=self.order, employee=self.employee)
        TestDataFactory.create_task(order=self.order, employee=self.employee, status='COMPLETED')
        response = self.client.get('/api/v1/tasks/workload/')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['total'], 2)
        self.assertEqual(response.data[0]['open'], 1)
