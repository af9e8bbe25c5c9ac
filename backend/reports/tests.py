"""
Test suite for Reports module
Tests: material cost analysis, category and trend breakdowns, top materials, waste impact and dashboard summary
"""
from datetime import date, timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import MaterialUsage, Waste
from backend.reports import material_costs


def _usage(order, item, quantity, unit_price, usage_date):
    quantity, unit_price = Decimal(quantity), Decimal(unit_price)
    return MaterialUsage.objects.create(
        order=order,
        inventory_item=item,
        quantity=quantity,
        unit_price=unit_price,
        total_cost=(quantity * unit_price).quantize(Decimal('0.01')),
        usage_date=usage_date,
    )


class MaterialCostTests(TestCase):

    def setUp(self):
        self.today = timezone.localdate()
        self.thread = TestDataFactory.create_inventory_item(category='THREADS')
        self.buttons = TestDataFactory.create_inventory_item(category='BUTTONS')
        self.order = TestDataFactory.create_order(total_amount=Decimal('200.00'))
        self.free_order = TestDataFactory.create_order(total_amount=Decimal('0.00'), deposit_amount=Decimal('0.00'))
        _usage(self.order, self.thread, '2.5', '10.00', self.today)
        _usage(self.order, self.buttons, '4', '5.00', self.today)
        _usage(self.free_order, self.thread, '1', '10.00', self.today)

    def test_order_material_cost(self):
        data = material_costs.calculate_order_material_cost(self.order.id)
        self.assertEqual(data['total_cost'], Decimal('45.00'))
        self.assertEqual(data['item_count'], 2)
        self.assertEqual(data['cost_breakdown'][0]['item_sku'], self.thread.sku)

    def test_analysis_percentages(self):
        data = material_costs.material_cost_analysis(self.today - timedelta(days=1), self.today)
        first, second = data['orders']
        self.assertEqual(first['order_id'], self.order.id)
        self.assertEqual(first['material_cost'], Decimal('45.00'))
        self.assertEqual(first['material_cost_percentage'], Decimal('22.50'))
        # a zero order total reports 0%, not a division error
        self.assertEqual(second['material_cost_percentage'], Decimal('0.00'))
        self.assertEqual(data['summary'], {
            'total_orders': 2,
            'grand_total': Decimal('55.00'),
            'average_material_cost': Decimal('27.50'),
            'average_material_cost_percentage': Decimal('11.25'),
        })

    def test_analysis_empty_window(self):
        data = material_costs.material_cost_analysis(date(2020, 1, 1), date(2020, 1, 31))
        self.assertEqual(data['orders'], [])
        self.assertEqual(data['summary']['average_material_cost'], Decimal('0.00'))

    def test_by_category(self):
        rows = material_costs.material_cost_by_category()
        self.assertEqual([row['category'] for row in rows], ['THREADS', 'BUTTONS'])
        self.assertEqual(rows[0]['total_cost'], Decimal('35.00'))
        self.assertEqual(rows[0]['average_cost'], Decimal('17.50'))

    def test_top_materials(self):
        rows = material_costs.top_materials_by_cost(limit=1)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['inventory_item_id'], self.thread.id)
        self.assertEqual(rows[0]['average_price'], Decimal('10.00'))

    def test_monthly_trends(self):
        MaterialUsage.objects.all().delete()
        _usage(self.order, self.thread, '1', '10.00', date(2026, 9, 10))
        _usage(self.order, self.buttons, '2', '5.00', date(2026, 10, 5))
        _usage(self.order, self.thread, '3', '10.00', date(2026, 10, 6))

        trends = material_costs.material_cost_trends('monthly', span=2, today=date(2026, 10, 19))
        self.assertEqual([t['period'] for t in trends], ['2026-09', '2026-10'])
        october = trends[1]
        self.assertEqual(october['total_cost'], Decimal('40.00'))
        self.assertEqual(october['usage_count'], 2)
        self.assertEqual(october['category_breakdown'], {'BUTTONS': Decimal('10.00'), 'THREADS': Decimal('30.00')})

    def test_unknown_trend_period(self):
        with self.assertRaises(ValueError):
            material_costs.material_cost_trends('yearly')

    def test_waste_impact(self):
        Waste.objects.create(
            inventory_item=self.thread, quantity=Decimal('2'), unit_cost=Decimal('3.00'),
            total_cost=Decimal('6.00'), reason='CUTTING_LOSS', waste_date=self.today,
        )
        Waste.objects.create(
            inventory_item=self.buttons, quantity=Decimal('1'), unit_cost=Decimal('4.00'),
            total_cost=Decimal('4.00'), reason='QUALITY_REJECT', waste_date=self.today,
        )
        data = material_costs.waste_cost_impact(self.today, self.today)
        self.assertEqual(data['total_waste_cost'], Decimal('10.00'))
        self.assertEqual(data['total_waste_items'], 2)
        self.assertEqual(data['average_waste_cost'], Decimal('5.00'))
        self.assertEqual(data['waste_by_reason'][0]['reason'], 'CUTTING_LOSS')


class ReportAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        order = TestDataFactory.create_order()
        _usage(order, TestDataFactory.create_inventory_item(), '2', '10.00', timezone.localdate())
        self.order = order

    def test_material_cost_endpoint(self):
        response = self.client.get('/api/v1/reports/material-costs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_orders'], 1)
        self.assertIn('period', response.data)

    def test_order_material_cost_endpoint(self):
        response = self.client.get(f'/api/v1/orders/{self.order.id}/material-cost/')
        self.assertEqual(response.data['total_cost'], Decimal('20.00'))

    def test_bad_date_rejected(self):
        response = self.client.get('/api/v1/reports/material-costs/?date_from=2026-13-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_trends_invalid_period(self):
        response = self.client.get('/api/v1/reports/material-costs/trends/?period=hourly')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/reports/material-costs/trends/?period=daily&span=7')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['trends']), 1)

    def test_other_report_endpoints(self):
        for url in (
            '/api/v1/reports/material-costs/by-category/',
            '/api/v1/reports/material-costs/top-materials/?limit=5',
            '/api/v1/reports/waste-impact/',
        ):
            response = self.client.get(url)
            self.assertEqual(response.status_code, status.HTTP_200_OK, url)

    def test_reports_are_manager_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='CUTTER'))
        response = self.client.get('/api/v1/reports/material-costs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class DashboardSummaryTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='STITCHER'))

    def test_summary_counts(self):
        customer = TestDataFactory.create_customer()
        received = TestDataFactory.create_order(customer=customer)
        TestDataFactory.create_order(customer=customer, status='CUTTING')
        TestDataFactory.create_order(customer=customer, status='DELIVERED')
        TestDataFactory.create_order(customer=customer, status='CANCELLED')

        now = timezone.now()
        TestDataFactory.create_task(order=received, status='OVERDUE')
        TestDataFactory.create_task(order=received, status='PENDING', deadline=now - timedelta(hours=3))
        TestDataFactory.create_task(order=received, status='PENDING', deadline=now + timedelta(days=2))

        TestDataFactory.create_fabric(stock_quantity=Decimal('1.00'))
        TestDataFactory.create_inventory_item(current_stock=Decimal('3'))
        TestDataFactory.create_inventory_item(current_stock=Decimal('300'))

        response = self.client.get('/api/v1/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['open_orders'], 2)
        self.assertEqual(data['orders_by_status']['DELIVERED'], 1)
        self.assertEqual(data['active_customers'], 1)
        self.assertEqual(data['overdue_tasks'], 2)
        self.assertEqual(data['low_stock_fabrics'], 1)
        self.assertEqual(data['low_stock_items'], 1)
        self.assertEqual(data['pending_messages'], 0)
