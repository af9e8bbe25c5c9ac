"""
Test suite for Employees module
Tests: employee CRUD and permissions, bonuses, payroll tax bands, payroll generation,
bulk payroll, payslips and attendance
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import Setting
from backend.employees.models import Attendance, Bonus, Payroll
from backend.employees.payroll import (
    calculate_base_salary, generate_payroll, generate_bulk_payrolls, PayrollError,
)
from backend.employees.tax import annual_income_tax, annual_social_security, calculate_tax
from backend.employees.attendance import clock_in, clock_out, split_hours, AttendanceError


class EmployeeAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_employee(self):
        response = self.client.post('/api/v1/employees/', {
            'first_name': 'Ravi',
            'last_name': 'Kumar',
            'phone': '+971502223344',
            'hire_date': '2025-01-15',
            'role': 'CUTTER',
            'salary': '4500.00',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['employee_number'].startswith('EMP-'))

    def test_salary_must_be_positive(self):
        response = self.client.post('/api/v1/employees/', {
            'first_name': 'Zero', 'last_name': 'Pay', 'phone': '+971502223344',
            'hire_date': '2025-01-15', 'role': 'CUTTER', 'salary': '0',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_production_staff_cannot_list_employees(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='STITCHER'))
        response = self.client.get('/api/v1/employees/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_filter_by_role(self):
        TestDataFactory.create_employee(role='CUTTER')
        TestDataFactory.create_employee(role='PRESSER')
        response = self.client.get('/api/v1/employees/?role=PRESSER')
        self.assertEqual(response.data['count'], 1)


class TaxCalculationTests(TestCase):

    def test_income_tax_band_edges(self):
        self.assertEqual(annual_income_tax(Decimal('375000')), Decimal('0'))
        self.assertEqual(annual_income_tax(Decimal('375100')), Decimal('9.00'))
        self.assertEqual(annual_income_tax(Decimal('750000')), Decimal('33750.00'))
        self.assertEqual(annual_income_tax(Decimal('1500000')), Decimal('146250.00'))
        self.assertEqual(annual_income_tax(Decimal('2000000')), Decimal('236250.00'))

    def test_social_security_cap(self):
        self.assertEqual(annual_social_security(Decimal('100000')), Decimal('5000.00'))
        self.assertEqual(annual_social_security(Decimal('1000000')), Decimal('50000.00'))
        self.assertEqual(annual_social_security(Decimal('1200000')), Decimal('50000'))

    def test_monthly_pay_at_top_of_zero_band(self):
        result = calculate_tax(Decimal('31250.00'), 'MONTHLY')
        self.assertEqual(result['annual_income'], Decimal('375000.00'))
        self.assertEqual(result['total_tax'], Decimal('1562.50'))
        self.assertEqual([line['tax_type'] for line in result['breakdown']], ['SOCIAL_SECURITY'])

    def test_monthly_pay_in_nine_percent_band(self):
        result = calculate_tax(Decimal('62500.00'), 'MONTHLY')
        income_tax, social_security = result['breakdown']
        self.assertEqual(income_tax['amount'], Decimal('2812.50'))
        self.assertEqual(income_tax['rate'], Decimal('4.50'))
        self.assertEqual(social_security['amount'], Decimal('3125.00'))
        self.assertEqual(result['total_tax'], Decimal('5937.50'))
        self.assertEqual(result['effective_tax_rate'], Decimal('9.50'))

    def test_weekly_pay_in_top_band_with_capped_social_security(self):
        result = calculate_tax(Decimal('50000.00'), 'WEEKLY')
        income_tax, social_security = result['breakdown']
        self.assertEqual(income_tax['amount'], Decimal('6620.19'))
        self.assertEqual(social_security['amount'], Decimal('961.54'))
        self.assertIn('capped', social_security['calculation'])

    def test_zero_gross(self):
        result = calculate_tax(Decimal('0.00'), 'MONTHLY')
        self.assertEqual(result['breakdown'], [])
        self.assertEqual(result['total_tax'], Decimal('0.00'))
        self.assertEqual(result['effective_tax_rate'], Decimal('0.00'))


class PayrollCalculationTests(TestCase):

    def setUp(self):
        self.employee = TestDataFactory.create_employee(salary=Decimal('4000.00'))

    def test_base_salary_by_period_type(self):
        self.assertEqual(calculate_base_salary(Decimal('4000.00'), 'MONTHLY'), Decimal('4000.00'))
        self.assertEqual(calculate_base_salary(Decimal('4000.00'), 'BI_WEEKLY'), Decimal('2000.00'))
        self.assertEqual(calculate_base_salary(Decimal('4000.00'), 'WEEKLY'), Decimal('1000.00'))

    def test_generate_includes_approved_bonuses_only(self):
        Bonus.objects.create(employee=self.employee, period='2026-10', amount=Decimal('300.00'), status='APPROVED')
        Bonus.objects.create(employee=self.employee, period='2026-10', amount=Decimal('999.00'), status='PENDING')
        payroll = generate_payroll(self.employee, '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31))
        self.assertEqual(payroll.status, 'DRAFT')
        self.assertEqual(payroll.bonus_pay, Decimal('300.00'))
        self.assertEqual(payroll.total_earnings, Decimal('4300.00'))
        # 5% social security only; 51,600 a year is inside the 0% income tax band
        self.assertEqual(payroll.tax_deductions, Decimal('215.00'))
        self.assertEqual(payroll.net_pay, Decimal('4085.00'))

    def test_extra_tax_rate_from_setting(self):
        Setting.objects.create(key='payroll_tax_rate', value='10')
        payroll = generate_payroll(self.employee, '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31))
        self.assertEqual(payroll.tax_deductions, Decimal('600.00'))
        self.assertEqual(payroll.net_pay, Decimal('3400.00'))
        tax_types = [line['tax_type'] for line in payroll.calculation_details['tax']['breakdown']]
        self.assertEqual(tax_types, ['SOCIAL_SECURITY', 'ADDITIONAL'])

    def test_invalid_tax_setting_treated_as_zero(self):
        Setting.objects.create(key='payroll_tax_rate', value='ten')
        payroll = generate_payroll(self.employee, '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31))
        self.assertEqual(payroll.tax_deductions, Decimal('200.00'))

    def test_duplicate_period_rejected(self):
        generate_payroll(self.employee, '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31))
        with self.assertRaises(PayrollError):
            generate_payroll(self.employee, '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31))

    def test_bulk_continues_after_failure(self):
        other = TestDataFactory.create_employee()
        generated, errors = generate_bulk_payrolls(
            [self.employee.id, 999999, other.id], '2026-10', 'MONTHLY', date(2026, 10, 1), date(2026, 10, 31),
        )
        self.assertEqual(len(generated), 2)
        self.assertEqual(errors, [{'employee_id': 999999, 'error': 'Employee not found'}])


class PayrollAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.employee = TestDataFactory.create_employee(salary=Decimal('3000.00'))

    def _generate(self):
        return self.client.post('/api/v1/payrolls/generate/', {
            'employee': self.employee.id,
            'period': '2026-09',
            'period_type': 'MONTHLY',
            'start_date': '2026-09-01',
            'end_date': '2026-09-30',
            'overtime_pay': '150.00',
        })

    def test_generate_endpoint(self):
        response = self._generate()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total_earnings']), Decimal('3150.00'))

    def test_generate_requires_admin(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))
        response = self._generate()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_end_before_start_rejected(self):
        response = self.client.post('/api/v1/payrolls/generate/', {
            'employee': self.employee.id, 'period': '2026-09',
            'start_date': '2026-09-30', 'end_date': '2026-09-01',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_editing_overtime_recomputes_tax(self):
        payroll_id = self._generate().data['id']
        self.assertEqual(Payroll.objects.get(pk=payroll_id).tax_deductions, Decimal('157.50'))
        response = self.client.patch(f'/api/v1/payrolls/{payroll_id}/', {'overtime_pay': '350.00'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['tax_deductions']), Decimal('167.50'))
        self.assertEqual(Decimal(response.data['net_pay']), Decimal('3182.50'))
        self.assertEqual(response.data['calculation_details']['tax']['gross'], '3350.00')

    def test_paid_payroll_cannot_be_modified(self):
        payroll_id = self._generate().data['id']
        Payroll.objects.filter(pk=payroll_id).update(status='PAID')
        response = self.client.patch(f'/api/v1/payrolls/{payroll_id}/', {'other_deductions': '10.00'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payslip_html_and_pdf(self):
        payroll_id = self._generate().data['id']
        response = self.client.get(f'/api/v1/payrolls/{payroll_id}/payslip/html/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(self.employee.employee_number, response.content.decode())

        response = self.client.get(f'/api/v1/payrolls/{payroll_id}/payslip/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))


def _at(day, hour, minute=0):
    return timezone.make_aware(datetime(2026, 10, day, hour, minute))


class AttendanceServiceTests(TestCase):

    def setUp(self):
        self.employee = TestDataFactory.create_employee()

    def test_clock_out_splits_regular_and_overtime(self):
        clock_in(self.employee, now=_at(19, 8))
        attendance = clock_out(self.employee, now=_at(19, 18, 30))
        self.assertEqual(attendance.regular_hours, Decimal('8.00'))
        self.assertEqual(attendance.overtime_hours, Decimal('2.50'))
        self.assertFalse(attendance.is_open)

    def test_double_clock_in_rejected(self):
        clock_in(self.employee, now=_at(19, 8))
        with self.assertRaises(AttendanceError):
            clock_in(self.employee, now=_at(19, 9))
        self.assertEqual(Attendance.objects.count(), 1)

    def test_one_record_per_day(self):
        clock_in(self.employee, now=_at(19, 8))
        clock_out(self.employee, now=_at(19, 12))
        with self.assertRaises(AttendanceError):
            clock_in(self.employee, now=_at(19, 13))

    def test_clock_out_without_clock_in(self):
        with self.assertRaises(AttendanceError):
            clock_out(self.employee, now=_at(19, 17))

    def test_night_shift_closes_previous_day(self):
        clock_in(self.employee, now=_at(18, 22))
        attendance = clock_out(self.employee, now=_at(19, 6))
        self.assertEqual(attendance.attendance_date, date(2026, 10, 18))
        self.assertEqual(attendance.regular_hours, Decimal('8.00'))
        self.assertEqual(attendance.overtime_hours, Decimal('0.00'))

    def test_late_after_work_start_setting(self):
        Setting.objects.create(key='work_start_time', value='09:00')
        self.assertEqual(clock_in(self.employee, now=_at(19, 9, 20)).status, 'LATE')
        punctual = TestDataFactory.create_employee()
        self.assertEqual(clock_in(punctual, now=_at(19, 8, 55)).status, 'PRESENT')

    def test_standard_hours_setting(self):
        Setting.objects.create(key='standard_work_hours', value='6')
        self.assertEqual(split_hours(_at(19, 8), _at(19, 15)), (Decimal('6'), Decimal('1.00')))


class AttendanceAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='STITCHER')
        self.employee = TestDataFactory.create_employee(user=self.user)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_employee_clocks_self_in_and_out(self):
        response = self.client.post(f'/api/v1/employees/{self.employee.id}/clock-in/', {'location': 'Workshop'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['location_in'], 'Workshop')
        self.assertEqual(response.data['ip_address'], '127.0.0.1')

        response = self.client.post(f'/api/v1/employees/{self.employee.id}/clock-in/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(f'/api/v1/employees/{self.employee.id}/clock-status/')
        self.assertTrue(response.data['is_clocked_in'])
        self.assertFalse(response.data['can_clock_in'])

        response = self.client.post(f'/api/v1/employees/{self.employee.id}/clock-out/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['clock_out_time'])

    def test_cannot_clock_for_someone_else(self):
        colleague = TestDataFactory.create_employee()
        response = self.client.post(f'/api/v1/employees/{colleague.id}/clock-in/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Attendance.objects.exists())

    def test_manager_lists_attendance(self):
        clock_in(self.employee, now=_at(18, 8))
        clock_out(self.employee, now=_at(18, 16))
        clock_in(self.employee, now=_at(19, 8))
        other = TestDataFactory.create_employee()
        clock_in(other, now=_at(19, 8))

        self.client.authenticate_user(TestDataFactory.create_user(role='MANAGER'))
        response = self.client.get(f'/api/v1/employees/{self.employee.id}/attendance/')
        self.assertEqual(response.data['count'], 2)
        response = self.client.get('/api/v1/attendance/?date_from=2026-10-19')
        self.assertEqual(response.data['count'], 2)

    def test_attendance_overview_requires_manager(self):
        response = self.client.get('/api/v1/attendance/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
