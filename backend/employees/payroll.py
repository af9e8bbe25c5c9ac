"""
Payroll generation.

Base salary is derived from the employee's monthly salary and the period
type. Approved bonuses for the same period are added. Income tax and social
security come from ``tax.calculate_tax``; the optional ``payroll_tax_rate``
setting adds a flat percent of total earnings on top.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from django.db import transaction

from backend.core.utils import get_setting
from .models import Employee, Bonus, Payroll
from .tax import calculate_tax, serialize_tax

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')

PERIOD_DIVISORS = {
    'MONTHLY': Decimal('1'),
    'BI_WEEKLY': Decimal('2'),
    'WEEKLY': Decimal('4'),
}


class PayrollError(Exception):
    pass


def _money(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def calculate_base_salary(monthly_salary, period_type):
    divisor = PERIOD_DIVISORS.get(period_type, Decimal('1'))
    return _money(Decimal(monthly_salary) / divisor)


def get_extra_tax_rate():
    raw = get_setting('payroll_tax_rate', '0')
    try:
        rate = Decimal(str(raw))
    except (InvalidOperation, TypeError):
        logger.warning(f"Invalid payroll_tax_rate setting {raw!r}, using 0")
        return Decimal('0')
    return max(rate, Decimal('0'))


def generate_payroll(employee, period, period_type, start_date, end_date,
                     overtime_pay=Decimal('0.00'), commission_pay=Decimal('0.00'),
                     other_deductions=Decimal('0.00'), user=None):
    """Create a DRAFT payroll for one employee and period"""
    if period_type not in PERIOD_DIVISORS:
        raise PayrollError(f"Unsupported period type: {period_type}")
    if start_date > end_date:
        raise PayrollError('Start date must be before end date')
    if Payroll.objects.filter(employee=employee, period=period, period_type=period_type).exists():
        raise PayrollError(f"Payroll already exists for {employee.employee_number} in {period}")

    base_salary = calculate_base_salary(employee.salary, period_type)

    bonuses = list(Bonus.objects.filter(
        employee=employee,
        period=period,
        period_type=period_type,
        status='APPROVED',
    ))
    bonus_pay = _money(sum((b.amount for b in bonuses), Decimal('0.00')))

    overtime_pay = _money(overtime_pay or 0)
    commission_pay = _money(commission_pay or 0)
    total_earnings = base_salary + overtime_pay + commission_pay + bonus_pay

    tax_rate = get_extra_tax_rate()
    tax = calculate_tax(total_earnings, period_type, extra_rate_percent=tax_rate)

    with transaction.atomic():
        payroll = Payroll(
            employee=employee,
            period=period,
            period_type=period_type,
            start_date=start_date,
            end_date=end_date,
            base_salary=base_salary,
            overtime_pay=overtime_pay,
            commission_pay=commission_pay,
            bonus_pay=bonus_pay,
            tax_deductions=tax['total_tax'],
            other_deductions=_money(other_deductions or 0),
            status='DRAFT',
            created_by=user,
            calculation_details={
                'monthly_salary': str(employee.salary),
                'period_divisor': str(PERIOD_DIVISORS[period_type]),
                'tax': serialize_tax(tax),
                'bonuses': [
                    {'id': b.id, 'type': b.bonus_type, 'amount': str(b.amount)}
                    for b in bonuses
                ],
            },
        )
        payroll.recalculate_totals()
        payroll.save()

    logger.info(f"Generated payroll {payroll.id} for {employee.employee_number} ({period} {period_type})")
    return payroll


def generate_bulk_payrolls(employee_ids, period, period_type, start_date, end_date, user=None):
    """
    Generate payrolls for several employees. A failure for one employee is
    logged and reported, and the remaining employees are still processed.
    """
    generated = []
    errors = []
    for employee_id in employee_ids:
        try:
            employee = Employee.objects.get(pk=employee_id, is_active=True)
            generated.append(generate_payroll(employee, period, period_type, start_date, end_date, user=user))
        except (Employee.DoesNotExist, PayrollError) as e:
            message = 'Employee not found' if isinstance(e, Employee.DoesNotExist) else str(e)
            logger.error(f"Error generating payroll for employee {employee_id}: {message}")
            errors.append({'employee_id': employee_id, 'error': message})
    return generated, errors
