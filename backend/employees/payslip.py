"""Payslip rendering: a reportlab PDF and an HTML page with the same layout"""
import io
from decimal import Decimal

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from backend.core.utils import get_setting


def _company():
    return {
        'name': get_setting('company_name', settings.COMPANY_NAME),
        'address': get_setting('company_address', settings.COMPANY_ADDRESS),
        'currency': settings.PAYROLL_CURRENCY,
    }


def _fmt(currency, amount):
    return f"{currency} {amount:,.2f}"


TAX_LABELS = {
    'INCOME_TAX': 'Income Tax',
    'SOCIAL_SECURITY': 'Social Security',
    'ADDITIONAL': 'Additional Tax',
}


def _tax_lines(payroll, currency):
    breakdown = (payroll.calculation_details or {}).get('tax', {}).get('breakdown')
    if not breakdown:
        return [('Tax', _fmt(currency, payroll.tax_deductions))]
    return [
        (TAX_LABELS.get(line['tax_type'], line['tax_type']), _fmt(currency, Decimal(line['amount'])))
        for line in breakdown
    ]


def build_payslip_context(payroll):
    company = _company()
    employee = payroll.employee
    currency = company['currency']
    pay_date = payroll.pay_date or payroll.end_date
    return {
        'company': company,
        'employee_name': employee.full_name,
        'employee_number': employee.employee_number,
        'period': payroll.period,
        'period_type': payroll.get_period_type_display(),
        'pay_date': pay_date.strftime('%d %b %Y'),
        'earnings': [
            ('Base Salary', _fmt(currency, payroll.base_salary)),
            ('Overtime Pay', _fmt(currency, payroll.overtime_pay)),
            ('Commission', _fmt(currency, payroll.commission_pay)),
            ('Bonus', _fmt(currency, payroll.bonus_pay)),
        ],
        'total_earnings': _fmt(currency, payroll.total_earnings),
        'deductions': [
            *_tax_lines(payroll, currency),
            ('Other Deductions', _fmt(currency, payroll.other_deductions)),
        ],
        'total_deductions': _fmt(currency, payroll.total_deductions),
        'net_pay': _fmt(currency, payroll.net_pay),
        'generated_on': timezone.now().strftime('%d %b %Y %H:%M'),
    }


def render_payslip_html(payroll):
    return render_to_string('employees/payslip.html', build_payslip_context(payroll))


def render_payslip_pdf(payroll):
    """Return the payslip as PDF bytes"""
    ctx = build_payslip_context(payroll)
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    w, h = A4
    left, right = 50, w - 50

    # Company header
    c.setFont("Helvetica-Bold", 16)
    c.drawString(left, h - 50, ctx['company']['name'])
    c.setFont("Helvetica", 10)
    c.drawString(left, h - 66, ctx['company']['address'])
    c.setFont("Helvetica-Bold", 14)
    c.drawRightString(right, h - 50, "PAYSLIP")
    c.line(left, h - 78, right, h - 78)

    # Employee block
    y = h - 100
    c.setFont("Helvetica", 10)
    for label, value in (
        ('Employee', ctx['employee_name']),
        ('Employee No.', ctx['employee_number']),
        ('Period', f"{ctx['period']} ({ctx['period_type']})"),
        ('Pay Date', ctx['pay_date']),
    ):
        c.drawString(left, y, f"{label}:")
        c.drawString(left + 100, y, value)
        y -= 16

    def section(title, rows, total_label, total_value, y):
        y -= 14
        c.setFont("Helvetica-Bold", 12)
        c.drawString(left, y, title)
        y -= 6
        c.line(left, y, right, y)
        y -= 16
        c.setFont("Helvetica", 10)
        for label, value in rows:
            c.drawString(left, y, label)
            c.drawRightString(right, y, value)
            y -= 16
        c.setFont("Helvetica-Bold", 10)
        c.drawString(left, y, total_label)
        c.drawRightString(right, y, total_value)
        return y - 10

    y = section('Earnings', ctx['earnings'], 'Total Earnings', ctx['total_earnings'], y)
    y = section('Deductions', ctx['deductions'], 'Total Deductions', ctx['total_deductions'], y)

    # Net pay highlight
    y -= 30
    c.setFillColor(colors.HexColor('#e8f5e9'))
    c.rect(left, y - 8, right - left, 30, stroke=0, fill=1)
    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 13)
    c.drawString(left + 10, y + 2, "Net Pay")
    c.drawRightString(right - 10, y + 2, ctx['net_pay'])

    # Footer
    c.setFont("Helvetica-Oblique", 8)
    c.drawString(left, 50, f"Generated on {ctx['generated_on']}")
    c.drawRightString(right, 50, "This is a computer generated payslip")

    c.showPage()
    c.save()
    return buffer.getvalue()
