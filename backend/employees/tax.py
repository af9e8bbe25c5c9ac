"""
Payroll tax calculation.

Income tax is charged on the annualised gross income in marginal bands,
and the employee social security contribution is a flat rate of the same
income, capped per year. Both are worked out on the annual figure and then
spread back over the pay periods in a year.
"""
from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal('0.01')

# (lower bound, upper bound, rate); None means no upper bound
INCOME_TAX_BRACKETS = [
    (Decimal('0'), Decimal('375000'), Decimal('0')),
    (Decimal('375000'), Decimal('750000'), Decimal('0.09')),
    (Decimal('750000'), Decimal('1500000'), Decimal('0.15')),
    (Decimal('1500000'), None, Decimal('0.18')),
]

SOCIAL_SECURITY_RATE = Decimal('0.05')
SOCIAL_SECURITY_ANNUAL_CAP = Decimal('50000')

PERIODS_PER_YEAR = {
    'MONTHLY': 12,
    'BI_WEEKLY': 26,
    'WEEKLY': 52,
}


def _money(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def annual_income_tax(annual_income):
    annual_income = Decimal(annual_income)
    tax = Decimal('0')
    for lower, upper, rate in INCOME_TAX_BRACKETS:
        if annual_income <= lower:
            break
        top = annual_income if upper is None else min(annual_income, upper)
        tax += (top - lower) * rate
    return tax


def annual_social_security(annual_income):
    return min(Decimal(annual_income) * SOCIAL_SECURITY_RATE, SOCIAL_SECURITY_ANNUAL_CAP)


def calculate_tax(gross, period_type, extra_rate_percent=Decimal('0')):
    """
    Tax due on one period's gross earnings.

    ``extra_rate_percent`` is an additional flat deduction on the period
    gross, on top of income tax and social security. Returns the period
    total plus a line per tax type; lines that come to zero are left out.
    """
    periods = PERIODS_PER_YEAR.get(period_type, 1)
    gross = Decimal(gross)
    annual_income = gross * periods

    breakdown = []
    income_tax = _money(annual_income_tax(annual_income) / periods)
    if income_tax > 0:
        breakdown.append({
            'tax_type': 'INCOME_TAX',
            'amount': income_tax,
            'rate': _money(annual_income_tax(annual_income) * 100 / annual_income),
            'calculation': f"Banded income tax on annual income {_money(annual_income)}",
        })

    social_security = _money(annual_social_security(annual_income) / periods)
    if social_security > 0:
        capped = annual_income * SOCIAL_SECURITY_RATE > SOCIAL_SECURITY_ANNUAL_CAP
        breakdown.append({
            'tax_type': 'SOCIAL_SECURITY',
            'amount': social_security,
            'rate': _money(SOCIAL_SECURITY_RATE * 100),
            'calculation': (
                f"Social security capped at {SOCIAL_SECURITY_ANNUAL_CAP} a year" if capped
                else f"Social security on annual income {_money(annual_income)}"
            ),
        })

    extra = _money(gross * Decimal(extra_rate_percent) / 100)
    if extra > 0:
        breakdown.append({
            'tax_type': 'ADDITIONAL',
            'amount': extra,
            'rate': _money(extra_rate_percent),
            'calculation': 'payroll_tax_rate setting',
        })

    total_tax = sum((line['amount'] for line in breakdown), Decimal('0.00'))
    return {
        'gross': _money(gross),
        'annual_income': _money(annual_income),
        'total_tax': total_tax,
        'effective_tax_rate': _money(total_tax * 100 / gross) if gross > 0 else Decimal('0.00'),
        'breakdown': breakdown,
    }


def serialize_tax(result):
    """JSON-safe copy of a calculate_tax() result for calculation_details"""
    return {
        'gross': str(result['gross']),
        'annual_income': str(result['annual_income']),
        'total_tax': str(result['total_tax']),
        'effective_tax_rate': str(result['effective_tax_rate']),
        'breakdown': [
            {**line, 'amount': str(line['amount']), 'rate': str(line['rate'])}
            for line in result['breakdown']
        ],
    }
