"""
Material cost reporting over MaterialUsage and Waste records.

All money is summed as Decimal in the database; percentages and averages
are rounded to two places before they leave this module.
"""
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum, Count, DecimalField
from django.db.models.functions import TruncDay, TruncWeek, TruncMonth
from django.utils import timezone

from backend.inventory.models import MaterialUsage, Waste

ZERO = Decimal('0.00')
TWO_PLACES = Decimal('0.01')

TREND_PERIODS = {
    'daily': TruncDay,
    'weekly': TruncWeek,
    'monthly': TruncMonth,
}


def _round(value):
    return Decimal(value or 0).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _ratio(numerator, denominator):
    if not denominator:
        return ZERO
    return _round(Decimal(numerator) / Decimal(denominator))


def _date_range(queryset, field, date_from=None, date_to=None):
    if date_from:
        queryset = queryset.filter(**{f'{field}__gte': date_from})
    if date_to:
        queryset = queryset.filter(**{f'{field}__lte': date_to})
    return queryset


def _usage_line(usage):
    item = usage.inventory_item
    return {
        'inventory_item_id': item.id,
        'item_name': item.name,
        'item_sku': item.sku,
        'category': item.category,
        'unit': item.unit,
        'quantity': usage.quantity,
        'unit_price': usage.unit_price,
        'total_cost': usage.total_cost,
    }


def calculate_order_material_cost(order_id):
    """Sum of every material usage booked against one order, with a line breakdown."""
    usages = MaterialUsage.objects.filter(order_id=order_id).select_related('inventory_item').order_by('usage_date', 'id')
    breakdown = [_usage_line(usage) for usage in usages]
    total = sum((line['total_cost'] for line in breakdown), ZERO)
    return {
        'order_id': order_id,
        'total_cost': _round(total),
        'item_count': len(breakdown),
        'cost_breakdown': breakdown,
    }


def material_cost_analysis(date_from=None, date_to=None):
    """
    Per-order material cost over a usage date window.

    Each order reports its material cost and that cost as a percentage of
    the order total (0 when the order total is 0). The summary averages are
    0 when no usage falls in the window.
    """
    usages = _date_range(MaterialUsage.objects.all(), 'usage_date', date_from, date_to)
    usages = usages.select_related('inventory_item', 'order', 'order__customer').order_by('order_id', 'id')

    orders = {}
    for usage in usages:
        entry = orders.get(usage.order_id)
        if entry is None:
            order = usage.order
            entry = orders[usage.order_id] = {
                'order_id': order.id,
                'order_number': order.order_number,
                'customer_name': order.customer.full_name,
                'total_amount': order.total_amount,
                'material_cost': ZERO,
                'material_cost_percentage': ZERO,
                'items': [],
            }
        entry['material_cost'] += usage.total_cost
        entry['items'].append(_usage_line(usage))

    rows = []
    for entry in orders.values():
        if entry['total_amount'] > 0:
            entry['material_cost_percentage'] = _round(entry['material_cost'] / entry['total_amount'] * 100)
        entry['material_cost'] = _round(entry['material_cost'])
        rows.append(entry)
    rows.sort(key=lambda row: row['material_cost'], reverse=True)

    grand_total = sum((row['material_cost'] for row in rows), ZERO)
    percentage_total = sum((row['material_cost_percentage'] for row in rows), ZERO)
    return {
        'orders': rows,
        'summary': {
            'total_orders': len(rows),
            'grand_total': _round(grand_total),
            'average_material_cost': _ratio(grand_total, len(rows)),
            'average_material_cost_percentage': _ratio(percentage_total, len(rows)),
        },
    }


def material_cost_by_category(date_from=None, date_to=None):
    usages = _date_range(MaterialUsage.objects.all(), 'usage_date', date_from, date_to)
    grouped = usages.values('inventory_item__category').annotate(
        total_cost=Sum('total_cost', output_field=DecimalField()),
        usage_count=Count('id'),
    ).order_by('-total_cost')
    return [
        {
            'category': row['inventory_item__category'],
            'total_cost': _round(row['total_cost']),
            'usage_count': row['usage_count'],
            'average_cost': _ratio(row['total_cost'], row['usage_count']),
        }
        for row in grouped
    ]


def _trend_start(period, span, today):
    if period == 'monthly':
        month_index = today.year * 12 + today.month - 1 - span
        return today.replace(year=month_index // 12, month=month_index % 12 + 1, day=min(today.day, 28))
    if period == 'weekly':
        return today - timedelta(weeks=span)
    return today - timedelta(days=span)


def _period_label(period, value):
    if hasattr(value, 'date'):
        value = value.date()
    if period == 'monthly':
        return value.strftime('%Y-%m')
    if period == 'weekly':
        year, week, _ = value.isocalendar()
        return f'{year}-W{week:02d}'
    return value.isoformat()


def material_cost_trends(period='monthly', span=12, today=None):
    """
    Material cost bucketed by day, ISO week or month.

    `span` counts periods back from today. Buckets without usage are
    omitted; each bucket carries a per-category cost breakdown.
    """
    if period not in TREND_PERIODS:
        raise ValueError(f"Unknown period '{period}'. Use one of: {', '.join(TREND_PERIODS)}")
    today = today or timezone.localdate()
    start = _trend_start(period, span, today)

    grouped = MaterialUsage.objects.filter(
        usage_date__gte=start, usage_date__lte=today
    ).annotate(
        bucket=TREND_PERIODS[period]('usage_date')
    ).values('bucket', 'inventory_item__category').annotate(
        total_cost=Sum('total_cost', output_field=DecimalField()),
        usage_count=Count('id'),
    ).order_by('bucket')

    trends = {}
    for row in grouped:
        label = _period_label(period, row['bucket'])
        trend = trends.setdefault(label, {
            'period': label,
            'total_cost': ZERO,
            'usage_count': 0,
            'category_breakdown': {},
        })
        trend['total_cost'] += row['total_cost']
        trend['usage_count'] += row['usage_count']
        category = row['inventory_item__category']
        trend['category_breakdown'][category] = _round(
            trend['category_breakdown'].get(category, ZERO) + row['total_cost']
        )

    results = []
    for trend in trends.values():
        trend['average_cost'] = _ratio(trend['total_cost'], trend['usage_count'])
        trend['total_cost'] = _round(trend['total_cost'])
        results.append(trend)
    return results


def top_materials_by_cost(date_from=None, date_to=None, limit=10):
    usages = _date_range(MaterialUsage.objects.all(), 'usage_date', date_from, date_to)
    grouped = usages.values(
        'inventory_item__id',
        'inventory_item__name',
        'inventory_item__sku',
        'inventory_item__category',
        'inventory_item__unit',
    ).annotate(
        total_cost=Sum('total_cost', output_field=DecimalField()),
        total_quantity=Sum('quantity', output_field=DecimalField()),
        usage_count=Count('id'),
    ).order_by('-total_cost')[:limit]
    return [
        {
            'inventory_item_id': row['inventory_item__id'],
            'item_name': row['inventory_item__name'],
            'item_sku': row['inventory_item__sku'],
            'category': row['inventory_item__category'],
            'unit': row['inventory_item__unit'],
            'total_cost': _round(row['total_cost']),
            'total_quantity': row['total_quantity'],
            'usage_count': row['usage_count'],
            'average_cost': _ratio(row['total_cost'], row['usage_count']),
            'average_price': _ratio(row['total_cost'], row['total_quantity']),
        }
        for row in grouped
    ]


def waste_cost_impact(date_from=None, date_to=None):
    wastes = _date_range(Waste.objects.all(), 'waste_date', date_from, date_to)
    totals = wastes.aggregate(
        total=Sum('total_cost', output_field=DecimalField()),
        count=Count('id'),
    )
    total = totals['total'] or ZERO

    by_reason = wastes.values('reason').annotate(
        total_cost=Sum('total_cost', output_field=DecimalField()),
        count=Count('id'),
    ).order_by('-total_cost')
    by_category = wastes.values('inventory_item__category').annotate(
        total_cost=Sum('total_cost', output_field=DecimalField()),
        count=Count('id'),
    ).order_by('-total_cost')

    return {
        'total_waste_cost': _round(total),
        'total_waste_items': totals['count'],
        'average_waste_cost': _ratio(total, totals['count']),
        'waste_by_reason': [
            {'reason': row['reason'], 'total_cost': _round(row['total_cost']), 'count': row['count']}
            for row in by_reason
        ],
        'waste_by_category': [
            {'category': row['inventory_item__category'], 'total_cost': _round(row['total_cost']), 'count': row['count']}
            for row in by_category
        ],
    }
