"""Order lead times and pricing multipliers"""
from datetime import timedelta
from decimal import Decimal

GARMENT_TYPE_CHOICES = [
    ('SHIRT', 'Shirt'),
    ('SUIT', 'Suit'),
    ('DRESS', 'Dress'),
    ('TROUSER', 'Trouser'),
]

ORDER_TYPE_CHOICES = [
    ('BESPOKE_SUIT', 'Bespoke Suit'),
    ('DRESS_ALTERATION', 'Dress Alteration'),
    ('ONE_PIECE', 'One Piece'),
    ('SUIT_ALTERATION', 'Suit Alteration'),
    ('CUSTOM_DESIGN', 'Custom Design'),
    ('REPAIR', 'Repair'),
]

PRIORITY_CHOICES = [
    ('LOW', 'Low'),
    ('NORMAL', 'Normal'),
    ('HIGH', 'High'),
    ('URGENT', 'Urgent'),
]

DEFAULT_LEAD_TIME_DAYS = 7
URGENT_ORDER_LEAD_TIME_DAYS = 2
MIN_LEAD_TIME_DAYS = 1
MAX_LEAD_TIME_DAYS = 90

LEAD_TIME_BY_GARMENT = {
    'SHIRT': 5,
    'TROUSER': 5,
    'DRESS': 7,
    'SUIT': 10,
}

LEAD_TIME_BY_ORDER_TYPE = {
    'BESPOKE_SUIT': 14,
    'DRESS_ALTERATION': 3,
    'ONE_PIECE': 7,
    'SUIT_ALTERATION': 5,
    'CUSTOM_DESIGN': 10,
    'REPAIR': 2,
}

PRICING_MULTIPLIER_BY_ORDER_TYPE = {
    'BESPOKE_SUIT': Decimal('1.5'),
    'DRESS_ALTERATION': Decimal('0.8'),
    'ONE_PIECE': Decimal('1.0'),
    'SUIT_ALTERATION': Decimal('0.9'),
    'CUSTOM_DESIGN': Decimal('1.2'),
    'REPAIR': Decimal('0.6'),
}


def get_lead_time_days(garment_type=None, order_type=None, is_urgent=False):
    if is_urgent:
        days = URGENT_ORDER_LEAD_TIME_DAYS
    elif order_type in LEAD_TIME_BY_ORDER_TYPE:
        days = LEAD_TIME_BY_ORDER_TYPE[order_type]
    elif garment_type in LEAD_TIME_BY_GARMENT:
        days = LEAD_TIME_BY_GARMENT[garment_type]
    else:
        days = DEFAULT_LEAD_TIME_DAYS
    return max(MIN_LEAD_TIME_DAYS, min(MAX_LEAD_TIME_DAYS, days))


def calculate_delivery_date(order_date, garment_type=None, order_type=None, is_urgent=False):
    return order_date + timedelta(days=get_lead_time_days(garment_type, order_type, is_urgent))


def get_pricing_multiplier(order_type):
    return PRICING_MULTIPLIER_BY_ORDER_TYPE.get(order_type, Decimal('1.0'))
