"""
Production stage model shared by orders and tasks.

Orders move forward one stage at a time and may be cancelled from any
non-terminal stage. DELIVERED and CANCELLED are terminal.
"""

STAGE_CHOICES = [
    ('RECEIVED', 'Received'),
    ('CUTTING', 'Cutting'),
    ('STITCHING', 'Stitching'),
    ('QUALITY_CHECK', 'Quality Check'),
    ('PRESSING', 'Pressing'),
    ('READY', 'Ready'),
    ('DELIVERED', 'Delivered'),
    ('CANCELLED', 'Cancelled'),
]

PRODUCTION_SEQUENCE = ['RECEIVED', 'CUTTING', 'STITCHING', 'QUALITY_CHECK', 'PRESSING', 'READY', 'DELIVERED']

TERMINAL_STATUSES = ('DELIVERED', 'CANCELLED')

ORDER_STATUS_TRANSITIONS = {
    'RECEIVED': ['CUTTING', 'CANCELLED'],
    'CUTTING': ['STITCHING', 'CANCELLED'],
    'STITCHING': ['QUALITY_CHECK', 'CANCELLED'],
    'QUALITY_CHECK': ['PRESSING', 'CANCELLED'],
    'PRESSING': ['READY', 'CANCELLED'],
    'READY': ['DELIVERED', 'CANCELLED'],
    'DELIVERED': [],
    'CANCELLED': [],
}

# Role responsible for each production stage
STAGE_ROLES = {
    'CUTTING': 'CUTTER',
    'STITCHING': 'STITCHER',
    'QUALITY_CHECK': 'MANAGER',
    'PRESSING': 'PRESSER',
    'DELIVERED': 'DELIVERY',
}


class InvalidStatusTransition(Exception):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current} to {requested}")

    @property
    def allowed(self):
        return allowed_transitions(self.current)


def allowed_transitions(current):
    return list(ORDER_STATUS_TRANSITIONS.get(current, []))


def can_transition(current, new):
    if current == new:
        return True
    return new in ORDER_STATUS_TRANSITIONS.get(current, [])


def validate_transition(current, new):
    if not can_transition(current, new):
        raise InvalidStatusTransition(current, new)


def stage_progress(status):
    """Percentage of the production sequence completed"""
    if status == 'CANCELLED' or status not in PRODUCTION_SEQUENCE:
        return 0
    return round(PRODUCTION_SEQUENCE.index(status) * 100 / (len(PRODUCTION_SEQUENCE) - 1))
