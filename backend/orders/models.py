from django.db import models
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Customer
from backend.employees.models import Employee
from backend.inventory.models import Fabric
from .constants import GARMENT_TYPE_CHOICES, ORDER_TYPE_CHOICES, PRIORITY_CHOICES
from .workflow import STAGE_CHOICES


class Measurement(models.Model):
    """Versioned body measurements per customer and garment type"""
    UNIT_CHOICES = [
        ('CM', 'Centimetres'),
        ('INCH', 'Inches'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='measurements')
    garment_type = models.CharField(max_length=20, choices=GARMENT_TYPE_CHOICES)
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='CM')
    measurements = models.JSONField(default=dict)
    notes = models.TextField(blank=True)
    version = models.PositiveIntegerField(default=1)
    is_latest = models.BooleanField(default=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='measurements_taken')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.customer.customer_number} {self.garment_type} v{self.version}"

    class Meta:
        db_table = 'measurements'
        ordering = ['customer', 'garment_type', '-version']
        unique_together = [['customer', 'garment_type', 'version']]
        indexes = [
            models.Index(fields=['customer', 'garment_type', 'is_latest'], name='measurements_latest_idx'),
        ]


class Order(models.Model):
    """Customer orders moving through the production stages"""
    order_number = models.CharField(max_length=50, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='orders')
    measurement = models.ForeignKey(Measurement, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    fabric = models.ForeignKey(Fabric, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    garment_type = models.CharField(max_length=20, choices=GARMENT_TYPE_CHOICES)
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES, default='ONE_PIECE')
    service_description = models.TextField(blank=True)
    special_instructions = models.TextField(blank=True)
    order_date = models.DateField()
    delivery_date = models.DateField()
    status = models.CharField(max_length=20, choices=STAGE_CHOICES, default='RECEIVED')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='NORMAL')
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    deposit_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    balance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    is_urgent = models.BooleanField(default=False)
    pieces = models.JSONField(default=list, blank=True)
    original_measurements = models.JSONField(default=dict, blank=True)
    modified_measurements = models.JSONField(default=dict, blank=True)
    alteration_notes = models.TextField(blank=True)
    alteration_history = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders_created')
    created_by_employee = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='orders_status_idx'),
            models.Index(fields=['customer'], name='orders_customer_idx'),
            models.Index(fields=['delivery_date'], name='orders_delivery_idx'),
            models.Index(fields=['priority'], name='orders_priority_idx'),
        ]


class Task(models.Model):
    """Production task for one stage of an order"""
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('IN_PROGRESS', 'In Progress'),
        ('COMPLETED', 'Completed'),
        ('OVERDUE', 'Overdue'),
    ]

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='tasks')
    stage = models.CharField(max_length=20, choices=STAGE_CHOICES)
    assigned_employee = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks')
    deadline = models.DateTimeField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='NORMAL')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    estimated_hours = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    actual_hours = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.order.order_number} {self.stage}"

    class Meta:
        db_table = 'tasks'
        ordering = ['deadline', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='tasks_status_idx'),
            models.Index(fields=['assigned_employee', 'status'], name='tasks_employee_idx'),
            models.Index(fields=['deadline'], name='tasks_deadline_idx'),
        ]
