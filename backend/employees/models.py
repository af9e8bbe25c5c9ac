from django.db import models
from decimal import Decimal
from backend.core.models import User


class Employee(models.Model):
    """Workshop staff. Optionally linked to a login account."""
    employee_number = models.CharField(max_length=50, unique=True)
    user = models.OneToOneField(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='employee_profile')
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    date_of_birth = models.DateField(blank=True, null=True)
    hire_date = models.DateField()
    role = models.CharField(max_length=20, choices=User.ROLE_CHOICES)
    salary = models.DecimalField(max_digits=12, decimal_places=2, help_text="Monthly base salary")
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.full_name} ({self.employee_number})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    class Meta:
        db_table = 'employees'
        ordering = ['first_name', 'last_name']
        indexes = [
            models.Index(fields=['role'], name='employees_role_idx'),
            models.Index(fields=['is_active'], name='employees_active_idx'),
        ]


class Bonus(models.Model):
    PERIOD_TYPE_CHOICES = [
        ('WEEKLY', 'Weekly'),
        ('BI_WEEKLY', 'Bi-weekly'),
        ('MONTHLY', 'Monthly'),
        ('QUARTERLY', 'Quarterly'),
        ('YEARLY', 'Yearly'),
    ]
    BONUS_TYPE_CHOICES = [
        ('PERFORMANCE', 'Performance'),
        ('COMMISSION', 'Commission'),
        ('RETENTION', 'Retention'),
        ('REFERRAL', 'Referral'),
        ('OTHER', 'Other'),
    ]
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('APPROVED', 'Approved'),
        ('PAID', 'Paid'),
        ('CANCELLED', 'Cancelled'),
    ]

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='bonuses')
    period = models.CharField(max_length=20, help_text="e.g. 2026-10")
    period_type = models.CharField(max_length=20, choices=PERIOD_TYPE_CHOICES, default='MONTHLY')
    bonus_type = models.CharField(max_length=20, choices=BONUS_TYPE_CHOICES, default='PERFORMANCE')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    reason = models.TextField(blank=True)
    approved_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='bonuses_approved')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee} {self.bonus_type} {self.period}"

    class Meta:
        db_table = 'employee_bonuses'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['employee', 'period'], name='bonuses_emp_period_idx'),
            models.Index(fields=['status'], name='bonuses_status_idx'),
        ]


class Payroll(models.Model):
    PERIOD_TYPE_CHOICES = [
        ('WEEKLY', 'Weekly'),
        ('BI_WEEKLY', 'Bi-weekly'),
        ('MONTHLY', 'Monthly'),
    ]
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('APPROVED', 'Approved'),
        ('PAID', 'Paid'),
        ('CANCELLED', 'Cancelled'),
    ]

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='payrolls')
    period = models.CharField(max_length=20)
    period_type = models.CharField(max_length=20, choices=PERIOD_TYPE_CHOICES, default='MONTHLY')
    start_date = models.DateField()
    end_date = models.DateField()
    base_salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    overtime_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    commission_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    bonus_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    other_deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_pay = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    pay_date = models.DateField(null=True, blank=True)
    calculation_details = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='payrolls_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Payroll {self.employee.employee_number} {self.period}"

    def recalculate_totals(self):
        self.total_earnings = self.base_salary + self.overtime_pay + self.commission_pay + self.bonus_pay
        self.total_deductions = self.tax_deductions + self.other_deductions
        self.net_pay = self.total_earnings - self.total_deductions

    class Meta:
        db_table = 'payrolls'
        ordering = ['-start_date', '-created_at']
        unique_together = [['employee', 'period', 'period_type']]
        indexes = [
            models.Index(fields=['period'], name='payrolls_period_idx'),
            models.Index(fields=['status'], name='payrolls_status_idx'),
        ]


class Attendance(models.Model):
    """One working day for one employee, opened by clock-in and closed by clock-out"""
    STATUS_CHOICES = [
        ('PRESENT', 'Present'),
        ('LATE', 'Late'),
        ('HALF_DAY', 'Half Day'),
        ('ABSENT', 'Absent'),
        ('ON_LEAVE', 'On Leave'),
    ]

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='attendance')
    attendance_date = models.DateField()
    clock_in_time = models.DateTimeField(null=True, blank=True)
    clock_out_time = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PRESENT')
    regular_hours = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    overtime_hours = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    location_in = models.CharField(max_length=255, blank=True)
    location_out = models.CharField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee.employee_number} {self.attendance_date}"

    @property
    def is_open(self):
        return self.clock_in_time is not None and self.clock_out_time is None

    @property
    def total_hours(self):
        return self.regular_hours + self.overtime_hours

    class Meta:
        db_table = 'attendance'
        ordering = ['-attendance_date', '-clock_in_time']
        unique_together = [['employee', 'attendance_date']]
        indexes = [
            models.Index(fields=['attendance_date'], name='attendance_date_idx'),
            models.Index(fields=['employee', 'status'], name='attendance_emp_status_idx'),
        ]
