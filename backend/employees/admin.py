from django.contrib import admin
from .models import Employee, Bonus, Payroll, Attendance


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['employee_number', 'first_name', 'last_name', 'role', 'salary', 'is_active', 'hire_date']
    list_filter = ['role', 'is_active']
    search_fields = ['employee_number', 'first_name', 'last_name', 'phone']


@admin.register(Bonus)
class BonusAdmin(admin.ModelAdmin):
    list_display = ['employee', 'period', 'bonus_type', 'amount', 'status']
    list_filter = ['status', 'bonus_type', 'period_type']


@admin.register(Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = ['employee', 'period', 'period_type', 'total_earnings', 'total_deductions', 'net_pay', 'status']
    list_filter = ['status', 'period_type']
    readonly_fields = ['calculation_details', 'created_at', 'updated_at']


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'attendance_date', 'clock_in_time', 'clock_out_time', 'status', 'regular_hours', 'overtime_hours']
    list_filter = ['status', 'attendance_date']
    search_fields = ['employee__employee_number', 'employee__first_name', 'employee__last_name']
