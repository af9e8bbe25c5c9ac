from django.contrib import admin
from .models import Measurement, Order, Task


@admin.register(Measurement)
class MeasurementAdmin(admin.ModelAdmin):
    list_display = ['customer', 'garment_type', 'version', 'is_latest', 'unit', 'created_at']
    list_filter = ['garment_type', 'is_latest']
    search_fields = ['customer__first_name', 'customer__last_name', 'customer__customer_number']


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0
    fields = ['stage', 'assigned_employee', 'deadline', 'status', 'actual_hours']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'customer', 'garment_type', 'status', 'priority', 'delivery_date', 'total_amount', 'balance_amount']
    list_filter = ['status', 'priority', 'garment_type', 'order_type', 'is_urgent']
    search_fields = ['order_number', 'customer__first_name', 'customer__last_name']
    readonly_fields = ['order_number', 'balance_amount', 'created_at', 'updated_at']
    inlines = [TaskInline]


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['order', 'stage', 'assigned_employee', 'deadline', 'status', 'priority']
    list_filter = ['stage', 'status', 'priority']
