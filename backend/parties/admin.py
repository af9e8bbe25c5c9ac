from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['customer_number', 'first_name', 'last_name', 'phone', 'email', 'preferred_contact_method', 'loyalty_points', 'is_active', 'created_at']
    list_filter = ['is_active', 'gender', 'preferred_contact_method', 'created_at']
    search_fields = ['customer_number', 'first_name', 'last_name', 'phone', 'email']
    ordering = ['-created_at']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['supplier_number', 'name', 'phone', 'email', 'payment_terms', 'status', 'is_active', 'created_at']
    list_filter = ['status', 'payment_terms', 'is_active']
    search_fields = ['supplier_number', 'name', 'email']
    ordering = ['name']
