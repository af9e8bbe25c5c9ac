from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderItem, SupplierPayment


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 1
    fields = ['inventory_item', 'quantity', 'unit_price', 'total_price', 'received_quantity']
    readonly_fields = ['total_price']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'supplier', 'order_date', 'expected_date', 'status', 'get_total', 'approved_by']
    list_filter = ['status', 'supplier', 'order_date']
    search_fields = ['po_number', 'notes']
    ordering = ['-order_date', '-created_at']
    inlines = [PurchaseOrderItemInline]
    readonly_fields = ['po_number', 'approved_at', 'created_at', 'updated_at']

    def get_total(self, obj):
        return f"{obj.currency} {obj.total_amount:.2f}"
    get_total.short_description = 'Total'


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(admin.ModelAdmin):
    list_display = ['supplier', 'purchase_order', 'amount', 'payment_method', 'due_date', 'payment_date', 'status']
    list_filter = ['status', 'payment_method', 'due_date']
    search_fields = ['supplier__name', 'reference']
    readonly_fields = ['processed_by', 'processed_at', 'created_at', 'updated_at']
