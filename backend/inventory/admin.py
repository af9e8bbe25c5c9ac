from django.contrib import admin
from .models import Fabric, InventoryItem, InventoryTransaction, MaterialUsage, Waste


@admin.register(Fabric)
class FabricAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'color', 'price_per_meter', 'stock_quantity', 'low_stock_threshold', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name', 'color', 'material']


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'unit_price', 'current_stock', 'min_stock_level', 'supplier', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['sku', 'name']
    readonly_fields = ['current_stock']


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'type', 'quantity', 'previous_stock', 'new_stock', 'created_by', 'created_at']
    list_filter = ['type', 'created_at']
    readonly_fields = ['inventory_item', 'type', 'quantity', 'previous_stock', 'new_stock', 'created_by', 'created_at']


@admin.register(MaterialUsage)
class MaterialUsageAdmin(admin.ModelAdmin):
    list_display = ['order', 'inventory_item', 'quantity', 'unit_price', 'total_cost', 'usage_date']
    list_filter = ['usage_date']


@admin.register(Waste)
class WasteAdmin(admin.ModelAdmin):
    list_display = ['inventory_item', 'order', 'quantity', 'unit_cost', 'total_cost', 'reason', 'waste_date']
    list_filter = ['reason', 'waste_date']
