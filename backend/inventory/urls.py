from django.urls import path
from .views import (
    fabric_list_create, fabric_detail, fabric_low_stock,
    inventory_item_list_create, inventory_item_detail, inventory_item_update_stock,
    inventory_item_transactions, inventory_low_stock, inventory_total_value, inventory_item_analytics,
    material_usage_list_create, material_usage_detail,
    waste_list_create, waste_detail,
)

urlpatterns = [
    # Fabric endpoints
    path('fabrics/', fabric_list_create, name='fabric-list-create'),
    path('fabrics/low-stock/', fabric_low_stock, name='fabric-low-stock'),
    path('fabrics/<int:pk>/', fabric_detail, name='fabric-detail'),

    # Inventory item endpoints
    path('inventory-items/', inventory_item_list_create, name='inventory-item-list-create'),
    path('inventory-items/low-stock/', inventory_low_stock, name='inventory-low-stock'),
    path('inventory-items/value/', inventory_total_value, name='inventory-value'),
    path('inventory-items/analytics/', inventory_item_analytics, name='inventory-analytics'),
    path('inventory-items/<int:pk>/', inventory_item_detail, name='inventory-item-detail'),
    path('inventory-items/<int:pk>/stock/', inventory_item_update_stock, name='inventory-item-stock'),
    path('inventory-items/<int:pk>/transactions/', inventory_item_transactions, name='inventory-item-transactions'),

    # Material usage and waste
    path('material-usage/', material_usage_list_create, name='material-usage-list-create'),
    path('material-usage/<int:pk>/', material_usage_detail, name='material-usage-detail'),
    path('waste/', waste_list_create, name='waste-list-create'),
    path('waste/<int:pk>/', waste_detail, name='waste-detail'),
]
