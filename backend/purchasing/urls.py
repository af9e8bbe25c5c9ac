from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_detail, purchase_order_update_status,
    purchase_order_receive, purchase_order_statistics,
    supplier_payment_list_create, supplier_payment_detail, supplier_payment_update_status,
    supplier_performance_detail,
)

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/stats/', purchase_order_statistics, name='purchase-order-stats'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('purchase-orders/<int:pk>/status/', purchase_order_update_status, name='purchase-order-update-status'),
    path('purchase-orders/<int:pk>/receive/', purchase_order_receive, name='purchase-order-receive'),
    path('supplier-payments/', supplier_payment_list_create, name='supplier-payment-list-create'),
    path('supplier-payments/<int:pk>/', supplier_payment_detail, name='supplier-payment-detail'),
    path('supplier-payments/<int:pk>/status/', supplier_payment_update_status, name='supplier-payment-update-status'),
    path('suppliers/<int:pk>/performance/', supplier_performance_detail, name='supplier-performance'),
]
