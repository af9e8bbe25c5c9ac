from django.urls import path
from .views import (
    order_list_create, order_detail, order_update_status, order_history,
    order_material_cost, order_lead_time,
    measurement_list_create, measurement_detail, measurement_templates,
    task_list_create, task_detail, task_assign, task_update_status,
    task_mark_overdue, task_workload,
)

urlpatterns = [
    # Order endpoints
    path('orders/', order_list_create, name='order-list-create'),
    path('orders/lead-time/', order_lead_time, name='order-lead-time'),
    path('orders/<int:pk>/', order_detail, name='order-detail'),
    path('orders/<int:pk>/status/', order_update_status, name='order-update-status'),
    path('orders/<int:pk>/history/', order_history, name='order-history'),
    path('orders/<int:pk>/material-cost/', order_material_cost, name='order-material-cost'),

    # Measurement endpoints
    path('measurements/', measurement_list_create, name='measurement-list-create'),
    path('measurements/templates/', measurement_templates, name='measurement-templates'),
    path('measurements/<int:pk>/', measurement_detail, name='measurement-detail'),

    # Task endpoints
    path('tasks/', task_list_create, name='task-list-create'),
    path('tasks/mark-overdue/', task_mark_overdue, name='task-mark-overdue'),
    path('tasks/workload/', task_workload, name='task-workload'),
    path('tasks/<int:pk>/', task_detail, name='task-detail'),
    path('tasks/<int:pk>/assign/', task_assign, name='task-assign'),
    path('tasks/<int:pk>/status/', task_update_status, name='task-update-status'),
]
