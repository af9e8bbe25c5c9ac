from django.urls import path
from .views import (
    template_list_create, template_detail, template_preview,
    provider_list_create, provider_detail,
    message_list, message_detail, message_send, message_send_bulk, message_update_status,
    message_process_scheduled, message_order_status, message_birthday, message_analytics,
)

urlpatterns = [
    # Template endpoints
    path('communication-templates/', template_list_create, name='communication-template-list-create'),
    path('communication-templates/<int:pk>/', template_detail, name='communication-template-detail'),
    path('communication-templates/<int:pk>/preview/', template_preview, name='communication-template-preview'),

    # Provider configuration
    path('communication-providers/', provider_list_create, name='communication-provider-list-create'),
    path('communication-providers/<int:pk>/', provider_detail, name='communication-provider-detail'),

    # Messages
    path('messages/', message_list, name='message-list'),
    path('messages/send/', message_send, name='message-send'),
    path('messages/bulk/', message_send_bulk, name='message-send-bulk'),
    path('messages/process-scheduled/', message_process_scheduled, name='message-process-scheduled'),
    path('messages/order-status/', message_order_status, name='message-order-status'),
    path('messages/birthday/', message_birthday, name='message-birthday'),
    path('messages/analytics/', message_analytics, name='message-analytics'),
    path('messages/<int:pk>/', message_detail, name='message-detail'),
    path('messages/<int:pk>/status/', message_update_status, name='message-update-status'),
]
