from django.contrib import admin
from .models import CommunicationTemplate, CommunicationProvider, MessageLog


@admin.register(CommunicationTemplate)
class CommunicationTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'communication_type', 'is_active', 'created_at']
    list_filter = ['category', 'communication_type', 'is_active']
    search_fields = ['name', 'content']


@admin.register(CommunicationProvider)
class CommunicationProviderAdmin(admin.ModelAdmin):
    list_display = ['name', 'provider', 'communication_type', 'is_active', 'updated_at']
    list_filter = ['provider', 'communication_type', 'is_active']
    exclude = ['api_key', 'api_secret']


@admin.register(MessageLog)
class MessageLogAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'communication_type', 'status', 'provider', 'scheduled_for', 'sent_at', 'created_at']
    list_filter = ['status', 'communication_type', 'provider']
    search_fields = ['recipient', 'content', 'provider_message_id']
    readonly_fields = ['provider_message_id', 'sent_at', 'delivered_at', 'failed_at', 'created_at']
