from rest_framework import serializers
from backend.core.templating import extract_placeholders
from .models import CommunicationTemplate, CommunicationProvider, MessageLog, COMMUNICATION_TYPE_CHOICES


class CommunicationTemplateSerializer(serializers.ModelSerializer):
    placeholders = serializers.SerializerMethodField()
    message_count = serializers.IntegerField(source='messages.count', read_only=True)
    content = serializers.CharField(max_length=5000)

    class Meta:
        model = CommunicationTemplate
        fields = [
            'id', 'name', 'description', 'category', 'communication_type', 'subject', 'content',
            'variables', 'placeholders', 'message_count', 'is_active', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def get_placeholders(self, obj):
        return extract_placeholders(f"{obj.subject or ''} {obj.content}")

    def validate(self, attrs):
        communication_type = attrs.get('communication_type', getattr(self.instance, 'communication_type', None))
        subject = attrs.get('subject', getattr(self.instance, 'subject', ''))
        if communication_type == 'EMAIL' and not subject:
            raise serializers.ValidationError({'subject': 'Email templates need a subject'})
        return attrs


class CommunicationProviderSerializer(serializers.ModelSerializer):
    has_api_key = serializers.SerializerMethodField()

    class Meta:
        model = CommunicationProvider
        fields = [
            'id', 'provider', 'communication_type', 'name', 'api_key', 'api_secret', 'has_api_key',
            'account_sid', 'account_id', 'from_number', 'from_email', 'webhook_url', 'is_active',
            'settings', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'api_key': {'write_only': True, 'required': False},
            'api_secret': {'write_only': True, 'required': False},
        }

    def get_has_api_key(self, obj):
        return bool(obj.api_key)


class MessageLogSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.full_name', read_only=True, default=None)
    template_name = serializers.CharField(source='template.name', read_only=True, default=None)

    class Meta:
        model = MessageLog
        fields = [
            'id', 'customer', 'customer_name', 'template', 'template_name', 'communication_type',
            'recipient', 'subject', 'content', 'status', 'provider', 'provider_message_id',
            'error_message', 'scheduled_for', 'sent_at', 'delivered_at', 'failed_at', 'metadata',
            'created_by', 'created_at'
        ]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    template = serializers.IntegerField()
    customer = serializers.IntegerField(required=False)
    recipient = serializers.CharField(required=False, allow_blank=True)
    communication_type = serializers.ChoiceField(choices=COMMUNICATION_TYPE_CHOICES, required=False)
    variables = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
    scheduled_for = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if not attrs.get('recipient') and not attrs.get('customer'):
            raise serializers.ValidationError({'recipient': 'Provide a recipient or a customer'})
        return attrs


class BulkMessageSerializer(serializers.Serializer):
    template = serializers.IntegerField()
    customer_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    variables = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
    scheduled_for = serializers.DateTimeField(required=False)


class MessageStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MessageLog.STATUS_CHOICES)
    error_message = serializers.CharField(required=False, allow_blank=True)


class TemplatePreviewSerializer(serializers.Serializer):
    variables = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
