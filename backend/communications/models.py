from django.db import models
from backend.core.models import User
from backend.parties.models import Customer

COMMUNICATION_TYPE_CHOICES = [
    ('SMS', 'SMS'),
    ('WHATSAPP', 'WhatsApp'),
    ('EMAIL', 'Email'),
]

PROVIDER_CHOICES = [
    ('TWILIO', 'Twilio'),
    ('WHATSAPP_BUSINESS', 'WhatsApp Business'),
    ('SENDGRID', 'SendGrid'),
    ('RESEND', 'Resend'),
    ('CUSTOM', 'Custom'),
]


class CommunicationTemplate(models.Model):
    """Message template with {{variable}} placeholders"""
    CATEGORY_CHOICES = [
        ('ORDER_STATUS', 'Order Status'),
        ('APPOINTMENT_REMINDER', 'Appointment Reminder'),
        ('PROMOTIONAL', 'Promotional'),
        ('LOYALTY', 'Loyalty'),
        ('BIRTHDAY', 'Birthday'),
        ('ANNIVERSARY', 'Anniversary'),
        ('CUSTOM', 'Custom'),
    ]

    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    communication_type = models.CharField(max_length=20, choices=COMMUNICATION_TYPE_CHOICES)
    subject = models.CharField(max_length=200, blank=True)
    content = models.TextField()
    variables = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='communication_templates')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.communication_type})"

    class Meta:
        db_table = 'communication_templates'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'communication_type', 'is_active'], name='comm_tpl_lookup_idx'),
        ]


class CommunicationProvider(models.Model):
    """Stored credentials for one outbound channel"""
    provider = models.CharField(max_length=30, choices=PROVIDER_CHOICES)
    communication_type = models.CharField(max_length=20, choices=COMMUNICATION_TYPE_CHOICES)
    name = models.CharField(max_length=100)
    api_key = models.CharField(max_length=255, blank=True)
    api_secret = models.CharField(max_length=255, blank=True)
    account_sid = models.CharField(max_length=100, blank=True)
    account_id = models.CharField(max_length=100, blank=True)
    from_number = models.CharField(max_length=30, blank=True)
    from_email = models.EmailField(blank=True)
    webhook_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True)
    settings = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='communication_providers')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.provider})"

    class Meta:
        db_table = 'communication_providers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['communication_type', 'is_active'], name='comm_provider_active_idx'),
        ]


class MessageLog(models.Model):
    """One outbound message attempt"""
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('SENT', 'Sent'),
        ('DELIVERED', 'Delivered'),
        ('FAILED', 'Failed'),
        ('CANCELLED', 'Cancelled'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='messages')
    template = models.ForeignKey(CommunicationTemplate, on_delete=models.SET_NULL, null=True, blank=True, related_name='messages')
    communication_type = models.CharField(max_length=20, choices=COMMUNICATION_TYPE_CHOICES)
    recipient = models.CharField(max_length=255)
    subject = models.CharField(max_length=200, blank=True)
    content = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    provider = models.CharField(max_length=30, blank=True)
    provider_message_id = models.CharField(max_length=255, blank=True)
    error_message = models.TextField(blank=True)
    scheduled_for = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='messages_sent')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.communication_type} to {self.recipient} ({self.status})"

    class Meta:
        db_table = 'message_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'scheduled_for'], name='msg_log_scheduled_idx'),
            models.Index(fields=['customer', '-created_at'], name='msg_log_customer_idx'),
            models.Index(fields=['communication_type'], name='msg_log_type_idx'),
        ]
