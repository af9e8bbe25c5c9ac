# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


COMMUNICATION_TYPE_CHOICES = [('SMS', 'SMS'), ('WHATSAPP', 'WhatsApp'), ('EMAIL', 'Email')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CommunicationTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(choices=[('ORDER_STATUS', 'Order Status'), ('APPOINTMENT_REMINDER', 'Appointment Reminder'), ('PROMOTIONAL', 'Promotional'), ('LOYALTY', 'Loyalty'), ('BIRTHDAY', 'Birthday'), ('ANNIVERSARY', 'Anniversary'), ('CUSTOM', 'Custom')], max_length=30)),
                ('communication_type', models.CharField(choices=COMMUNICATION_TYPE_CHOICES, max_length=20)),
                ('subject', models.CharField(blank=True, max_length=200)),
                ('content', models.TextField()),
                ('variables', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='communication_templates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'communication_templates',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category', 'communication_type', 'is_active'], name='comm_tpl_lookup_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CommunicationProvider',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('provider', models.CharField(choices=[('TWILIO', 'Twilio'), ('WHATSAPP_BUSINESS', 'WhatsApp Business'), ('SENDGRID', 'SendGrid'), ('RESEND', 'Resend'), ('CUSTOM', 'Custom')], max_length=30)),
                ('communication_type', models.CharField(choices=COMMUNICATION_TYPE_CHOICES, max_length=20)),
                ('name', models.CharField(max_length=100)),
                ('api_key', models.CharField(blank=True, max_length=255)),
                ('api_secret', models.CharField(blank=True, max_length=255)),
                ('account_sid', models.CharField(blank=True, max_length=100)),
                ('account_id', models.CharField(blank=True, max_length=100)),
                ('from_number', models.CharField(blank=True, max_length=30)),
                ('from_email', models.EmailField(blank=True, max_length=254)),
                ('webhook_url', models.URLField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('settings', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='communication_providers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'communication_providers',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['communication_type', 'is_active'], name='comm_provider_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MessageLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('communication_type', models.CharField(choices=COMMUNICATION_TYPE_CHOICES, max_length=20)),
                ('recipient', models.CharField(max_length=255)),
                ('subject', models.CharField(blank=True, max_length=200)),
                ('content', models.TextField()),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('SENT', 'Sent'), ('DELIVERED', 'Delivered'), ('FAILED', 'Failed'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=20)),
                ('provider', models.CharField(blank=True, max_length=30)),
                ('provider_message_id', models.CharField(blank=True, max_length=255)),
                ('error_message', models.TextField(blank=True)),
                ('scheduled_for', models.DateTimeField(blank=True, null=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('delivered_at', models.DateTimeField(blank=True, null=True)),
                ('failed_at', models.DateTimeField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='messages_sent', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='messages', to='parties.customer')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='messages', to='communications.communicationtemplate')),
            ],
            options={
                'db_table': 'message_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'scheduled_for'], name='msg_log_scheduled_idx'),
                    models.Index(fields=['customer', '-created_at'], name='msg_log_customer_idx'),
                    models.Index(fields=['communication_type'], name='msg_log_type_idx'),
                ],
            },
        ),
    ]
