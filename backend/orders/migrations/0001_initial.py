# Generated manually
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


GARMENT_TYPE_CHOICES = [('SHIRT', 'Shirt'), ('SUIT', 'Suit'), ('DRESS', 'Dress'), ('TROUSER', 'Trouser')]
PRIORITY_CHOICES = [('LOW', 'Low'), ('NORMAL', 'Normal'), ('HIGH', 'High'), ('URGENT', 'Urgent')]
STAGE_CHOICES = [
    ('RECEIVED', 'Received'), ('CUTTING', 'Cutting'), ('STITCHING', 'Stitching'),
    ('QUALITY_CHECK', 'Quality Check'), ('PRESSING', 'Pressing'), ('READY', 'Ready'),
    ('DELIVERED', 'Delivered'), ('CANCELLED', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('parties', '0001_initial'),
        ('employees', '0001_initial'),
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Measurement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('garment_type', models.CharField(choices=GARMENT_TYPE_CHOICES, max_length=20)),
                ('unit', models.CharField(choices=[('CM', 'Centimetres'), ('INCH', 'Inches')], default='CM', max_length=10)),
                ('measurements', models.JSONField(default=dict)),
                ('notes', models.TextField(blank=True)),
                ('version', models.PositiveIntegerField(default=1)),
                ('is_latest', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='measurements_taken', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='measurements', to='parties.customer')),
            ],
            options={
                'db_table': 'measurements',
                'ordering': ['customer', 'garment_type', '-version'],
                'unique_together': {('customer', 'garment_type', 'version')},
                'indexes': [
                    models.Index(fields=['customer', 'garment_type', 'is_latest'], name='measurements_latest_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(max_length=50, unique=True)),
                ('garment_type', models.CharField(choices=GARMENT_TYPE_CHOICES, max_length=20)),
                ('order_type', models.CharField(choices=[('BESPOKE_SUIT', 'Bespoke Suit'), ('DRESS_ALTERATION', 'Dress Alteration'), ('ONE_PIECE', 'One Piece'), ('SUIT_ALTERATION', 'Suit Alteration'), ('CUSTOM_DESIGN', 'Custom Design'), ('REPAIR', 'Repair')], default='ONE_PIECE', max_length=20)),
                ('service_description', models.TextField(blank=True)),
                ('special_instructions', models.TextField(blank=True)),
                ('order_date', models.DateField()),
                ('delivery_date', models.DateField()),
                ('status', models.CharField(choices=STAGE_CHOICES, default='RECEIVED', max_length=20)),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, default='NORMAL', max_length=10)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('balance_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('is_urgent', models.BooleanField(default=False)),
                ('pieces', models.JSONField(blank=True, default=list)),
                ('original_measurements', models.JSONField(blank=True, default=dict)),
                ('modified_measurements', models.JSONField(blank=True, default=dict)),
                ('alteration_notes', models.TextField(blank=True)),
                ('alteration_history', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders_created', to=settings.AUTH_USER_MODEL)),
                ('created_by_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders_created', to='employees.employee')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='parties.customer')),
                ('fabric', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='inventory.fabric')),
                ('measurement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='orders.measurement')),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='orders_status_idx'),
                    models.Index(fields=['customer'], name='orders_customer_idx'),
                    models.Index(fields=['delivery_date'], name='orders_delivery_idx'),
                    models.Index(fields=['priority'], name='orders_priority_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stage', models.CharField(choices=STAGE_CHOICES, max_length=20)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, default='NORMAL', max_length=10)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('OVERDUE', 'Overdue')], default='PENDING', max_length=20)),
                ('estimated_hours', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('actual_hours', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('notes', models.TextField(blank=True)),
                ('assigned_at', models.DateTimeField(blank=True, null=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks', to='employees.employee')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks_created', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to='orders.order')),
            ],
            options={
                'db_table': 'tasks',
                'ordering': ['deadline', '-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='tasks_status_idx'),
                    models.Index(fields=['assigned_employee', 'status'], name='tasks_employee_idx'),
                    models.Index(fields=['deadline'], name='tasks_deadline_idx'),
                ],
            },
        ),
    ]
