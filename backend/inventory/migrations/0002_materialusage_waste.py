# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('inventory', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MaterialUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_cost', models.DecimalField(decimal_places=2, max_digits=12)),
                ('usage_date', models.DateField()),
                ('notes', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='material_usages', to=settings.AUTH_USER_MODEL)),
                ('inventory_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='material_usages', to='inventory.inventoryitem')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='material_usages', to='orders.order')),
            ],
            options={
                'db_table': 'material_usages',
                'ordering': ['-usage_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['order'], name='mat_usage_order_idx'),
                    models.Index(fields=['usage_date'], name='mat_usage_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Waste',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('unit_cost', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_cost', models.DecimalField(decimal_places=2, max_digits=12)),
                ('reason', models.CharField(choices=[('CUTTING_LOSS', 'Cutting Loss'), ('STITCHING_ERROR', 'Stitching Error'), ('QUALITY_REJECT', 'Quality Reject'), ('EXCESS_MATERIAL', 'Excess Material'), ('DAMAGED_GOODS', 'Damaged Goods'), ('OTHER', 'Other')], max_length=20)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('waste_date', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='wastes', to=settings.AUTH_USER_MODEL)),
                ('inventory_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='wastes', to='inventory.inventoryitem')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='wastes', to='orders.order')),
            ],
            options={
                'db_table': 'wastes',
                'ordering': ['-waste_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['reason'], name='waste_reason_idx'),
                    models.Index(fields=['waste_date'], name='waste_date_idx'),
                ],
            },
        ),
    ]
