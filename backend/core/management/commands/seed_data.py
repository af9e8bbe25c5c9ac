"""
Management command to load starter data for a fresh install
"""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from backend.core.models import Setting
from backend.core.utils import generate_number
from backend.parties.models import Customer
from backend.inventory.models import Fabric, InventoryItem
from backend.orders.models import Order
from backend.communications.models import CommunicationTemplate

User = get_user_model()

ROLE_USERS = [
    ('manager', 'MANAGER'),
    ('cutter', 'CUTTER'),
    ('stitcher', 'STITCHER'),
    ('presser', 'PRESSER'),
    ('delivery', 'DELIVERY'),
]

CUSTOMERS = [
    {'first_name': 'Ahmed', 'last_name': 'Khan', 'phone': '+971501234567', 'email': 'ahmed.khan@example.com',
     'preferred_contact_method': 'WHATSAPP'},
    {'first_name': 'Sara', 'last_name': 'Williams', 'phone': '+971509876543', 'email': 'sara.w@example.com',
     'preferred_contact_method': 'EMAIL'},
]

FABRICS = [
    {'name': 'Egyptian Cotton White', 'category': 'COTTON', 'color': 'White', 'price_per_meter': Decimal('45.00'),
     'stock_quantity': Decimal('60.00')},
    {'name': 'Italian Wool Charcoal', 'category': 'WOOL', 'color': 'Charcoal', 'price_per_meter': Decimal('120.00'),
     'stock_quantity': Decimal('25.00')},
    {'name': 'Mulberry Silk Ivory', 'category': 'SILK', 'color': 'Ivory', 'price_per_meter': Decimal('180.00'),
     'stock_quantity': Decimal('4.00')},
]

INVENTORY_ITEMS = [
    {'sku': 'THR-POLY-BLK', 'name': 'Polyester thread black', 'category': 'THREADS', 'unit': 'spool',
     'unit_price': Decimal('3.50'), 'current_stock': Decimal('200'), 'min_stock_level': Decimal('50')},
    {'sku': 'BTN-HORN-20', 'name': 'Horn buttons 20mm', 'category': 'BUTTONS', 'unit': 'pcs',
     'unit_price': Decimal('1.25'), 'current_stock': Decimal('500'), 'min_stock_level': Decimal('100')},
    {'sku': 'LIN-VISC-NVY', 'name': 'Viscose lining navy', 'category': 'LININGS', 'unit': 'm',
     'unit_price': Decimal('12.00'), 'current_stock': Decimal('8'), 'min_stock_level': Decimal('10')},
]

TEMPLATES = [
    {'name': 'Order status (SMS)', 'category': 'ORDER_STATUS', 'communication_type': 'SMS',
     'content': 'Hi {{customerName}}, your order {{orderNumber}} is now {{status}}.'},
    {'name': 'Order status (WhatsApp)', 'category': 'ORDER_STATUS', 'communication_type': 'WHATSAPP',
     'content': 'Hello {{customerName}}! Order {{orderNumber}} is {{status}}. Expected delivery: {{deliveryDate}}.'},
    {'name': 'Order status (Email)', 'category': 'ORDER_STATUS', 'communication_type': 'EMAIL',
     'subject': 'Your order {{orderNumber}}',
     'content': '<p>Dear {{customerName}},</p><p>Your order {{orderNumber}} is now {{status}}.</p>'},
    {'name': 'Birthday wish', 'category': 'BIRTHDAY', 'communication_type': 'SMS',
     'content': 'Happy birthday {{customerName}}! Enjoy 10% off your next order.'},
]

SETTINGS = [
    ('company_name', 'Tailoring Studio', 'Shown on payslips and documents'),
    ('company_address', 'Dubai, United Arab Emirates', 'Shown on payslips and documents'),
    ('payroll_tax_rate', '0', 'Additional payroll tax in percent, on top of income tax and social security'),
    ('standard_work_hours', '8', 'Hours per day before attendance counts as overtime'),
    ('work_start_time', '09:00', 'Clock-ins after this local time are marked late'),
]


class Command(BaseCommand):
    help = 'Seed users, customers, fabrics, inventory, a sample order, message templates and settings'

    def handle(self, *args, **options):
        if User.objects.filter(username='admin').exists():
            self.stdout.write(self.style.WARNING('Database already seeded (admin user exists), nothing to do'))
            return

        with transaction.atomic():
            admin = User.objects.create_superuser(
                username='admin', email='admin@example.com', password='admin123', role='ADMIN',
            )
            self.stdout.write(self.style.SUCCESS('✓ Created admin user'))

            for username, role in ROLE_USERS:
                User.objects.create_user(
                    username=username, email=f'{username}@example.com', password='password123', role=role,
                )
            self.stdout.write(self.style.SUCCESS(f'✓ Created {len(ROLE_USERS)} role users'))

            customers = [
                Customer.objects.create(
                    customer_number=generate_number('CUST', Customer, 'customer_number'),
                    created_by=admin,
                    **data
                )
                for data in CUSTOMERS
            ]
            self.stdout.write(self.style.SUCCESS(f'✓ Created {len(customers)} customers'))

            fabrics = [Fabric.objects.create(**data) for data in FABRICS]
            self.stdout.write(self.style.SUCCESS(f'✓ Created {len(fabrics)} fabrics'))

            for data in INVENTORY_ITEMS:
                InventoryItem.objects.create(created_by=admin, **data)
            self.stdout.write(self.style.SUCCESS(f'✓ Created {len(INVENTORY_ITEMS)} inventory items'))

            today = timezone.now().date()
            order = Order.objects.create(
                order_number=generate_number('ORD', Order, 'order_number'),
                customer=customers[0],
                fabric=fabrics[0],
                garment_type='SHIRT',
                order_type='ONE_PIECE',
                service_description='Two-piece cotton shirt, slim fit',
                order_date=today,
                delivery_date=today + timedelta(days=5),
                total_amount=Decimal('350.00'),
                deposit_amount=Decimal('100.00'),
                balance_amount=Decimal('250.00'),
                created_by=admin,
            )
            self.stdout.write(self.style.SUCCESS(f'✓ Created sample order {order.order_number}'))

            for data in TEMPLATES:
                CommunicationTemplate.objects.create(created_by=admin, **data)
            self.stdout.write(self.style.SUCCESS(f'✓ Created {len(TEMPLATES)} communication templates'))

            for key, value, description in SETTINGS:
                Setting.objects.update_or_create(key=key, defaults={'value': value, 'description': description})
            self.stdout.write(self.style.SUCCESS(f'✓ Saved {len(SETTINGS)} settings'))

        self.stdout.write(self.style.SUCCESS('\nSeed complete. Log in as admin / admin123'))
