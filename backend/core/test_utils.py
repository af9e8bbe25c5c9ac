"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.utils import generate_number
from backend.parties.models import Customer, Supplier
from backend.employees.models import Employee
from backend.inventory.models import Fabric, InventoryItem
from backend.orders.models import Measurement, Order, Task
from backend.purchasing.models import PurchaseOrder, PurchaseOrderItem
from backend.communications.models import CommunicationTemplate, CommunicationProvider
from backend.documents.models import Document
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()

SHIRT_MEASUREMENTS = {
    'neck': 40, 'chest': 100, 'waist': 90, 'shoulder': 46,
    'sleeve_length': 64, 'shirt_length': 78, 'cuff': 24,
}


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='STITCHER', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_customer(first_name=None, last_name='Tester', phone=None, email=None, **extra):
        if not first_name:
            first_name = f'Customer {TestDataFactory.random_string(4)}'
        if not phone:
            phone = f'+9715{random.randint(10000000, 99999999)}'
        return Customer.objects.create(
            customer_number=generate_number('CUST', Customer, 'customer_number'),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email,
            **extra
        )

    @staticmethod
    def create_supplier(name=None, phone=None, email=None, **extra):
        if not name:
            name = f'Supplier {TestDataFactory.random_string(5)}'
        return Supplier.objects.create(
            supplier_number=generate_number('SUP', Supplier, 'supplier_number'),
            name=name,
            phone=phone or '+97140000000',
            email=email,
            **extra
        )

    @staticmethod
    def create_employee(role='STITCHER', salary=Decimal('3000.00'), user=None, **extra):
        return Employee.objects.create(
            employee_number=generate_number('EMP', Employee, 'employee_number'),
            user=user,
            first_name=extra.pop('first_name', f'Emp {TestDataFactory.random_string(4)}'),
            last_name=extra.pop('last_name', 'Worker'),
            phone=extra.pop('phone', '+971500000000'),
            hire_date=extra.pop('hire_date', timezone.now().date() - timedelta(days=365)),
            role=role,
            salary=salary,
            **extra
        )

    @staticmethod
    def create_fabric(name=None, stock_quantity=Decimal('20.00'), low_stock_threshold=Decimal('5.00'), **extra):
        return Fabric.objects.create(
            name=name or f'Fabric {TestDataFactory.random_string(5)}',
            category=extra.pop('category', 'COTTON'),
            price_per_meter=extra.pop('price_per_meter', Decimal('25.00')),
            stock_quantity=stock_quantity,
            low_stock_threshold=low_stock_threshold,
            **extra
        )

    @staticmethod
    def create_inventory_item(sku=None, current_stock=Decimal('100.000'), unit_price=Decimal('10.00'), **extra):
        return InventoryItem.objects.create(
            sku=sku or f'SKU-{TestDataFactory.random_string(8).upper()}',
            name=extra.pop('name', f'Item {TestDataFactory.random_string(5)}'),
            category=extra.pop('category', 'THREADS'),
            unit=extra.pop('unit', 'pcs'),
            unit_price=unit_price,
            current_stock=current_stock,
            min_stock_level=extra.pop('min_stock_level', Decimal('10.000')),
            **extra
        )

    @staticmethod
    def create_measurement(customer=None, garment_type='SHIRT', measurements=None, version=1, is_latest=True):
        if not customer:
            customer = TestDataFactory.create_customer()
        return Measurement.objects.create(
            customer=customer,
            garment_type=garment_type,
            measurements=measurements if measurements is not None else dict(SHIRT_MEASUREMENTS),
            version=version,
            is_latest=is_latest,
        )

    @staticmethod
    def create_order(customer=None, user=None, status='RECEIVED', total_amount=Decimal('200.00'),
                     deposit_amount=Decimal('50.00'), garment_type='SHIRT', **extra):
        """Create a test order; balance is total minus deposit"""
        if not customer:
            customer = TestDataFactory.create_customer()
        today = timezone.now().date()
        return Order.objects.create(
            order_number=generate_number('ORD', Order, 'order_number'),
            customer=customer,
            garment_type=garment_type,
            order_date=extra.pop('order_date', today),
            delivery_date=extra.pop('delivery_date', today + timedelta(days=7)),
            status=status,
            total_amount=total_amount,
            deposit_amount=deposit_amount,
            balance_amount=total_amount - deposit_amount,
            created_by=user,
            **extra
        )

    @staticmethod
    def create_task(order=None, stage='CUTTING', status='PENDING', employee=None, deadline=None, **extra):
        if not order:
            order = TestDataFactory.create_order()
        return Task.objects.create(
            order=order,
            stage=stage,
            status=status,
            assigned_employee=employee,
            deadline=deadline,
            **extra
        )

    @staticmethod
    def create_purchase_order(supplier=None, user=None, status='DRAFT', items=None):
        """
        Create a purchase order with items.

        `items` is a list of (inventory_item, quantity, unit_price) tuples; a
        single line of 10 units at 5.00 is used when omitted.
        """
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if items is None:
            items = [(TestDataFactory.create_inventory_item(), Decimal('10'), Decimal('5.00'))]
        po = PurchaseOrder.objects.create(
            po_number=generate_number('PO', PurchaseOrder, 'po_number'),
            supplier=supplier,
            order_date=timezone.now().date(),
            status=status,
            created_by=user,
        )
        for inventory_item, quantity, unit_price in items:
            PurchaseOrderItem.objects.create(
                purchase_order=po,
                inventory_item=inventory_item,
                quantity=quantity,
                unit_price=unit_price,
            )
        po.total_amount = po.get_items_total()
        po.save(update_fields=['total_amount'])
        return po

    @staticmethod
    def create_template(name='Order Update', category='ORDER_STATUS', communication_type='SMS', content=None, **extra):
        return CommunicationTemplate.objects.create(
            name=name,
            category=category,
            communication_type=communication_type,
            content=content or 'Hi {{customerName}}, order {{orderNumber}} is {{status}}.',
            **extra
        )

    @staticmethod
    def create_provider(provider='TWILIO', communication_type='SMS', **extra):
        return CommunicationProvider.objects.create(
            provider=provider,
            communication_type=communication_type,
            name=extra.pop('name', f'{provider} {communication_type}'),
            account_sid=extra.pop('account_sid', 'AC123'),
            api_key=extra.pop('api_key', 'secret'),
            from_number=extra.pop('from_number', '+15550000000'),
            **extra
        )

    @staticmethod
    def create_document(user=None, name=None, category='CONTRACT', is_public=False, **extra):
        name = name or f'doc-{TestDataFactory.random_string(6)}.pdf'
        return Document.objects.create(
            name=name,
            category=category,
            type=extra.pop('type', 'PDF'),
            file_size=extra.pop('file_size', 1024),
            mime_type=extra.pop('mime_type', 'application/pdf'),
            file_path=extra.pop('file_path', f'documents/{name}'),
            file_url=extra.pop('file_url', f'/media/documents/{name}'),
            is_public=is_public,
            created_by=user,
            **extra
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
