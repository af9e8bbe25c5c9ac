from decimal import Decimal
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers
from backend.core.utils import generate_number
from .models import PurchaseOrder, PurchaseOrderItem, SupplierPayment

TOTAL_TOLERANCE = Decimal('0.01')


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    inventory_item_sku = serializers.CharField(source='inventory_item.sku', read_only=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.01'))
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = PurchaseOrderItem
        fields = [
            'id', 'inventory_item', 'inventory_item_name', 'inventory_item_sku', 'quantity',
            'unit_price', 'total_price', 'received_quantity', 'notes'
        ]
        read_only_fields = ['total_price', 'received_quantity']


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True, required=False)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    approved_by_username = serializers.CharField(source='approved_by.username', read_only=True, default=None)
    order_date = serializers.DateField(required=False)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'supplier', 'supplier_name', 'order_date', 'expected_date', 'status',
            'total_amount', 'currency', 'notes', 'items', 'approved_by', 'approved_by_username',
            'approved_at', 'received_at', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['po_number', 'approved_by', 'approved_at', 'received_at', 'created_by', 'created_at', 'updated_at']

    def validate_status(self, value):
        if self.instance is None and value not in ('DRAFT', 'PENDING_APPROVAL'):
            raise serializers.ValidationError('New purchase orders start as DRAFT or PENDING_APPROVAL')
        return value

    def validate(self, attrs):
        instance = self.instance
        if instance is not None and instance.status in ('RECEIVED', 'CANCELLED'):
            raise serializers.ValidationError(f'A {instance.status.lower()} purchase order cannot be modified')
        if instance is not None and 'status' in attrs and attrs['status'] != instance.status:
            raise serializers.ValidationError({'status': 'Use the status endpoint to change status'})
        items = attrs.get('items')
        if instance is None and not items:
            raise serializers.ValidationError({'items': 'At least one item is required'})
        if items is not None and len(items) == 0:
            raise serializers.ValidationError({'items': 'At least one item is required'})
        if instance is not None and items is not None and instance.status not in ('DRAFT', 'PENDING_APPROVAL'):
            raise serializers.ValidationError({'items': 'Items can only be changed while the order is a draft'})

        if 'total_amount' in attrs or items is not None:
            total = attrs.get('total_amount', getattr(instance, 'total_amount', None))
            if items is not None:
                expected = sum((i['quantity'] * i['unit_price'] for i in items), Decimal('0'))
            else:
                expected = instance.get_items_total()
            if total is None or abs(total - expected) >= TOTAL_TOLERANCE:
                raise serializers.ValidationError({'total_amount': 'Total amount must match the sum of item totals'})

        expected_date = attrs.get('expected_date')
        order_date = attrs.get('order_date', getattr(instance, 'order_date', None)) or timezone.localdate()
        if expected_date and expected_date < order_date:
            raise serializers.ValidationError({'expected_date': 'Expected date cannot be before the order date'})
        return attrs

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        validated_data['po_number'] = generate_number('PO', PurchaseOrder, 'po_number')
        validated_data.setdefault('order_date', timezone.localdate())
        with transaction.atomic():
            purchase_order = super().create(validated_data)
            for item_data in items_data:
                PurchaseOrderItem.objects.create(purchase_order=purchase_order, **item_data)
        return purchase_order

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                instance.items.all().delete()
                for item_data in items_data:
                    PurchaseOrderItem.objects.create(purchase_order=instance, **item_data)
        return instance


class PurchaseOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PurchaseOrder.STATUS_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True)


class ReceiptLineSerializer(serializers.Serializer):
    item = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))


class PurchaseOrderReceiveSerializer(serializers.Serializer):
    items = ReceiptLineSerializer(many=True, required=False)


class SupplierPaymentSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    po_number = serializers.CharField(source='purchase_order.po_number', read_only=True, default=None)
    processed_by_username = serializers.CharField(source='processed_by.username', read_only=True, default=None)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = SupplierPayment
        fields = [
            'id', 'supplier', 'supplier_name', 'purchase_order', 'po_number', 'amount', 'currency',
            'payment_method', 'payment_date', 'due_date', 'status', 'reference', 'notes',
            'processed_by', 'processed_by_username', 'processed_at', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['processed_by', 'processed_at', 'created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        instance = self.instance
        if instance is not None and instance.status in ('COMPLETED', 'CANCELLED'):
            raise serializers.ValidationError(f'A {instance.status.lower()} payment cannot be modified')
        if instance is not None and 'status' in attrs and attrs['status'] != instance.status:
            raise serializers.ValidationError({'status': 'Use the status endpoint to change status'})
        if instance is None and attrs.get('status', 'PENDING') not in ('PENDING', 'PROCESSING'):
            raise serializers.ValidationError({'status': 'New payments start as PENDING or PROCESSING'})

        payment_date = attrs.get('payment_date', getattr(instance, 'payment_date', None))
        due_date = attrs.get('due_date', getattr(instance, 'due_date', None))
        if payment_date and due_date and payment_date > due_date:
            raise serializers.ValidationError({'payment_date': 'Payment date cannot be after due date'})

        supplier = attrs.get('supplier', getattr(instance, 'supplier', None))
        purchase_order = attrs.get('purchase_order', getattr(instance, 'purchase_order', None))
        if purchase_order is not None and purchase_order.supplier_id != supplier.id:
            raise serializers.ValidationError({'purchase_order': 'Purchase order belongs to a different supplier'})
        return attrs


class SupplierPaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SupplierPayment.STATUS_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True)
