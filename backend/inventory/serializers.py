from decimal import Decimal
from rest_framework import serializers
from .models import Fabric, InventoryItem, InventoryTransaction, MaterialUsage, Waste

COST_TOLERANCE = Decimal('0.01')
TOTAL_COST_MISMATCH = 'Total cost must match quantity times unit price'


def check_total_cost(serializer, attrs, unit_field):
    """
    Reject a total_cost that differs from quantity * unit price by 0.01 or
    more. Values missing from a partial update are taken from the instance.
    """
    instance = serializer.instance
    quantity = attrs.get('quantity', getattr(instance, 'quantity', None))
    unit = attrs.get(unit_field, getattr(instance, unit_field, None))
    total_cost = attrs.get('total_cost', getattr(instance, 'total_cost', None))
    if quantity is None or unit is None or total_cost is None:
        return
    if abs(Decimal(total_cost) - Decimal(quantity) * Decimal(unit)) >= COST_TOLERANCE:
        raise serializers.ValidationError({'total_cost': TOTAL_COST_MISMATCH})


class FabricSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Fabric
        fields = [
            'id', 'name', 'description', 'category', 'color', 'pattern', 'material',
            'price_per_meter', 'stock_quantity', 'low_stock_threshold', 'min_order_quantity',
            'image_url', 'is_active', 'is_low_stock', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        for field in ('price_per_meter', 'stock_quantity', 'low_stock_threshold', 'min_order_quantity'):
            if field in attrs and attrs[field] < 0:
                raise serializers.ValidationError({field: 'Value cannot be negative'})
        return attrs


class InventoryItemSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'sku', 'name', 'description', 'category', 'unit', 'unit_price', 'currency',
            'current_stock', 'min_stock_level', 'supplier', 'supplier_name', 'is_active',
            'is_low_stock', 'created_by', 'created_at', 'updated_at'
        ]
        # Stock only changes through stock transactions
        read_only_fields = ['current_stock', 'created_by', 'created_at', 'updated_at']

    def validate_unit_price(self, value):
        if value < 0:
            raise serializers.ValidationError('Unit price cannot be negative')
        return value

    def validate_min_stock_level(self, value):
        if value < 0:
            raise serializers.ValidationError('Minimum stock level cannot be negative')
        return value


class InventoryTransactionSerializer(serializers.ModelSerializer):
    inventory_item_sku = serializers.CharField(source='inventory_item.sku', read_only=True)
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = InventoryTransaction
        fields = [
            'id', 'inventory_item', 'inventory_item_sku', 'inventory_item_name', 'type', 'quantity',
            'previous_stock', 'new_stock', 'reference_type', 'reference_id', 'notes',
            'created_by', 'created_by_username', 'created_at'
        ]
        read_only_fields = fields


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'))
    type = serializers.ChoiceField(choices=InventoryTransaction.TYPE_CHOICES)
    reference_type = serializers.CharField(max_length=50, required=False, allow_blank=True)
    reference_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['type'] != 'ADJUSTMENT' and attrs['quantity'] <= 0:
            raise serializers.ValidationError({'quantity': 'Quantity must be greater than zero'})
        return attrs


class MaterialUsageSerializer(serializers.ModelSerializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.01'))
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    inventory_item_category = serializers.CharField(source='inventory_item.category', read_only=True)

    class Meta:
        model = MaterialUsage
        fields = [
            'id', 'order', 'order_number', 'inventory_item', 'inventory_item_name',
            'inventory_item_category', 'quantity', 'unit_price', 'total_cost', 'usage_date',
            'notes', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        check_total_cost(self, attrs, 'unit_price')
        return attrs


class WasteSerializer(serializers.ModelSerializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.01'))
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = Waste
        fields = [
            'id', 'inventory_item', 'inventory_item_name', 'order', 'order_number', 'quantity',
            'unit_cost', 'total_cost', 'reason', 'description', 'waste_date',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        check_total_cost(self, attrs, 'unit_cost')
        return attrs
