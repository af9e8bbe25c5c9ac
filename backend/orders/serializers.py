from decimal import Decimal
from django.utils import timezone
from rest_framework import serializers
from backend.core.utils import generate_number
from backend.parties.serializers import CustomerSummarySerializer
from .models import Measurement, Order, Task
from .constants import calculate_delivery_date
from .measurement_templates import validate_measurements
from .workflow import can_transition, stage_progress


class MeasurementSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)

    class Meta:
        model = Measurement
        fields = [
            'id', 'customer', 'customer_name', 'garment_type', 'unit', 'measurements', 'notes',
            'version', 'is_latest', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['version', 'created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        instance = self.instance
        if instance is not None:
            # Versions stay attached to their customer and garment type
            for field in ('customer', 'garment_type'):
                if field in attrs and attrs[field] != getattr(instance, field):
                    raise serializers.ValidationError({field: 'Cannot be changed on an existing measurement'})
        garment_type = attrs.get('garment_type', getattr(instance, 'garment_type', None))
        if 'measurements' in attrs or instance is None:
            errors = validate_measurements(garment_type, attrs.get('measurements', {}))
            if errors:
                raise serializers.ValidationError({'measurements': errors})
        return attrs


class OrderSerializer(serializers.ModelSerializer):
    customer_detail = CustomerSummarySerializer(source='customer', read_only=True)
    fabric_name = serializers.CharField(source='fabric.name', read_only=True, default=None)
    delivery_date = serializers.DateField(required=False)
    order_date = serializers.DateField(required=False)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer', 'customer_detail', 'measurement', 'fabric', 'fabric_name',
            'garment_type', 'order_type', 'service_description', 'special_instructions',
            'order_date', 'delivery_date', 'status', 'priority', 'progress', 'total_amount',
            'deposit_amount', 'balance_amount', 'is_urgent', 'pieces', 'original_measurements',
            'modified_measurements', 'alteration_notes', 'alteration_history',
            'created_by', 'created_by_employee', 'created_at', 'updated_at'
        ]
        read_only_fields = ['order_number', 'balance_amount', 'created_by', 'created_at', 'updated_at']

    def get_progress(self, obj):
        return stage_progress(obj.status)

    def validate_status(self, value):
        if self.instance is None:
            if value != 'RECEIVED':
                raise serializers.ValidationError('New orders start in RECEIVED')
        elif not can_transition(self.instance.status, value):
            raise serializers.ValidationError(f"Cannot change status from {self.instance.status} to {value}")
        return value

    def validate(self, attrs):
        instance = self.instance
        total = attrs.get('total_amount', getattr(instance, 'total_amount', Decimal('0.00')))
        deposit = attrs.get('deposit_amount', getattr(instance, 'deposit_amount', Decimal('0.00')))
        if total is not None and total < 0:
            raise serializers.ValidationError({'total_amount': 'Total amount cannot be negative'})
        if deposit is not None and deposit < 0:
            raise serializers.ValidationError({'deposit_amount': 'Deposit cannot be negative'})
        if deposit > total:
            raise serializers.ValidationError({'deposit_amount': 'Deposit cannot exceed total amount'})

        customer = attrs.get('customer', getattr(instance, 'customer', None))
        if customer is not None and not customer.is_active and instance is None:
            raise serializers.ValidationError({'customer': 'Customer is inactive'})
        measurement = attrs.get('measurement')
        if measurement is not None and customer is not None and measurement.customer_id != customer.id:
            raise serializers.ValidationError({'measurement': 'Measurement belongs to a different customer'})

        if instance is None:
            order_date = attrs.get('order_date') or timezone.localdate()
            attrs['order_date'] = order_date
            delivery_date = attrs.get('delivery_date')
            if delivery_date is None:
                attrs['delivery_date'] = calculate_delivery_date(
                    order_date, attrs.get('garment_type'), attrs.get('order_type'), attrs.get('is_urgent', False)
                )
            elif delivery_date <= timezone.localdate():
                raise serializers.ValidationError({'delivery_date': 'Delivery date must be in the future'})
        return attrs

    def create(self, validated_data):
        validated_data['order_number'] = generate_number('ORD', Order, 'order_number')
        validated_data['balance_amount'] = validated_data.get('total_amount', Decimal('0.00')) - validated_data.get('deposit_amount', Decimal('0.00'))
        if validated_data.get('is_urgent'):
            validated_data['priority'] = 'URGENT'
        return super().create(validated_data)

    def update(self, instance, validated_data):
        instance = super().update(instance, validated_data)
        if 'total_amount' in validated_data or 'deposit_amount' in validated_data:
            instance.balance_amount = instance.total_amount - instance.deposit_amount
            instance.save(update_fields=['balance_amount', 'updated_at'])
        return instance


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Order._meta.get_field('status').choices])
    notes = serializers.CharField(required=False, allow_blank=True)
    notify_customer = serializers.BooleanField(default=False)


class TaskSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    assigned_employee_name = serializers.CharField(source='assigned_employee.full_name', read_only=True, default=None)
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Task
        fields = [
            'id', 'order', 'order_number', 'stage', 'assigned_employee', 'assigned_employee_name',
            'deadline', 'priority', 'status', 'is_overdue', 'estimated_hours', 'actual_hours', 'notes',
            'assigned_at', 'started_at', 'completed_at', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['assigned_at', 'started_at', 'completed_at', 'created_by', 'created_at', 'updated_at']

    def get_is_overdue(self, obj):
        if obj.status == 'OVERDUE':
            return True
        return bool(obj.deadline and obj.status in ('PENDING', 'IN_PROGRESS') and obj.deadline < timezone.now())

    def validate(self, attrs):
        for field in ('estimated_hours', 'actual_hours'):
            if attrs.get(field) is not None and attrs[field] < 0:
                raise serializers.ValidationError({field: 'Hours cannot be negative'})
        return attrs


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.STATUS_CHOICES)
    actual_hours = serializers.DecimalField(max_digits=6, decimal_places=2, required=False, min_value=Decimal('0'))


class TaskAssignSerializer(serializers.Serializer):
    employee = serializers.IntegerField()
