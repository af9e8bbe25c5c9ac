from rest_framework import serializers
from backend.core.utils import generate_number
from .models import Customer, Supplier
from .validators import validate_phone_number


class CustomerSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    phone = serializers.CharField(max_length=20, validators=[validate_phone_number])
    alternate_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True, validators=[validate_phone_number])

    class Meta:
        model = Customer
        fields = [
            'id', 'customer_number', 'first_name', 'last_name', 'full_name', 'email', 'phone',
            'alternate_phone', 'address', 'city', 'state', 'postal_code', 'country',
            'date_of_birth', 'gender', 'notes', 'preferred_contact_method', 'loyalty_points',
            'is_active', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['customer_number', 'created_by', 'created_at', 'updated_at']

    def validate_loyalty_points(self, value):
        if value < 0:
            raise serializers.ValidationError('Loyalty points cannot be negative')
        return value

    def validate(self, attrs):
        method = attrs.get('preferred_contact_method', getattr(self.instance, 'preferred_contact_method', None))
        email = attrs.get('email', getattr(self.instance, 'email', None))
        if method == 'EMAIL' and not email:
            raise serializers.ValidationError({'email': 'Email is required when preferred contact method is EMAIL'})
        return attrs

    def create(self, validated_data):
        validated_data['customer_number'] = generate_number('CUST', Customer, 'customer_number')
        return super().create(validated_data)


class CustomerSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'customer_number', 'full_name', 'phone', 'email']


class SupplierSerializer(serializers.ModelSerializer):
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, validators=[validate_phone_number])

    class Meta:
        model = Supplier
        fields = [
            'id', 'supplier_number', 'name', 'contact_person', 'email', 'phone', 'alternate_phone',
            'address', 'city', 'state', 'postal_code', 'country', 'tax_id', 'payment_terms',
            'lead_time_days', 'minimum_order', 'notes', 'status', 'is_active',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['supplier_number', 'created_by', 'created_at', 'updated_at']

    def validate_lead_time_days(self, value):
        if value > 365:
            raise serializers.ValidationError('Lead time cannot exceed 365 days')
        return value

    def validate_minimum_order(self, value):
        if value < 0:
            raise serializers.ValidationError('Minimum order cannot be negative')
        return value

    def create(self, validated_data):
        validated_data['supplier_number'] = generate_number('SUP', Supplier, 'supplier_number')
        return super().create(validated_data)
