from decimal import Decimal
from rest_framework import serializers
from backend.core.utils import generate_number
from backend.parties.validators import validate_phone_number
from .models import Employee, Bonus, Payroll, Attendance
from .payroll import get_extra_tax_rate
from .tax import calculate_tax, serialize_tax


class EmployeeSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    phone = serializers.CharField(max_length=20, validators=[validate_phone_number])
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_number', 'user', 'username', 'first_name', 'last_name', 'full_name',
            'email', 'phone', 'address', 'city', 'country', 'date_of_birth', 'hire_date', 'role',
            'salary', 'notes', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['employee_number', 'created_at', 'updated_at']

    def validate_salary(self, value):
        if value <= 0:
            raise serializers.ValidationError('Salary must be positive')
        return value

    def create(self, validated_data):
        validated_data['employee_number'] = generate_number('EMP', Employee, 'employee_number')
        return super().create(validated_data)


class BonusSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)

    class Meta:
        model = Bonus
        fields = [
            'id', 'employee', 'employee_name', 'period', 'period_type', 'bonus_type', 'amount',
            'status', 'reason', 'approved_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['approved_by', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Bonus amount must be positive')
        return value


class PayrollSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)
    employee_number = serializers.CharField(source='employee.employee_number', read_only=True)

    class Meta:
        model = Payroll
        fields = [
            'id', 'employee', 'employee_name', 'employee_number', 'period', 'period_type',
            'start_date', 'end_date', 'base_salary', 'overtime_pay', 'commission_pay', 'bonus_pay',
            'total_earnings', 'tax_deductions', 'other_deductions', 'total_deductions', 'net_pay',
            'status', 'pay_date', 'calculation_details', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'employee', 'period', 'period_type', 'base_salary', 'bonus_pay', 'total_earnings',
            'tax_deductions', 'total_deductions', 'net_pay', 'calculation_details',
            'created_by', 'created_at', 'updated_at'
        ]

    def validate(self, attrs):
        for field in ('overtime_pay', 'commission_pay', 'other_deductions'):
            if attrs.get(field, Decimal('0')) < 0:
                raise serializers.ValidationError({field: 'Amount cannot be negative'})
        return attrs

    def update(self, instance, validated_data):
        instance = super().update(instance, validated_data)
        instance.recalculate_totals()
        tax = calculate_tax(instance.total_earnings, instance.period_type, extra_rate_percent=get_extra_tax_rate())
        instance.tax_deductions = tax['total_tax']
        instance.calculation_details = {**(instance.calculation_details or {}), 'tax': serialize_tax(tax)}
        instance.recalculate_totals()
        instance.save()
        return instance


class PayrollGenerateSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.filter(is_active=True), required=False)
    employees = serializers.ListField(child=serializers.IntegerField(), required=False)
    period = serializers.CharField(max_length=20)
    period_type = serializers.ChoiceField(choices=Payroll.PERIOD_TYPE_CHOICES, default='MONTHLY')
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    overtime_pay = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=Decimal('0'))
    commission_pay = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=Decimal('0'))

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return attrs


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)
    total_hours = serializers.DecimalField(max_digits=6, decimal_places=2, read_only=True)

    class Meta:
        model = Attendance
        fields = [
            'id', 'employee', 'employee_name', 'attendance_date', 'clock_in_time', 'clock_out_time',
            'status', 'regular_hours', 'overtime_hours', 'total_hours', 'location_in', 'location_out',
            'ip_address', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ClockSerializer(serializers.Serializer):
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
