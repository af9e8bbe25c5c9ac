from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.utils import create_audit_log
from .models import Customer, Supplier
from .serializers import CustomerSerializer, SupplierSerializer
from .filters import CustomerFilter, SupplierFilter


def _changed_fields(instance, validated_data):
    changes = {}
    for field, value in validated_data.items():
        old = getattr(instance, field, None)
        if old != value:
            changes[field] = {'old': str(old), 'new': str(value)}
    return changes


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List customers (search, filter, paginate) or create a new customer"""
    if request.method == 'GET':
        queryset = Customer.objects.all().order_by('-created_at')
        # Soft-deleted customers are hidden unless is_active is asked for explicitly
        if 'is_active' not in request.query_params:
            queryset = queryset.filter(is_active=True)
        queryset = CustomerFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, CustomerSerializer, default_limit=10)
    else:
        serializer = CustomerSerializer(data=request.data)
        if serializer.is_valid():
            customer = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Customer',
                object_id=customer.id,
                object_name=customer.full_name,
                object_reference=customer.customer_number,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or soft-delete a customer"""
    customer = get_object_or_404(Customer, pk=pk)

    if request.method == 'GET':
        serializer = CustomerSerializer(customer)
        data = serializer.data
        data['order_count'] = customer.orders.count()
        data['measurement_count'] = customer.measurements.filter(is_latest=True).count()
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = _changed_fields(customer, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Customer',
                object_id=customer.id,
                object_name=customer.full_name,
                object_reference=customer.customer_number,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        customer.is_active = False
        customer.save(update_fields=['is_active', 'updated_at'])
        create_audit_log(
            request=request,
            action='delete',
            model_name='Customer',
            object_id=customer.id,
            object_name=customer.full_name,
            object_reference=customer.customer_number,
            changes={'is_active': {'old': 'True', 'new': 'False'}},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def customer_adjust_loyalty(request, pk):
    """Add (or with a negative amount, redeem) loyalty points"""
    customer = get_object_or_404(Customer, pk=pk)
    try:
        points = int(request.data.get('points', 0))
    except (AttributeError, TypeError, ValueError):
        return Response({'points': ['A whole number is required.']}, status=status.HTTP_400_BAD_REQUEST)
    if customer.loyalty_points + points < 0:
        return Response({'points': ['Insufficient loyalty points.']}, status=status.HTTP_400_BAD_REQUEST)
    old_points = customer.loyalty_points
    customer.loyalty_points += points
    customer.save(update_fields=['loyalty_points', 'updated_at'])
    create_audit_log(
        request=request,
        action='update',
        model_name='Customer',
        object_id=customer.id,
        object_reference=customer.customer_number,
        changes={'loyalty_points': {'old': str(old_points), 'new': str(customer.loyalty_points)}},
    )
    return Response({'loyalty_points': customer.loyalty_points})


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all().order_by('name')
        queryset = SupplierFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, SupplierSerializer, default_limit=10)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name,
                object_reference=supplier.supplier_number,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or deactivate a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        # Suppliers referenced by purchase orders are kept and marked inactive
        supplier.is_active = False
        supplier.status = 'INACTIVE'
        supplier.save(update_fields=['is_active', 'status', 'updated_at'])
        create_audit_log(
            request=request,
            action='delete',
            model_name='Supplier',
            object_id=supplier.id,
            object_name=supplier.name,
            object_reference=supplier.supplier_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
