from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import F
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.utils import create_audit_log
from .models import Fabric, InventoryItem, InventoryTransaction, MaterialUsage, Waste
from .serializers import (
    FabricSerializer, InventoryItemSerializer, InventoryTransactionSerializer,
    StockUpdateSerializer, MaterialUsageSerializer, WasteSerializer
)
from .filters import FabricFilter, InventoryItemFilter, MaterialUsageFilter, WasteFilter
from .services import (
    apply_stock_transaction, low_stock_items, inventory_value, inventory_analytics,
    InsufficientStock, InvalidTransactionType
)


# Fabric views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def fabric_list_create(request):
    """List all fabrics or create a new fabric"""
    if request.method == 'GET':
        queryset = FabricFilter(request.query_params, queryset=Fabric.objects.all()).qs
        return paginated_response(request, queryset, FabricSerializer, default_limit=20)
    else:
        serializer = FabricSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def fabric_detail(request, pk):
    """Retrieve, update or deactivate a fabric"""
    fabric = get_object_or_404(Fabric, pk=pk)

    if request.method == 'GET':
        return Response(FabricSerializer(fabric).data)
    elif request.method in ('PUT', 'PATCH'):
        old_stock = fabric.stock_quantity
        serializer = FabricSerializer(fabric, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            if fabric.stock_quantity != old_stock:
                create_audit_log(
                    request=request,
                    action='stock_adjust',
                    model_name='Fabric',
                    object_id=fabric.id,
                    object_name=fabric.name,
                    changes={'stock_quantity': {'old': str(old_stock), 'new': str(fabric.stock_quantity)}},
                )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        fabric.is_active = False
        fabric.save(update_fields=['is_active', 'updated_at'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fabric_low_stock(request):
    """Active fabrics at or below their low stock threshold"""
    fabrics = Fabric.objects.filter(is_active=True, stock_quantity__lte=F('low_stock_threshold'))
    return Response(FabricSerializer(fabrics, many=True).data)


# InventoryItem views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_item_list_create(request):
    """List all inventory items or create a new item"""
    if request.method == 'GET':
        queryset = InventoryItem.objects.select_related('supplier')
        queryset = InventoryItemFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, InventoryItemSerializer, default_limit=20)
    else:
        serializer = InventoryItemSerializer(data=request.data)
        if serializer.is_valid():
            item = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.name,
                object_reference=item.sku,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_item_detail(request, pk):
    """Retrieve, update or deactivate an inventory item"""
    item = get_object_or_404(InventoryItem.objects.select_related('supplier'), pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        item.is_active = False
        item.save(update_fields=['is_active', 'updated_at'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_item_update_stock(request, pk):
    """Apply a typed stock transaction to an item"""
    item = get_object_or_404(InventoryItem, pk=pk)
    serializer = StockUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    previous_stock = item.current_stock
    try:
        item = apply_stock_transaction(
            item, data['quantity'], data['type'],
            reference_type=data.get('reference_type', ''),
            reference_id=data.get('reference_id', ''),
            notes=data.get('notes', ''),
            user=request.user,
        )
    except (InsufficientStock, InvalidTransactionType) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='stock_adjust',
        model_name='InventoryItem',
        object_id=item.id,
        object_name=item.name,
        object_reference=item.sku,
        changes={
            'type': data['type'],
            'quantity': str(data['quantity']),
            'previous_stock': str(previous_stock),
            'new_stock': str(item.current_stock),
        },
    )
    return Response(InventoryItemSerializer(item).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_item_transactions(request, pk):
    item = get_object_or_404(InventoryItem, pk=pk)
    transactions = InventoryTransaction.objects.filter(inventory_item=item).select_related('inventory_item', 'created_by')
    return Response(InventoryTransactionSerializer(transactions, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_low_stock(request):
    """Low stock alerts"""
    return Response(InventoryItemSerializer(low_stock_items(), many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_total_value(request):
    return Response({'total_value': inventory_value()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_item_analytics(request):
    data = inventory_analytics()
    data['recent_transactions'] = InventoryTransactionSerializer(data['recent_transactions'], many=True).data
    return Response(data)


# MaterialUsage views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def material_usage_list_create(request):
    if request.method == 'GET':
        queryset = MaterialUsage.objects.select_related('order', 'inventory_item')
        queryset = MaterialUsageFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, MaterialUsageSerializer, default_limit=20)
    else:
        serializer = MaterialUsageSerializer(data=request.data)
        if serializer.is_valid():
            usage = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='MaterialUsage',
                object_id=usage.id,
                object_name=usage.inventory_item.name,
                object_reference=usage.order.order_number,
                changes={'quantity': str(usage.quantity), 'total_cost': str(usage.total_cost)},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def material_usage_detail(request, pk):
    usage = get_object_or_404(MaterialUsage.objects.select_related('order', 'inventory_item'), pk=pk)

    if request.method == 'GET':
        return Response(MaterialUsageSerializer(usage).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MaterialUsageSerializer(usage, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        usage.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Waste views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def waste_list_create(request):
    if request.method == 'GET':
        queryset = Waste.objects.select_related('order', 'inventory_item')
        queryset = WasteFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, WasteSerializer, default_limit=20)
    else:
        serializer = WasteSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def waste_detail(request, pk):
    waste = get_object_or_404(Waste.objects.select_related('order', 'inventory_item'), pk=pk)

    if request.method == 'GET':
        return Response(WasteSerializer(waste).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WasteSerializer(waste, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        waste.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
