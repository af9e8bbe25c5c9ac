from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsManagerOrAdmin
from backend.core.utils import create_audit_log
from .models import PurchaseOrder, SupplierPayment
from backend.parties.models import Supplier
from .serializers import (
    PurchaseOrderSerializer, PurchaseOrderStatusSerializer, PurchaseOrderReceiveSerializer,
    SupplierPaymentSerializer, SupplierPaymentStatusSerializer,
)
from .filters import PurchaseOrderFilter, SupplierPaymentFilter
from .services import (
    set_purchase_order_status, receive_purchase_order, purchase_order_stats, PurchaseOrderError,
    set_payment_status, supplier_performance, SupplierPaymentError,
)


def _purchase_orders():
    return PurchaseOrder.objects.select_related('supplier', 'approved_by').prefetch_related('items', 'items__inventory_item')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or raise a new one"""
    if request.method == 'GET':
        queryset = PurchaseOrderFilter(request.query_params, queryset=_purchase_orders()).qs
        return paginated_response(request, queryset, PurchaseOrderSerializer, default_limit=10)
    else:
        serializer = PurchaseOrderSerializer(data=request.data)
        if serializer.is_valid():
            purchase_order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='PurchaseOrder',
                object_id=purchase_order.id,
                object_name=purchase_order.supplier.name,
                object_reference=purchase_order.po_number,
                changes={'total_amount': str(purchase_order.total_amount)},
            )
            return Response(PurchaseOrderSerializer(purchase_order).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    purchase_order = get_object_or_404(_purchase_orders(), pk=pk)

    if request.method == 'GET':
        return Response(PurchaseOrderSerializer(purchase_order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PurchaseOrderSerializer(purchase_order, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            purchase_order = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='PurchaseOrder',
                object_id=purchase_order.id,
                object_name=purchase_order.supplier.name,
                object_reference=purchase_order.po_number,
            )
            return Response(PurchaseOrderSerializer(purchase_order).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if purchase_order.status != 'DRAFT':
            return Response(
                {'error': 'Only draft purchase orders can be deleted; cancel it instead'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        po_number = purchase_order.po_number
        purchase_order_id = purchase_order.id
        purchase_order.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='PurchaseOrder',
            object_id=purchase_order_id,
            object_reference=po_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def purchase_order_update_status(request, pk):
    purchase_order = get_object_or_404(_purchase_orders(), pk=pk)
    serializer = PurchaseOrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    old_status = purchase_order.status
    try:
        purchase_order = set_purchase_order_status(
            purchase_order,
            serializer.validated_data['status'],
            user=request.user,
            notes=serializer.validated_data.get('notes', ''),
        )
    except PurchaseOrderError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(
        request=request,
        action='status_change',
        model_name='PurchaseOrder',
        object_id=purchase_order.id,
        object_name=purchase_order.supplier.name,
        object_reference=purchase_order.po_number,
        changes={'status': {'old': old_status, 'new': purchase_order.status}},
    )
    return Response(PurchaseOrderSerializer(purchase_order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_receive(request, pk):
    """
    Receive goods against a purchase order.

    Body: {"items": [{"item": <po item id>, "quantity": "5"}]}. Without
    items, all outstanding quantities are received.
    """
    purchase_order = get_object_or_404(PurchaseOrder, pk=pk)
    serializer = PurchaseOrderReceiveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    lines = serializer.validated_data.get('items')
    receipts = {line['item']: line['quantity'] for line in lines} if lines else None
    try:
        purchase_order = receive_purchase_order(purchase_order, receipts, user=request.user)
    except PurchaseOrderError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(
        request=request,
        action='po_receive',
        model_name='PurchaseOrder',
        object_id=purchase_order.id,
        object_name=purchase_order.supplier.name,
        object_reference=purchase_order.po_number,
        changes={'received': {str(k): str(v) for k, v in (receipts or {}).items()} or 'all outstanding'},
    )
    return Response(PurchaseOrderSerializer(get_object_or_404(_purchase_orders(), pk=pk)).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_statistics(request):
    return Response(purchase_order_stats())


# Supplier payment views
@api_view(['GET', 'POST'])
@permission_classes([IsManagerOrAdmin])
def supplier_payment_list_create(request):
    if request.method == 'GET':
        queryset = SupplierPaymentFilter(
            request.query_params,
            queryset=SupplierPayment.objects.select_related('supplier', 'purchase_order', 'processed_by'),
        ).qs
        return paginated_response(request, queryset, SupplierPaymentSerializer, default_limit=20)
    else:
        serializer = SupplierPaymentSerializer(data=request.data)
        if serializer.is_valid():
            payment = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='SupplierPayment',
                object_id=payment.id,
                object_name=payment.supplier.name,
                object_reference=payment.reference,
                changes={'amount': str(payment.amount), 'due_date': str(payment.due_date)},
            )
            return Response(SupplierPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsManagerOrAdmin])
def supplier_payment_detail(request, pk):
    payment = get_object_or_404(SupplierPayment.objects.select_related('supplier', 'purchase_order'), pk=pk)

    if request.method == 'GET':
        return Response(SupplierPaymentSerializer(payment).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierPaymentSerializer(payment, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            payment = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='SupplierPayment',
                object_id=payment.id,
                object_name=payment.supplier.name,
                object_reference=payment.reference,
            )
            return Response(SupplierPaymentSerializer(payment).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if payment.status == 'COMPLETED':
            return Response({'error': 'Completed payments cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST)
        payment_id = payment.id
        supplier_name = payment.supplier.name
        payment.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='SupplierPayment',
            object_id=payment_id,
            object_name=supplier_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def supplier_payment_update_status(request, pk):
    payment = get_object_or_404(SupplierPayment.objects.select_related('supplier'), pk=pk)
    serializer = SupplierPaymentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    old_status = payment.status
    try:
        payment = set_payment_status(
            payment,
            serializer.validated_data['status'],
            user=request.user,
            notes=serializer.validated_data.get('notes', ''),
        )
    except SupplierPaymentError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(
        request=request,
        action='status_change',
        model_name='SupplierPayment',
        object_id=payment.id,
        object_name=payment.supplier.name,
        changes={'status': {'old': old_status, 'new': payment.status}},
    )
    return Response(SupplierPaymentSerializer(payment).data)


@api_view(['GET'])
@permission_classes([IsManagerOrAdmin])
def supplier_performance_detail(request, pk):
    """Order completion, delivery punctuality and payment balance for one supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)
    return Response(supplier_performance(supplier))
