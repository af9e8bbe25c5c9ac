import logging
from datetime import date
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsManagerOrAdmin
from backend.core.serializers import EventSerializer
from backend.core.utils import create_audit_log
from backend.communications.services import send_order_status_update, TemplateNotFound, ProviderNotConfigured
from backend.employees.models import Employee
from backend.reports.material_costs import calculate_order_material_cost
from .models import Measurement, Order, Task
from .serializers import (
    MeasurementSerializer, OrderSerializer, OrderStatusSerializer,
    TaskSerializer, TaskStatusSerializer, TaskAssignSerializer
)
from .filters import OrderFilter, TaskFilter
from .constants import get_lead_time_days, calculate_delivery_date, get_pricing_multiplier
from .measurement_templates import MEASUREMENT_TEMPLATES, get_template
from .workflow import InvalidStatusTransition, allowed_transitions
from .services import (
    change_order_status, create_measurement, mark_measurement_latest, retire_measurement,
    assign_task, change_task_status, mark_overdue_tasks, employee_workload, order_timeline
)

logger = logging.getLogger(__name__)


def _transition_error(exc):
    return Response(
        {'status': [str(exc)], 'current_status': exc.current, 'allowed': exc.allowed},
        status=status.HTTP_400_BAD_REQUEST,
    )


# Order views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def order_list_create(request):
    """List orders or take in a new order"""
    if request.method == 'GET':
        queryset = Order.objects.select_related('customer', 'fabric', 'measurement')
        queryset = OrderFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, OrderSerializer, default_limit=10)
    else:
        serializer = OrderSerializer(data=request.data)
        if serializer.is_valid():
            order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Order',
                object_id=order.id,
                object_name=order.customer.full_name,
                object_reference=order.order_number,
                changes={'total_amount': str(order.total_amount), 'delivery_date': str(order.delivery_date)},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def order_detail(request, pk):
    """Retrieve, update or cancel an order"""
    order = get_object_or_404(Order.objects.select_related('customer', 'fabric', 'measurement'), pk=pk)

    if request.method == 'GET':
        return Response(OrderSerializer(order).data)
    elif request.method in ('PUT', 'PATCH'):
        requested = request.data.get('status') if isinstance(request.data, dict) else None
        if requested and requested != order.status and requested not in allowed_transitions(order.status):
            return _transition_error(InvalidStatusTransition(order.status, requested))
        serializer = OrderSerializer(order, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        new_status = serializer.validated_data.pop('status', None)
        with transaction.atomic():
            order = serializer.save()
            if new_status:
                change_order_status(order, new_status, request=request)
        create_audit_log(
            request=request,
            action='update',
            model_name='Order',
            object_id=order.id,
            object_name=order.customer.full_name,
            object_reference=order.order_number,
            changes={k: str(v) for k, v in serializer.validated_data.items()},
        )
        return Response(OrderSerializer(order).data)
    else:  # DELETE
        try:
            change_order_status(order, 'CANCELLED', request=request, notes='Cancelled via delete')
        except InvalidStatusTransition as e:
            return _transition_error(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def order_update_status(request, pk):
    """Move an order to another production stage, optionally notifying the customer"""
    order = get_object_or_404(Order.objects.select_related('customer'), pk=pk)
    serializer = OrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        change_order_status(order, data['status'], request=request, notes=data.get('notes', ''))
    except InvalidStatusTransition as e:
        return _transition_error(e)

    response = OrderSerializer(order).data
    if data['notify_customer']:
        try:
            log = send_order_status_update(order, user=request.user)
            response['notification'] = {'status': log.status, 'message_log': log.id}
        except (TemplateNotFound, ProviderNotConfigured) as e:
            logger.warning(f"Order {order.order_number} notification skipped: {e}")
            response['notification'] = {'status': 'SKIPPED', 'error': str(e)}
    return Response(response)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_history(request, pk):
    order = get_object_or_404(Order, pk=pk)
    return Response(EventSerializer(order_timeline(order), many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_material_cost(request, pk):
    order = get_object_or_404(Order, pk=pk)
    return Response(calculate_order_material_cost(order.id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_lead_time(request):
    """
    Estimate a delivery date.

    Query params: garment_type, order_type, is_urgent, order_date (YYYY-MM-DD).
    """
    params = request.query_params
    garment_type = params.get('garment_type')
    order_type = params.get('order_type')
    is_urgent = params.get('is_urgent', '').lower() in ('1', 'true', 'yes')
    try:
        order_date = date.fromisoformat(params['order_date']) if params.get('order_date') else date.today()
    except ValueError:
        return Response({'order_date': ['Invalid date, use YYYY-MM-DD']}, status=status.HTTP_400_BAD_REQUEST)
    return Response({
        'garment_type': garment_type,
        'order_type': order_type,
        'is_urgent': is_urgent,
        'lead_time_days': get_lead_time_days(garment_type, order_type, is_urgent),
        'order_date': order_date,
        'delivery_date': calculate_delivery_date(order_date, garment_type, order_type, is_urgent),
        'pricing_multiplier': str(get_pricing_multiplier(order_type)),
    })


# Measurement views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def measurement_list_create(request):
    """
    List measurements or record a new version.

    GET filters: customer, garment_type, latest (true to return only current versions).
    """
    if request.method == 'GET':
        queryset = Measurement.objects.select_related('customer')
        customer = request.query_params.get('customer')
        garment_type = request.query_params.get('garment_type')
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if garment_type:
            queryset = queryset.filter(garment_type=garment_type)
        if request.query_params.get('latest', '').lower() == 'true':
            queryset = queryset.filter(is_latest=True)
        return paginated_response(request, queryset, MeasurementSerializer, default_limit=20)
    else:
        serializer = MeasurementSerializer(data=request.data)
        if serializer.is_valid():
            measurement = create_measurement(serializer.validated_data, user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Measurement',
                object_id=measurement.id,
                object_name=str(measurement),
                object_reference=measurement.customer.customer_number,
            )
            return Response(MeasurementSerializer(measurement).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def measurement_detail(request, pk):
    measurement = get_object_or_404(Measurement.objects.select_related('customer'), pk=pk)

    if request.method == 'GET':
        return Response(MeasurementSerializer(measurement).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MeasurementSerializer(measurement, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        make_latest = serializer.validated_data.pop('is_latest', None)
        with transaction.atomic():
            measurement = serializer.save()
            if make_latest is True:
                mark_measurement_latest(measurement)
            elif make_latest is False and measurement.is_latest:
                retire_measurement(measurement)
        return Response(MeasurementSerializer(measurement).data)
    else:  # DELETE
        retire_measurement(measurement)
        create_audit_log(
            request=request,
            action='delete',
            model_name='Measurement',
            object_id=measurement.id,
            object_name=str(measurement),
            object_reference=measurement.customer.customer_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def measurement_templates(request):
    garment_type = request.query_params.get('garment_type')
    if garment_type:
        template = get_template(garment_type)
        if template is None:
            return Response({'error': f'Unknown garment type: {garment_type}'}, status=status.HTTP_404_NOT_FOUND)
        return Response({garment_type: template})
    return Response(MEASUREMENT_TEMPLATES)


# Task views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def task_list_create(request):
    if request.method == 'GET':
        queryset = Task.objects.select_related('order', 'assigned_employee')
        queryset = TaskFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, TaskSerializer, default_limit=20)
    else:
        serializer = TaskSerializer(data=request.data)
        if serializer.is_valid():
            task = serializer.save(created_by=request.user)
            if task.assigned_employee_id:
                assign_task(task, task.assigned_employee, request=request)
            return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def task_detail(request, pk):
    task = get_object_or_404(Task.objects.select_related('order', 'assigned_employee'), pk=pk)

    if request.method == 'GET':
        return Response(TaskSerializer(task).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = TaskSerializer(task, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        new_status = serializer.validated_data.pop('status', None)
        task = serializer.save()
        if new_status and new_status != task.status:
            change_task_status(task, new_status, request=request)
        return Response(TaskSerializer(task).data)
    else:  # DELETE
        task.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def task_assign(request, pk):
    task = get_object_or_404(Task, pk=pk)
    serializer = TaskAssignSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    employee = get_object_or_404(Employee, pk=serializer.validated_data['employee'], is_active=True)
    task = assign_task(task, employee, request=request)
    return Response(TaskSerializer(task).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def task_update_status(request, pk):
    task = get_object_or_404(Task, pk=pk)
    serializer = TaskStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    task = change_task_status(
        task,
        serializer.validated_data['status'],
        actual_hours=serializer.validated_data.get('actual_hours'),
        request=request,
    )
    return Response(TaskSerializer(task).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def task_mark_overdue(request):
    return Response({'updated': mark_overdue_tasks()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def task_workload(request):
    return Response(employee_workload())
