from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsAdminRole, IsManagerOrAdmin
from backend.core.templating import render_placeholders, extract_placeholders
from backend.core.utils import create_audit_log
from backend.orders.models import Order
from backend.parties.models import Customer
from .models import CommunicationTemplate, CommunicationProvider, MessageLog
from .serializers import (
    CommunicationTemplateSerializer, CommunicationProviderSerializer, MessageLogSerializer,
    SendMessageSerializer, BulkMessageSerializer, MessageStatusSerializer, TemplatePreviewSerializer
)
from .filters import CommunicationTemplateFilter, MessageLogFilter
from .services import (
    send_message, send_bulk_messages, process_scheduled_messages, update_message_status,
    send_order_status_update, send_birthday_wish, communication_analytics, recipient_for,
    TemplateNotFound, ProviderNotConfigured
)


def _dispatch_error(exc):
    code = status.HTTP_404_NOT_FOUND if isinstance(exc, TemplateNotFound) else status.HTTP_400_BAD_REQUEST
    return Response({'error': str(exc)}, status=code)


def _log_send(request, log):
    create_audit_log(
        request=request,
        action='message_send',
        model_name='MessageLog',
        object_id=log.id,
        object_name=log.recipient,
        object_reference=log.communication_type,
        changes={'status': log.status},
    )


# Template views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def template_list_create(request):
    if request.method == 'GET':
        queryset = CommunicationTemplateFilter(request.query_params, queryset=CommunicationTemplate.objects.all()).qs
        return paginated_response(request, queryset, CommunicationTemplateSerializer, default_limit=10)
    else:
        serializer = CommunicationTemplateSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def template_detail(request, pk):
    template = get_object_or_404(CommunicationTemplate, pk=pk)

    if request.method == 'GET':
        data = CommunicationTemplateSerializer(template).data
        data['recent_messages'] = MessageLogSerializer(template.messages.select_related('customer')[:10], many=True).data
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CommunicationTemplateSerializer(template, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        template.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def template_preview(request, pk):
    """Render a template with sample variables without sending it"""
    template = get_object_or_404(CommunicationTemplate, pk=pk)
    serializer = TemplatePreviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    variables = serializer.validated_data.get('variables', {})
    placeholders = extract_placeholders(f"{template.subject} {template.content}")
    return Response({
        'subject': render_placeholders(template.subject, variables),
        'content': render_placeholders(template.content, variables),
        'placeholders': placeholders,
        'missing_variables': [name for name in placeholders if name not in variables],
    })


# Provider configuration views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def provider_list_create(request):
    if request.method == 'GET':
        queryset = CommunicationProvider.objects.all()
        for field in ('provider', 'communication_type'):
            value = request.query_params.get(field)
            if value:
                queryset = queryset.filter(**{field: value})
        return Response(CommunicationProviderSerializer(queryset, many=True).data)
    else:
        serializer = CommunicationProviderSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def provider_detail(request, pk):
    config = get_object_or_404(CommunicationProvider, pk=pk)

    if request.method == 'GET':
        return Response(CommunicationProviderSerializer(config).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CommunicationProviderSerializer(config, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        config.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Message views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_list(request):
    queryset = MessageLog.objects.select_related('customer', 'template')
    queryset = MessageLogFilter(request.query_params, queryset=queryset).qs
    return paginated_response(request, queryset, MessageLogSerializer, default_limit=20)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_detail(request, pk):
    log = get_object_or_404(MessageLog.objects.select_related('customer', 'template'), pk=pk)
    return Response(MessageLogSerializer(log).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def message_send(request):
    serializer = SendMessageSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    customer = None
    if data.get('customer'):
        customer = get_object_or_404(Customer, pk=data['customer'])
    try:
        template = CommunicationTemplate.objects.get(pk=data['template'])
    except CommunicationTemplate.DoesNotExist:
        return _dispatch_error(TemplateNotFound('Template not found'))

    communication_type = data.get('communication_type') or template.communication_type
    recipient = data.get('recipient') or recipient_for(customer, communication_type)
    variables = data.get('variables', {})
    if customer is not None:
        variables = {'customerName': customer.full_name, 'customerNumber': customer.customer_number, **variables}

    try:
        log = send_message(
            template,
            recipient,
            variables=variables,
            customer=customer,
            communication_type=communication_type,
            scheduled_for=data.get('scheduled_for'),
            user=request.user,
        )
    except (TemplateNotFound, ProviderNotConfigured) as e:
        return _dispatch_error(e)
    _log_send(request, log)
    return Response(MessageLogSerializer(log).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def message_send_bulk(request):
    serializer = BulkMessageSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        logs = send_bulk_messages(
            data['template'],
            data['customer_ids'],
            variables=data.get('variables'),
            scheduled_for=data.get('scheduled_for'),
            user=request.user,
        )
    except (TemplateNotFound, ProviderNotConfigured) as e:
        return _dispatch_error(e)
    return Response({
        'total': len(logs),
        'sent': sum(1 for log in logs if log.status == 'SENT'),
        'failed': sum(1 for log in logs if log.status == 'FAILED'),
        'pending': sum(1 for log in logs if log.status == 'PENDING'),
        'messages': MessageLogSerializer(logs, many=True).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def message_update_status(request, pk):
    """Record a delivery report for a message"""
    log = get_object_or_404(MessageLog, pk=pk)
    serializer = MessageStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    log = update_message_status(log, serializer.validated_data['status'], serializer.validated_data.get('error_message', ''))
    return Response(MessageLogSerializer(log).data)


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def message_process_scheduled(request):
    return Response({'processed': process_scheduled_messages()})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def message_order_status(request):
    data = request.data if isinstance(request.data, dict) else {}
    order = get_object_or_404(Order.objects.select_related('customer'), pk=data.get('order'))
    try:
        log = send_order_status_update(order, status=data.get('status'), user=request.user)
    except (TemplateNotFound, ProviderNotConfigured) as e:
        return _dispatch_error(e)
    _log_send(request, log)
    return Response(MessageLogSerializer(log).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def message_birthday(request):
    data = request.data if isinstance(request.data, dict) else {}
    customer = get_object_or_404(Customer, pk=data.get('customer'))
    try:
        log = send_birthday_wish(customer, user=request.user)
    except (TemplateNotFound, ProviderNotConfigured) as e:
        return _dispatch_error(e)
    _log_send(request, log)
    return Response(MessageLogSerializer(log).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_analytics(request):
    return Response(communication_analytics(
        date_from=request.query_params.get('date_from'),
        date_to=request.query_params.get('date_to'),
        communication_type=request.query_params.get('communication_type'),
    ))
