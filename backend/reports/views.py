from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, F
from django.utils import timezone
from datetime import datetime, timedelta
import logging

from backend.core.permissions import IsManagerOrAdmin
from backend.parties.models import Customer
from backend.orders.models import Order, Task
from backend.orders.workflow import STAGE_CHOICES
from backend.inventory.models import Fabric
from backend.inventory.services import low_stock_items
from backend.communications.models import MessageLog
from . import material_costs

logger = logging.getLogger('backend.reports')


def _date_range(request, default_days=30):
    """Parse date_from/date_to (YYYY-MM-DD), defaulting to the last `default_days` days"""
    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)

    if not date_from:
        date_from = (timezone.now() - timedelta(days=default_days)).date()
    else:
        date_from = datetime.strptime(date_from, '%Y-%m-%d').date()

    if not date_to:
        date_to = timezone.now().date()
    else:
        date_to = datetime.strptime(date_to, '%Y-%m-%d').date()

    return date_from, date_to


def _period(date_from, date_to):
    return {'from': date_from.isoformat(), 'to': date_to.isoformat()}


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def material_cost_analysis(request):
    """Per-order material cost with percentage of the order total"""
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)

    data = material_costs.material_cost_analysis(date_from, date_to)
    logger.info(
        "Material cost analysis %s..%s: %s orders, grand total %s",
        date_from, date_to, data['summary']['total_orders'], data['summary']['grand_total'],
    )
    data['period'] = _period(date_from, date_to)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def material_cost_by_category(request):
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'period': _period(date_from, date_to),
        'categories': material_costs.material_cost_by_category(date_from, date_to),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def material_cost_trends(request):
    """Material cost by day, week or month"""
    period = request.query_params.get('period', 'monthly')
    try:
        span = int(request.query_params.get('span', 12))
        trends = material_costs.material_cost_trends(period=period, span=span)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'period': period, 'span': span, 'trends': trends})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def top_materials(request):
    try:
        date_from, date_to = _date_range(request)
        limit = int(request.query_params.get('limit', 10))
    except ValueError:
        return Response({'error': 'Invalid date or limit'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'period': _period(date_from, date_to),
        'materials': material_costs.top_materials_by_cost(date_from, date_to, limit=limit),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def waste_cost_impact(request):
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)

    data = material_costs.waste_cost_impact(date_from, date_to)
    data['period'] = _period(date_from, date_to)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary(request):
    """Headline counts for the dashboard landing page"""
    orders_by_status = {
        row['status']: row['count']
        for row in Order.objects.values('status').annotate(count=Count('id')).order_by('status')
    }
    active_statuses = [s for s, _ in STAGE_CHOICES if s not in ('DELIVERED', 'CANCELLED')]

    overdue_tasks = Task.objects.filter(status='OVERDUE').count() + Task.objects.filter(
        deadline__lt=timezone.now(),
        status__in=['PENDING', 'IN_PROGRESS'],
    ).count()

    return Response({
        'orders_by_status': orders_by_status,
        'open_orders': Order.objects.filter(status__in=active_statuses).count(),
        'active_customers': Customer.objects.filter(is_active=True).count(),
        'overdue_tasks': overdue_tasks,
        'low_stock_fabrics': Fabric.objects.filter(
            is_active=True, stock_quantity__lte=F('low_stock_threshold')
        ).count(),
        'low_stock_items': low_stock_items().count(),
        'pending_messages': MessageLog.objects.filter(status='PENDING').count(),
    })
