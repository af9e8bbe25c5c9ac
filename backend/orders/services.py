"""Order status changes, measurement versioning and task bookkeeping"""
import logging

from django.db import transaction
from django.db.models import Max, Count, Q
from django.utils import timezone

from backend.core.models import Event
from backend.core.utils import create_audit_log, record_event
from .models import Measurement, Task
from .workflow import validate_transition

logger = logging.getLogger(__name__)


def change_order_status(order, new_status, request=None, notes=''):
    """
    Move an order to ``new_status`` through the transition table.
    Raises InvalidStatusTransition for an illegal move. Re-applying the
    current status is a no-op.
    """
    old_status = order.status
    validate_transition(old_status, new_status)
    if old_status == new_status:
        return order

    order.status = new_status
    order.save(update_fields=['status', 'updated_at'])

    data = {'from': old_status, 'to': new_status}
    if notes:
        data['notes'] = notes
    record_event('order.status_changed', 'Order', order.id, data=data, request=request)
    create_audit_log(
        request=request,
        action='status_change',
        model_name='Order',
        object_id=order.id,
        object_name=order.customer.full_name,
        object_reference=order.order_number,
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    logger.info(f"Order {order.order_number} status {old_status} -> {new_status}")
    return order


def create_measurement(validated_data, user=None):
    """
    Store a new measurement version for (customer, garment_type). The
    previous versions lose is_latest in the same transaction.
    """
    validated_data = {k: v for k, v in validated_data.items() if k not in ('version', 'is_latest', 'created_by')}
    customer = validated_data['customer']
    garment_type = validated_data['garment_type']
    with transaction.atomic():
        siblings = Measurement.objects.select_for_update().filter(customer=customer, garment_type=garment_type)
        current_max = siblings.aggregate(v=Max('version'))['v'] or 0
        siblings.filter(is_latest=True).update(is_latest=False)
        measurement = Measurement.objects.create(
            **validated_data,
            version=current_max + 1,
            is_latest=True,
            created_by=user,
        )
    return measurement


def mark_measurement_latest(measurement):
    with transaction.atomic():
        Measurement.objects.filter(
            customer_id=measurement.customer_id,
            garment_type=measurement.garment_type,
            is_latest=True,
        ).exclude(pk=measurement.pk).update(is_latest=False)
        if not measurement.is_latest:
            measurement.is_latest = True
            measurement.save(update_fields=['is_latest', 'updated_at'])
    return measurement


def retire_measurement(measurement):
    """Deleting a measurement only clears its is_latest flag; no other version is promoted"""
    measurement.is_latest = False
    measurement.save(update_fields=['is_latest', 'updated_at'])
    return measurement


def assign_task(task, employee, request=None):
    task.assigned_employee = employee
    task.assigned_at = timezone.now()
    task.save(update_fields=['assigned_employee', 'assigned_at', 'updated_at'])
    record_event('task.assigned', 'Task', task.id, data={'employee': employee.id if employee else None}, request=request)
    return task


def change_task_status(task, new_status, actual_hours=None, request=None):
    """Task status is independent of the order status"""
    old_status = task.status
    task.status = new_status
    now = timezone.now()
    if new_status == 'IN_PROGRESS' and task.started_at is None:
        task.started_at = now
    if new_status == 'COMPLETED':
        task.completed_at = now
    elif old_status == 'COMPLETED':
        task.completed_at = None
    if actual_hours is not None:
        task.actual_hours = actual_hours
    task.save()
    record_event('task.status_changed', 'Task', task.id, data={'from': old_status, 'to': new_status}, request=request)
    return task


def mark_overdue_tasks(now=None):
    """Flip open tasks past their deadline to OVERDUE. Returns the number updated."""
    now = now or timezone.now()
    updated = Task.objects.filter(
        status__in=['PENDING', 'IN_PROGRESS'],
        deadline__lt=now,
    ).update(status='OVERDUE', updated_at=now)
    if updated:
        logger.info(f"Marked {updated} task(s) overdue")
    return updated


def employee_workload():
    """Open and finished task counts per assigned employee"""
    rows = Task.objects.filter(assigned_employee__isnull=False).values(
        'assigned_employee__id',
        'assigned_employee__first_name',
        'assigned_employee__last_name',
        'assigned_employee__role',
    ).annotate(
        total=Count('id'),
        pending=Count('id', filter=Q(status='PENDING')),
        in_progress=Count('id', filter=Q(status='IN_PROGRESS')),
        completed=Count('id', filter=Q(status='COMPLETED')),
        overdue=Count('id', filter=Q(status='OVERDUE')),
    ).order_by('assigned_employee__first_name')
    return [
        {
            'employee_id': row['assigned_employee__id'],
            'employee_name': f"{row['assigned_employee__first_name']} {row['assigned_employee__last_name']}".strip(),
            'role': row['assigned_employee__role'],
            'total': row['total'],
            'pending': row['pending'],
            'in_progress': row['in_progress'],
            'completed': row['completed'],
            'overdue': row['overdue'],
            'open': row['pending'] + row['in_progress'] + row['overdue'],
        }
        for row in rows
    ]


def order_timeline(order):
    return Event.objects.filter(entity_type='Order', entity_id=str(order.id)).order_by('timestamp')
