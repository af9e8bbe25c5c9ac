"""Purchase order approval, receipt and statistics"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from backend.inventory.services import apply_stock_transaction
from .models import PurchaseOrder, PurchaseOrderItem, SupplierPayment

logger = logging.getLogger(__name__)

RECEIVABLE_STATUSES = ('APPROVED', 'ORDERED', 'PARTIALLY_RECEIVED')
CLOSED_STATUSES = ('RECEIVED', 'CANCELLED')
FINAL_PAYMENT_STATUSES = ('COMPLETED', 'CANCELLED')
ZERO = Decimal('0.00')


class PurchaseOrderError(Exception):
    pass


class SupplierPaymentError(Exception):
    pass


def set_purchase_order_status(purchase_order, new_status, user=None, notes=''):
    """Set the status; APPROVED stamps the approver and time"""
    if purchase_order.status in CLOSED_STATUSES and new_status != purchase_order.status:
        raise PurchaseOrderError(f"Purchase order is {purchase_order.status.lower()} and cannot change status")
    purchase_order.status = new_status
    fields = ['status', 'updated_at']
    if new_status == 'APPROVED':
        purchase_order.approved_by = user
        purchase_order.approved_at = timezone.now()
        fields += ['approved_by', 'approved_at']
    if new_status == 'RECEIVED' and purchase_order.received_at is None:
        purchase_order.received_at = timezone.now()
        fields.append('received_at')
    if notes:
        purchase_order.notes = f"{purchase_order.notes}\n{notes}".strip()
        fields.append('notes')
    purchase_order.save(update_fields=fields)
    return purchase_order


def receive_purchase_order(purchase_order, receipts=None, user=None):
    """
    Book received quantities into stock.

    ``receipts`` maps PurchaseOrderItem id to the quantity received now.
    When omitted, every line's outstanding quantity is received. Each
    line writes a STOCK_IN transaction referencing the PO.
    """
    if purchase_order.status not in RECEIVABLE_STATUSES:
        raise PurchaseOrderError(f"Cannot receive a purchase order in status {purchase_order.status}")

    with transaction.atomic():
        items = {item.id: item for item in PurchaseOrderItem.objects.select_for_update().filter(purchase_order=purchase_order)}
        if receipts is None:
            receipts = {item_id: item.outstanding_quantity for item_id, item in items.items()}

        for item_id, quantity in receipts.items():
            item = items.get(int(item_id))
            if item is None:
                raise PurchaseOrderError(f"Item {item_id} is not part of {purchase_order.po_number}")
            quantity = Decimal(str(quantity))
            if quantity <= 0:
                continue
            if quantity > item.outstanding_quantity:
                raise PurchaseOrderError(
                    f"Cannot receive {quantity} of {item.inventory_item.sku}; only {item.outstanding_quantity} outstanding"
                )
            apply_stock_transaction(
                item.inventory_item,
                quantity,
                'STOCK_IN',
                reference_type='PurchaseOrder',
                reference_id=purchase_order.id,
                notes=f"Received against {purchase_order.po_number}",
                user=user,
            )
            item.received_quantity += quantity
            item.save(update_fields=['received_quantity'])

        if all(item.received_quantity >= item.quantity for item in items.values()):
            purchase_order.status = 'RECEIVED'
            purchase_order.received_at = timezone.now()
        elif purchase_order.status == 'ORDERED':
            purchase_order.status = 'PARTIALLY_RECEIVED'
        purchase_order.save(update_fields=['status', 'received_at', 'updated_at'])

    logger.info(f"Received stock for {purchase_order.po_number}, status now {purchase_order.status}")
    return purchase_order


def purchase_order_stats():
    by_status = {
        row['status']: {'count': row['count'], 'total': row['total'] or Decimal('0.00')}
        for row in PurchaseOrder.objects.values('status').annotate(count=Count('id'), total=Sum('total_amount'))
    }
    open_orders = PurchaseOrder.objects.exclude(status__in=CLOSED_STATUSES)
    return {
        'total_orders': PurchaseOrder.objects.count(),
        'total_value': PurchaseOrder.objects.exclude(status='CANCELLED').aggregate(v=Sum('total_amount'))['v'] or Decimal('0.00'),
        'open_orders': open_orders.count(),
        'open_value': open_orders.aggregate(v=Sum('total_amount'))['v'] or Decimal('0.00'),
        'pending_approval': PurchaseOrder.objects.filter(status='PENDING_APPROVAL').count(),
        'overdue': open_orders.filter(expected_date__lt=timezone.localdate()).count(),
        'by_status': by_status,
    }


def set_payment_status(payment, new_status, user=None, notes=''):
    """Move a supplier payment along; COMPLETED stamps who processed it and when"""
    if payment.status in FINAL_PAYMENT_STATUSES and new_status != payment.status:
        raise SupplierPaymentError(f"Payment is {payment.status.lower()} and cannot change status")
    payment.status = new_status
    fields = ['status', 'updated_at']
    if new_status == 'COMPLETED':
        payment.processed_by = user
        payment.processed_at = timezone.now()
        fields += ['processed_by', 'processed_at']
        if payment.payment_date is None:
            payment.payment_date = timezone.localdate()
            fields.append('payment_date')
    if notes:
        payment.notes = f"{payment.notes}\n{notes}".strip()[:500]
        fields.append('notes')
    payment.save(update_fields=fields)
    logger.info(f"Supplier payment {payment.id} for {payment.supplier_id} is now {new_status}")
    return payment


def _percent(part, whole):
    if not whole:
        return ZERO
    return (Decimal(part) * 100 / Decimal(whole)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _average(total, count):
    if not count:
        return ZERO
    return (Decimal(total) / count).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def supplier_performance(supplier):
    """
    Order and payment track record for one supplier.

    Cancelled purchase orders are left out of the order value, and only
    completed payments count as paid. A received order is on time when it
    was received on or before its expected date, or had none.
    """
    orders = supplier.purchase_orders.exclude(status='CANCELLED')
    total_orders = orders.count()
    total_order_value = orders.aggregate(v=Sum('total_amount'))['v'] or ZERO

    completed = list(orders.filter(status='RECEIVED').values('expected_date', 'received_at'))
    on_time = sum(
        1 for row in completed
        if row['expected_date'] is None or row['received_at'] is None
        or timezone.localdate(row['received_at']) <= row['expected_date']
    )

    payments = SupplierPayment.objects.filter(supplier=supplier)
    paid = payments.filter(status='COMPLETED').aggregate(v=Sum('amount'))['v'] or ZERO
    pending = payments.filter(status__in=('PENDING', 'PROCESSING')).aggregate(v=Sum('amount'))['v'] or ZERO

    return {
        'supplier_id': supplier.id,
        'supplier_name': supplier.name,
        'total_orders': total_orders,
        'completed_orders': len(completed),
        'total_order_value': total_order_value,
        'average_order_value': _average(total_order_value, total_orders),
        'completion_rate': _percent(len(completed), total_orders),
        'on_time_delivery': _percent(on_time, len(completed)),
        'total_payments': paid,
        'pending_payments': pending,
        'outstanding_balance': total_order_value - paid,
        'overdue_payments': payments.filter(
            status__in=('PENDING', 'PROCESSING'), due_date__lt=timezone.localdate()
        ).count(),
    }
