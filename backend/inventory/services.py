"""Stock movements for inventory items"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Sum, Count, DecimalField, ExpressionWrapper

from .models import InventoryItem, InventoryTransaction

logger = logging.getLogger(__name__)

ADDING_TYPES = ('STOCK_IN', 'RETURN')
REMOVING_TYPES = ('STOCK_OUT', 'DAMAGE', 'TRANSFER')


class InsufficientStock(Exception):
    pass


class InvalidTransactionType(Exception):
    pass


def apply_stock_transaction(item, quantity, transaction_type, reference_type='', reference_id='', notes='', user=None):
    """
    Change an item's stock and append an InventoryTransaction.

    STOCK_IN and RETURN add, STOCK_OUT, DAMAGE and TRANSFER subtract and may
    not take stock below zero, ADJUSTMENT sets the stock to ``quantity``.
    """
    quantity = Decimal(str(quantity))
    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item.pk)
        previous_stock = item.current_stock

        if transaction_type in ADDING_TYPES:
            new_stock = previous_stock + quantity
        elif transaction_type in REMOVING_TYPES:
            new_stock = previous_stock - quantity
            if new_stock < 0:
                raise InsufficientStock(
                    'Insufficient stock' if transaction_type == 'STOCK_OUT'
                    else f"Insufficient stock for {transaction_type.lower()}"
                )
        elif transaction_type == 'ADJUSTMENT':
            if quantity < 0:
                raise InvalidTransactionType('Adjusted stock cannot be negative')
            new_stock = quantity
        else:
            raise InvalidTransactionType(f"Invalid transaction type: {transaction_type}")

        item.current_stock = new_stock
        item.save(update_fields=['current_stock', 'updated_at'])

        InventoryTransaction.objects.create(
            inventory_item=item,
            type=transaction_type,
            quantity=quantity,
            previous_stock=previous_stock,
            new_stock=new_stock,
            reference_type=reference_type or '',
            reference_id=str(reference_id or ''),
            notes=notes or '',
            created_by=user,
        )

    logger.info(f"Stock {transaction_type} {quantity} on {item.sku}: {previous_stock} -> {new_stock}")
    return item


def low_stock_items():
    return InventoryItem.objects.filter(
        is_active=True,
        current_stock__lte=F('min_stock_level'),
    ).select_related('supplier')


def inventory_value():
    """Sum of current_stock * unit_price over active items"""
    value = InventoryItem.objects.filter(is_active=True).aggregate(
        total=Sum(
            ExpressionWrapper(F('current_stock') * F('unit_price'), output_field=DecimalField(max_digits=18, decimal_places=5))
        )
    )['total']
    return Decimal(value or 0).quantize(Decimal('0.01'))


def inventory_analytics():
    active = InventoryItem.objects.filter(is_active=True)
    by_category = active.values('category').annotate(
        count=Count('id'),
        total_stock=Sum('current_stock'),
    ).order_by('category')
    by_supplier = active.filter(supplier__isnull=False).values(
        'supplier__id', 'supplier__name'
    ).annotate(
        count=Count('id'),
        total_stock=Sum('current_stock'),
    ).order_by('supplier__name')
    recent = InventoryTransaction.objects.select_related('inventory_item', 'created_by')[:20]
    return {
        'total_items': active.count(),
        'low_stock_items': low_stock_items().count(),
        'total_value': inventory_value(),
        'by_category': list(by_category),
        'by_supplier': list(by_supplier),
        'recent_transactions': recent,
    }
