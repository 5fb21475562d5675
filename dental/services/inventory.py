from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from dental.models import InventoryItem, StockMovement

logger = logging.getLogger(__name__)


@transaction.atomic
def record_stock_movement(*, item: InventoryItem, type: str, quantity: int, performed_by: str,
                          reason: str = '', supplier: str = '', brand: str = '',
                          expiry_date: Optional[datetime.date] = None) -> StockMovement:
    """Apply a stock movement to ``item`` under a row lock and log it."""
    if type not in dict(StockMovement.TYPE_CHOICES):
        raise ValueError(f"Invalid movement type: {type}")
    quantity = int(quantity)
    if type == StockMovement.TYPE_TAKE:
        if quantity < 0:
            raise ValueError("Counted quantity cannot be negative")
    elif quantity <= 0:
        raise ValueError("Quantity must be greater than zero")

    locked = InventoryItem.objects.select_for_update().get(pk=item.pk)
    if type == StockMovement.TYPE_IN:
        remaining = locked.current_stock + quantity
    elif type == StockMovement.TYPE_OUT:
        remaining = locked.current_stock - quantity
        if remaining < 0:
            raise ValueError(f"Insufficient stock: {locked.current_stock} {locked.unit} available")
    else:
        remaining = quantity

    movement = StockMovement.objects.create(
        item=locked,
        item_name=locked.name,
        type=type,
        quantity=quantity,
        remaining_stock=remaining,
        performed_by=performed_by,
        reason=reason or '',
        supplier=supplier or '',
        brand=brand or '',
        expiry_date=expiry_date,
    )
    locked.current_stock = remaining
    fields = ['current_stock', 'updated_at']
    if type == StockMovement.TYPE_IN:
        # Restock details describe the latest batch
        for name, value in (('supplier', supplier), ('brand', brand), ('expiry_date', expiry_date)):
            if value:
                setattr(locked, name, value)
                fields.append(name)
    locked.save(update_fields=fields)
    if remaining <= locked.reorder_level:
        logger.info("inventory item %s is at or below reorder level (%s <= %s)",
                    locked.id, remaining, locked.reorder_level)
    return movement


def low_stock() -> QuerySet:
    return InventoryItem.objects.filter(current_stock__lte=F('reorder_level')).order_by('current_stock', 'name')


def expiring_within(days: int = 30) -> QuerySet:
    today = timezone.localdate()
    return (
        InventoryItem.objects.filter(expiry_date__isnull=False, expiry_date__lte=today + datetime.timedelta(days=days))
        .order_by('expiry_date')
    )


def movements(item_id: Optional[int] = None) -> QuerySet:
    qs = StockMovement.objects.all()
    if item_id:
        qs = qs.filter(item_id=item_id)
    return qs.order_by('-created_at', '-id')
