"""
Medicine inventory: stock decrement for sales and the inventory alerts.

A sale decrements every line with one conditional ``UPDATE`` so two
concurrent sales can never drive stock below zero.  Callers run
:func:`decrement_stock` inside the same transaction that writes the
invoice; any failure rolls back every line of the sale.
"""
from __future__ import annotations

from datetime import timedelta

from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.exceptions import BusinessRuleError
from clinic.models import Medicine, Role
from clinic.services import realtime


def format_medicine(m: Medicine) -> dict:
    return {
        'id': m.id,
        'name': m.name,
        'category': m.category,
        'stock': m.stock,
        'price': float(m.price),
        'expiryDate': m.expiry_date.isoformat() if m.expiry_date else None,
        'supplier': m.supplier,
        'createdAt': m.created_at.isoformat() if m.created_at else None,
        'updatedAt': m.updated_at.isoformat() if m.updated_at else None,
    }


def decrement_stock(lines: list[dict]) -> list[dict]:
    """Take ``quantity`` units of each ``medicineId`` out of stock.

    Returns priced invoice line items ``{description, cost}``.  Must be
    called inside ``transaction.atomic()``.
    """
    items: list[dict] = []
    for line in lines:
        medicine_id, quantity = line['medicineId'], line['quantity']
        medicine = Medicine.objects.filter(pk=medicine_id).first()
        if medicine is None:
            raise NotFound(f"Medicine not found: {line.get('name') or medicine_id}")
        updated = Medicine.objects.filter(pk=medicine_id, stock__gte=quantity).update(stock=F('stock') - quantity)
        if not updated:
            medicine.refresh_from_db(fields=['stock'])
            raise BusinessRuleError(f'Not enough stock for {medicine.name}. Available: {medicine.stock}')
        items.append({
            'description': f'{medicine.name} × {quantity}',
            'cost': medicine.price * quantity,
        })
    return items


def announce_stock_change(payload: dict) -> None:
    for role in (Role.ADMIN, Role.PHARMACIST):
        realtime.emit_to_role(role, 'medicine_updated', payload)


def inventory_alerts(*, low_stock: int = 10, expiry_days: int = 30, today=None) -> dict:
    today = today or timezone.localdate()
    horizon = today + timedelta(days=expiry_days)
    low = list(Medicine.objects.filter(stock__gt=0, stock__lte=low_stock).order_by('stock', 'name'))
    out = list(Medicine.objects.filter(stock=0).order_by('name'))
    expiring = list(Medicine.objects.filter(expiry_date__gte=today, expiry_date__lte=horizon).order_by('expiry_date'))
    expired = list(Medicine.objects.filter(expiry_date__lt=today).order_by('-expiry_date'))
    return {
        'lowStock': [format_medicine(m) for m in low],
        'outOfStock': [format_medicine(m) for m in out],
        'expiringSoon': [format_medicine(m) for m in expiring],
        'expired': [format_medicine(m) for m in expired],
        'summary': {
            'lowStockCount': len(low),
            'outOfStockCount': len(out),
            'expiringSoonCount': len(expiring),
            'expiredCount': len(expired),
            'totalAlerts': len(low) + len(out) + len(expiring) + len(expired),
        },
    }
