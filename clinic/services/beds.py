"""
Bed management: inventory, assignment and discharge.

Assignment and discharge are single conditional updates on the bed row,
so of two concurrent requests against the same bed exactly one wins.
Discharge bills the stay afterwards on a best-effort basis: if the
invoice cannot be written the discharge still stands and the failure is
logged.
"""
from __future__ import annotations

import logging
import math
from datetime import timedelta
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.exceptions import BusinessRuleError
from clinic.models import Bed, Invoice, Role, User
from clinic.services.notifications import notify
from clinic.services.users import format_user_ref

logger = logging.getLogger(__name__)

ASSIGNABLE = (Bed.STATUS_AVAILABLE, Bed.STATUS_RESERVED)

BED_FIELDS = (('roomNumber', 'room_number'), ('bedNumber', 'bed_number'), ('ward', 'ward'),
              ('status', 'status'), ('dailyRate', 'daily_rate'), ('notes', 'notes'))


def format_bed(bed: Bed) -> dict:
    return {
        'id': bed.id,
        'roomNumber': bed.room_number,
        'bedNumber': bed.bed_number,
        'ward': bed.ward,
        'status': bed.status,
        'patient': format_user_ref(bed.patient),
        'assignedBy': format_user_ref(bed.assigned_by),
        'admissionDate': bed.admission_date.isoformat() if bed.admission_date else None,
        'dischargeDate': bed.discharge_date.isoformat() if bed.discharge_date else None,
        'dailyRate': float(bed.daily_rate),
        'notes': bed.notes,
        'createdAt': bed.created_at.isoformat() if bed.created_at else None,
        'updatedAt': bed.updated_at.isoformat() if bed.updated_at else None,
    }


def compute_stay_charge(admission, discharge, daily_rate) -> tuple[int, Decimal]:
    """Days billed (at least one, partial days round up) and the amount."""
    elapsed = discharge - admission
    days = max(1, math.ceil(elapsed / timedelta(days=1)))
    rate = Decimal(str(daily_rate or Bed.DEFAULT_DAILY_RATE))
    return days, rate * days


def _get(bed_id: int) -> Bed:
    bed = Bed.objects.select_related('patient', 'assigned_by').filter(pk=bed_id).first()
    if not bed:
        raise NotFound('Bed not found')
    return bed


def list_beds():
    return Bed.objects.select_related('patient', 'assigned_by').order_by('ward', 'room_number', 'bed_number')


def create_bed(*, room_number: str, bed_number: str, ward: str = 'General', daily_rate=None,
               notes: str = '', status: str | None = None) -> Bed:
    if status == Bed.STATUS_OCCUPIED:
        raise BusinessRuleError('Use bed assignment to occupy a bed')
    fields = {'room_number': room_number, 'bed_number': bed_number, 'ward': ward, 'notes': notes or ''}
    if daily_rate is not None:
        fields['daily_rate'] = daily_rate
    if status:
        fields['status'] = status
    try:
        with transaction.atomic():
            return Bed.objects.create(**fields)
    except IntegrityError:
        raise BusinessRuleError('Bed already exists in this room')


def update_bed(bed_id: int, changes: dict) -> Bed:
    """Partial update of the administrative fields.

    Occupancy is only changed through assign/discharge, and only the
    columns named in ``changes`` are written so a concurrent assignment
    or discharge is never overwritten.
    """
    bed = _get(bed_id)
    fields = {attr: changes[key] for key, attr in BED_FIELDS if key in changes}
    new_status = fields.get('status')
    if new_status == bed.status:
        del fields['status']
    elif new_status:
        if new_status == Bed.STATUS_OCCUPIED:
            raise BusinessRuleError('Use bed assignment to occupy a bed')
        if bed.status == Bed.STATUS_OCCUPIED:
            raise BusinessRuleError('Discharge the patient before changing the bed status')
    if not fields:
        return bed
    rows = Bed.objects.filter(pk=bed_id)
    if 'status' in fields:
        # the bed may have been assigned since it was read
        rows = rows.exclude(status=Bed.STATUS_OCCUPIED)
    try:
        with transaction.atomic():
            updated = rows.update(**fields, updated_at=timezone.now())
    except IntegrityError:
        raise BusinessRuleError('Bed already exists in this room')
    if not updated:
        raise BusinessRuleError('Discharge the patient before changing the bed status')
    return _get(bed_id)


def delete_bed(bed_id: int) -> Bed:
    bed = _get(bed_id)
    if bed.status == Bed.STATUS_OCCUPIED:
        raise BusinessRuleError('Cannot delete an occupied bed')
    bed.delete()
    return bed


def assign(bed_id: int, patient_id: int, staff: User, *, now=None) -> Bed:
    now = now or timezone.now()
    if not Bed.objects.filter(pk=bed_id).exists():
        raise NotFound('Bed not found')
    patient = User.objects.filter(pk=patient_id, role=Role.PATIENT).first()
    if not patient:
        raise NotFound('Patient not found')
    updated = Bed.objects.filter(pk=bed_id, status__in=ASSIGNABLE).update(
        patient=patient, assigned_by=staff, admission_date=now, discharge_date=None,
        status=Bed.STATUS_OCCUPIED, updated_at=now,
    )
    if not updated:
        raise BusinessRuleError('Bed is not available')
    bed = _get(bed_id)
    notify(patient.id, 'Bed Assigned',
           f'You have been assigned to Room {bed.room_number}, Bed {bed.bed_number} ({bed.ward} Ward)',
           'bed', '/dashboard')
    return bed


def _bill_stay(bed: Bed, patient_id, staff: User, days: int, total: Decimal) -> Invoice | None:
    rate = Decimal(str(bed.daily_rate or Bed.DEFAULT_DAILY_RATE))
    try:
        with transaction.atomic():
            return Invoice.objects.create(
                patient_id=patient_id,
                created_by=staff,
                invoice_type=Invoice.TYPE_BED,
                items=[
                    {'description': f'Bed Stay - Room {bed.room_number}, Bed {bed.bed_number} ({bed.ward} Ward)',
                     'cost': str(total)},
                    {'description': f'{days} day(s) × ₹{rate}/day', 'cost': '0.00'},
                ],
                total=total,
                status=Invoice.STATUS_UNPAID,
            )
    except Exception:
        logger.exception('auto-invoice for bed %s discharge failed', bed.id)
        return None


def discharge(bed_id: int, staff: User, *, now=None) -> tuple[Bed, dict]:
    """Release an occupied bed and bill the stay.

    Returns the updated bed and a summary
    ``{daysStayed, dailyRate, totalAmount, invoiceId}``.
    """
    now = now or timezone.now()
    bed = _get(bed_id)
    if bed.status != Bed.STATUS_OCCUPIED:
        raise BusinessRuleError('Bed is not occupied')
    patient_id = bed.patient_id
    admission = bed.admission_date or bed.created_at
    days, total = compute_stay_charge(admission, now, bed.daily_rate)

    updated = Bed.objects.filter(pk=bed_id, status=Bed.STATUS_OCCUPIED, patient_id=patient_id).update(
        patient=None, assigned_by=None, admission_date=None, discharge_date=now,
        status=Bed.STATUS_AVAILABLE, updated_at=now,
    )
    if not updated:
        raise BusinessRuleError('Bed is not occupied')

    invoice = _bill_stay(bed, patient_id, staff, days, total) if patient_id else None
    if patient_id:
        notify(patient_id, 'Discharged – Bill Generated',
               f'You have been discharged from Room {bed.room_number}, Bed {bed.bed_number}. '
               f'A bill of ₹{total} has been generated.',
               'bed', '/bills')
    summary = {
        'daysStayed': days,
        'dailyRate': float(bed.daily_rate or Bed.DEFAULT_DAILY_RATE),
        'totalAmount': float(total),
        'invoiceId': invoice.id if invoice else None,
    }
    return _get(bed_id), summary
