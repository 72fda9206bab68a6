"""Invoices: creation (including pharmacy sales), scoping and payment."""
from __future__ import annotations

from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import NotFound

from clinic.models import Appointment, Invoice, Role, User
from clinic.services import pharmacy
from clinic.services.notifications import notify
from clinic.services.users import format_user_ref


def format_invoice(inv: Invoice) -> dict:
    return {
        'id': inv.id,
        'patient': format_user_ref(inv.patient),
        'doctor': format_user_ref(inv.doctor),
        'createdBy': format_user_ref(inv.created_by),
        'appointment': inv.appointment_id,
        'invoiceType': inv.invoice_type,
        'items': [{'description': i['description'], 'cost': float(i['cost'])} for i in inv.items],
        'total': float(inv.total),
        'status': inv.status,
        'date': inv.date.isoformat() if inv.date else None,
        'createdAt': inv.created_at.isoformat() if inv.created_at else None,
        'updatedAt': inv.updated_at.isoformat() if inv.updated_at else None,
    }


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal('0.01'))


def _stored_items(items: list[dict]) -> tuple[list[dict], Decimal]:
    stored, total = [], Decimal('0')
    for item in items:
        cost = money(item['cost'])
        total += cost
        # JSON column: keep cost as a string to avoid float drift
        stored.append({'description': item['description'], 'cost': str(cost)})
    return stored, total


def create_invoice(user: User, *, patient_id: int, items: list[dict], invoice_type: str = Invoice.TYPE_CONSULTATION,
                   doctor_id: int | None = None, appointment_id: int | None = None,
                   medicine_items: list[dict] | None = None) -> Invoice:
    patient = User.objects.filter(pk=patient_id).first()
    if not patient:
        raise NotFound('Patient not found')
    doctor = None
    if doctor_id:
        doctor = User.objects.filter(pk=doctor_id, role=Role.DOCTOR).first()
        if not doctor:
            raise NotFound('Doctor not found')
    appointment = None
    if appointment_id:
        appointment = Appointment.objects.filter(pk=appointment_id).first()
        if not appointment:
            raise NotFound('Appointment not found')

    is_sale = invoice_type == Invoice.TYPE_PHARMACY and bool(medicine_items)
    with transaction.atomic():
        if is_sale:
            items = pharmacy.decrement_stock(medicine_items)
        stored, total = _stored_items(items)
        invoice = Invoice.objects.create(
            patient=patient, doctor=doctor, appointment=appointment, created_by=user,
            invoice_type=invoice_type, items=stored, total=total,
        )
    if is_sale:
        pharmacy.announce_stock_change({'invoiceId': invoice.id,
                                        'medicineIds': [m['medicineId'] for m in medicine_items]})
    notify(patient.id, 'New Invoice', f'An invoice of ₹{total} has been generated', 'billing', '/bills')
    return invoice


def list_for(user: User):
    qs = Invoice.objects.select_related('patient', 'doctor', 'created_by')
    if user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    elif user.role == Role.DOCTOR:
        qs = qs.filter(doctor=user)
    elif user.role == Role.PHARMACIST:
        qs = qs.filter(created_by=user)
    return qs.order_by('-created_at', '-id')


def pay(invoice_id: int) -> Invoice:
    """Mark an invoice Paid.  Paying twice leaves it Paid."""
    invoice = Invoice.objects.select_related('patient', 'doctor', 'created_by').filter(pk=invoice_id).first()
    if not invoice:
        raise NotFound('Invoice not found')
    invoice.status = Invoice.STATUS_PAID
    invoice.save(update_fields=['status', 'updated_at'])
    notify(invoice.patient_id, 'Payment Confirmed', f'Your invoice of ₹{invoice.total} has been marked as paid',
           'billing', '/bills')
    return invoice
