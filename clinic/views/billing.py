"""Invoices and the medicine inventory."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import Medicine
from clinic.permissions import capability
from clinic.serializers.billing import AlertQuerySerializer, InvoiceCreateSerializer, MedicineSerializer
from clinic.services import billing, pharmacy
from clinic.services.audit import log_activity

MEDICINE_FIELDS = (('name', 'name'), ('category', 'category'), ('stock', 'stock'), ('price', 'price'),
                   ('expiryDate', 'expiry_date'), ('supplier', 'supplier'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('invoices')])
def invoices(request):
    if request.method == 'GET':
        return Response([billing.format_invoice(i) for i in billing.list_for(request.user)])

    s = InvoiceCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    invoice = billing.create_invoice(
        request.user, patient_id=v['patientId'], items=v['items'], invoice_type=v['invoiceType'],
        doctor_id=v.get('doctorId'), appointment_id=v.get('appointmentId'), medicine_items=v['medicineItems'],
    )
    log_activity(user=request.user, action='CREATE', entity='Invoice', entity_id=invoice.id,
                 details=f'Invoice created: ₹{invoice.total} ({invoice.invoice_type})', request=request)
    return Response(billing.format_invoice(invoice), status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, capability('invoices.pay')])
def invoice_pay(request, pk: int):
    invoice = billing.pay(pk)
    log_activity(user=request.user, action='STATUS_CHANGE', entity='Invoice', entity_id=invoice.id,
                 details=f'Invoice ₹{invoice.total} marked as paid', request=request)
    return Response(billing.format_invoice(invoice))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('medicines')])
def medicines(request):
    if request.method == 'GET':
        return Response([pharmacy.format_medicine(m) for m in Medicine.objects.order_by('name')])

    s = MedicineSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    fields = {attr: s.validated_data[key] for key, attr in MEDICINE_FIELDS if key in s.validated_data}
    medicine = Medicine.objects.create(**fields)
    log_activity(user=request.user, action='CREATE', entity='Medicine', entity_id=medicine.id,
                 details=f'Medicine added: {medicine.name} (stock {medicine.stock})', request=request)
    pharmacy.announce_stock_change({'medicineIds': [medicine.id]})
    return Response(pharmacy.format_medicine(medicine), status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, capability('medicines.detail')])
def medicine_detail(request, pk: int):
    medicine = Medicine.objects.filter(pk=pk).first()
    if not medicine:
        raise NotFound('Medicine not found')

    if request.method == 'DELETE':
        medicine.delete()
        log_activity(user=request.user, action='DELETE', entity='Medicine', entity_id=pk,
                     details=f'Medicine deleted: {medicine.name}', request=request)
        pharmacy.announce_stock_change({'medicineIds': [pk]})
        return Response({'message': 'Medicine removed'})

    s = MedicineSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    changed = [attr for key, attr in MEDICINE_FIELDS if key in s.validated_data]
    for key, attr in MEDICINE_FIELDS:
        if key in s.validated_data:
            setattr(medicine, attr, s.validated_data[key])
    if changed:
        # stock may have moved since the read
        medicine.save(update_fields=[*changed, 'updated_at'])
        medicine.refresh_from_db()
    log_activity(user=request.user, action='UPDATE', entity='Medicine', entity_id=medicine.id,
                 details=f'Medicine updated: {medicine.name}', request=request)
    pharmacy.announce_stock_change({'medicineIds': [medicine.id]})
    return Response(pharmacy.format_medicine(medicine))


@api_view(['GET'])
@permission_classes([IsAuthenticated, capability('medicines.alerts')])
def medicine_alerts(request):
    q = AlertQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(pharmacy.inventory_alerts(low_stock=q.validated_data['lowStock'],
                                              expiry_days=q.validated_data['expiryDays']))
