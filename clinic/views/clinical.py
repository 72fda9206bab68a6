"""Prescriptions, lab reports and medical history."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import capability
from clinic.serializers.clinical import (
    LabReportCreateSerializer,
    LabReportUpdateSerializer,
    MedicalHistorySerializer,
    PrescriptionCreateSerializer,
)
from clinic.services import clinical
from clinic.services.audit import log_activity


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('prescriptions')])
def prescriptions(request):
    if request.method == 'GET':
        return Response([clinical.format_prescription(p) for p in clinical.prescriptions_for(request.user)])

    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    rx = clinical.create_prescription(request.user, patient_id=v['patientId'], appointment_id=v['appointmentId'],
                                      diagnosis=v['diagnosis'], medicines=v['medicines'], notes=v.get('notes', ''))
    log_activity(user=request.user, action='CREATE', entity='Prescription', entity_id=rx.id,
                 details=f'Prescription issued: {rx.diagnosis}', request=request)
    return Response(clinical.format_prescription(rx), status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('lab_reports')])
def lab_reports(request):
    if request.method == 'GET':
        return Response([clinical.format_lab_report(r) for r in clinical.lab_reports_for(request.user)])

    s = LabReportCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    report = clinical.order_lab_test(request.user, patient_id=v['patientId'], test_name=v['testName'],
                                     test_category=v['testCategory'], notes=v.get('notes', ''),
                                     doctor_id=v.get('doctorId'))
    log_activity(user=request.user, action='CREATE', entity='LabReport', entity_id=report.id,
                 details=f'Lab test ordered: {report.test_name}', request=request)
    return Response(clinical.format_lab_report(report), status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, capability('lab_reports.detail')])
def lab_report_detail(request, pk: int):
    if request.method == 'DELETE':
        report = clinical.delete_lab_report(pk)
        log_activity(user=request.user, action='DELETE', entity='LabReport', entity_id=pk,
                     details=f'Lab report deleted: {report.test_name}', request=request)
        return Response({'message': 'Lab report removed'})

    s = LabReportUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    new_status = s.validated_data.get('status')
    report = clinical.update_lab_report(pk, s.validated_data)
    log_activity(user=request.user, action='STATUS_CHANGE' if new_status else 'UPDATE', entity='LabReport',
                 entity_id=report.id,
                 details=f'Lab report updated: {report.test_name}' + (f' → {new_status}' if new_status else ''),
                 request=request)
    return Response(clinical.format_lab_report(report))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, capability('medical_history')])
def medical_history(request):
    if request.method == 'GET':
        patient_id = request.query_params.get('patientId')
        records = clinical.history_for(request.user, int(patient_id) if (patient_id or '').isdigit() else None)
        return Response([clinical.format_history(h) for h in records])

    s = MedicalHistorySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = clinical.add_history(request.user, s.validated_data)
    log_activity(user=request.user, action='CREATE', entity='MedicalHistory', entity_id=record.id,
                 details=f'{record.type} added: {record.title}', request=request)
    return Response(clinical.format_history(record), status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, capability('medical_history.detail')])
def medical_history_detail(request, pk: int):
    if request.method == 'DELETE':
        record = clinical.delete_history(pk)
        log_activity(user=request.user, action='DELETE', entity='MedicalHistory', entity_id=pk,
                     details=f'{record.type} deleted: {record.title}', request=request)
        return Response({'message': 'Medical history record removed'})

    s = MedicalHistorySerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    record = clinical.update_history(pk, s.validated_data)
    log_activity(user=request.user, action='UPDATE', entity='MedicalHistory', entity_id=record.id,
                 details=f'{record.type} updated: {record.title}', request=request)
    return Response(clinical.format_history(record))
