"""Prescriptions, lab reports and medical history records."""
from __future__ import annotations

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from clinic.exceptions import BusinessRuleError
from clinic.models import Appointment, LabReport, MedicalHistory, Prescription, Role, User
from clinic.services import realtime
from clinic.services.appointments import can_transition
from clinic.services.notifications import notify
from clinic.services.users import format_user_ref, get_user_with_role


def _iso(dt):
    return dt.isoformat() if dt else None


# ---------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------
def format_prescription(p: Prescription) -> dict:
    return {
        'id': p.id,
        'doctor': format_user_ref(p.doctor),
        'patient': format_user_ref(p.patient),
        'appointment': p.appointment_id,
        'diagnosis': p.diagnosis,
        'medicines': p.medicines,
        'notes': p.notes,
        'createdAt': _iso(p.created_at),
        'updatedAt': _iso(p.updated_at),
    }


def create_prescription(doctor: User, *, patient_id: int, appointment_id: int, diagnosis: str,
                        medicines: list[dict], notes: str = '') -> Prescription:
    """Write a prescription and close the appointment it belongs to.

    Only the appointment's own doctor may prescribe on it, the patient must
    match the appointment and the visit must still be open.
    """
    if not medicines:
        raise BusinessRuleError('No medicines prescribed')
    appt = Appointment.objects.filter(pk=appointment_id).first()
    if not appt:
        raise NotFound('Appointment not found')
    if appt.doctor_id != doctor.id:
        raise PermissionDenied('You can only prescribe for your own appointments')
    if appt.patient_id != patient_id:
        raise BusinessRuleError('Patient does not match the appointment')
    if not can_transition(appt.status, Appointment.STATUS_COMPLETED):
        raise BusinessRuleError(f'Cannot prescribe on a {appt.status.lower()} appointment')
    patient = get_user_with_role(patient_id, Role.PATIENT, 'Patient')
    with transaction.atomic():
        # conditional on the status read above
        closed = Appointment.objects.filter(pk=appt.pk, status=appt.status).update(
            status=Appointment.STATUS_COMPLETED, updated_at=timezone.now())
        if not closed:
            raise BusinessRuleError('Appointment status changed, reload and try again')
        rx = Prescription.objects.create(doctor=doctor, patient=patient, appointment=appt, diagnosis=diagnosis,
                                         medicines=[dict(m) for m in medicines], notes=notes or '')
    notify(patient.id, 'New Prescription', f'Dr. {doctor.last_name or doctor.first_name} has issued a prescription',
           'prescription', '/prescriptions')
    return rx


def prescriptions_for(user: User):
    qs = Prescription.objects.select_related('doctor', 'patient')
    if user.role == Role.DOCTOR:
        qs = qs.filter(doctor=user)
    elif user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    return qs.order_by('-created_at', '-id')


# ---------------------------------------------------------------------
# Lab reports
# ---------------------------------------------------------------------
def format_lab_report(r: LabReport) -> dict:
    return {
        'id': r.id,
        'patient': format_user_ref(r.patient),
        'doctor': format_user_ref(r.doctor),
        'orderedBy': format_user_ref(r.ordered_by),
        'testName': r.test_name,
        'testCategory': r.test_category,
        'status': r.status,
        'results': r.results,
        'notes': r.notes,
        'completedAt': _iso(r.completed_at),
        'createdAt': _iso(r.created_at),
        'updatedAt': _iso(r.updated_at),
    }


# Completed is terminal
LAB_TRANSITIONS = {
    LabReport.STATUS_ORDERED: {LabReport.STATUS_IN_PROGRESS, LabReport.STATUS_COMPLETED},
    LabReport.STATUS_IN_PROGRESS: {LabReport.STATUS_COMPLETED},
    LabReport.STATUS_COMPLETED: set(),
}


def _lab_report(report_id: int) -> LabReport:
    r = LabReport.objects.select_related('patient', 'doctor', 'ordered_by').filter(pk=report_id).first()
    if not r:
        raise NotFound('Lab report not found')
    return r


def order_lab_test(user: User, *, patient_id: int, test_name: str, test_category: str = 'Blood Test',
                   notes: str = '', doctor_id: int | None = None) -> LabReport:
    patient = get_user_with_role(patient_id, Role.PATIENT, 'Patient')
    if user.role == Role.DOCTOR:
        doctor = user
    elif doctor_id:
        doctor = get_user_with_role(doctor_id, Role.DOCTOR, 'Doctor')
    else:
        raise BusinessRuleError('doctorId is required')
    report = LabReport.objects.create(patient=patient, doctor=doctor, ordered_by=user, test_name=test_name,
                                      test_category=test_category, notes=notes or '')
    notify(patient.id, 'Lab Test Ordered', f'A {test_name} test has been ordered for you', 'lab_report',
           '/lab-reports')
    return _lab_report(report.pk)


def lab_reports_for(user: User):
    qs = LabReport.objects.select_related('patient', 'doctor', 'ordered_by')
    if user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    elif user.role == Role.DOCTOR:
        qs = qs.filter(doctor=user)
    return qs.order_by('-created_at', '-id')


def update_lab_report(report_id: int, changes: dict) -> LabReport:
    report = _lab_report(report_id)
    fields = ['updated_at']
    status = changes.get('status')
    completing = False
    if status and status != report.status:
        if status not in LAB_TRANSITIONS.get(report.status, set()):
            raise BusinessRuleError(f'Cannot move lab report from {report.status} to {status}')
        report.status = status
        fields.append('status')
        completing = status == LabReport.STATUS_COMPLETED
        if completing:
            report.completed_at = timezone.now()
            fields.append('completed_at')
    for attr in ('results', 'notes'):
        if attr in changes:
            setattr(report, attr, changes[attr])
            fields.append(attr)
    report.save(update_fields=fields)
    if completing:
        notify(report.patient_id, 'Lab Results Ready', f'Your {report.test_name} results are ready', 'lab_report',
               '/lab-reports')
    payload = format_lab_report(report)
    realtime.emit_to_user(report.patient_id, 'lab_report_updated', payload)
    realtime.emit_to_user(report.doctor_id, 'lab_report_updated', payload)
    return report


def delete_lab_report(report_id: int) -> LabReport:
    report = _lab_report(report_id)
    report.delete()
    return report


# ---------------------------------------------------------------------
# Medical history
# ---------------------------------------------------------------------
def format_history(h: MedicalHistory) -> dict:
    return {
        'id': h.id,
        'patient': format_user_ref(h.patient),
        'addedBy': format_user_ref(h.added_by),
        'type': h.type,
        'title': h.title,
        'description': h.description,
        'severity': h.severity,
        'dateRecorded': _iso(h.date_recorded),
        'isActive': h.is_active,
        'createdAt': _iso(h.created_at),
        'updatedAt': _iso(h.updated_at),
    }


HISTORY_FIELDS = (('type', 'type'), ('title', 'title'), ('description', 'description'),
                  ('severity', 'severity'), ('dateRecorded', 'date_recorded'), ('isActive', 'is_active'))


def _history(record_id: int) -> MedicalHistory:
    h = MedicalHistory.objects.select_related('patient', 'added_by').filter(pk=record_id).first()
    if not h:
        raise NotFound('Medical history record not found')
    return h


def add_history(user: User, data: dict) -> MedicalHistory:
    patient = get_user_with_role(data['patientId'], Role.PATIENT, 'Patient')
    fields = {attr: data[key] for key, attr in HISTORY_FIELDS if key in data}
    fields.setdefault('date_recorded', timezone.now())
    record = MedicalHistory.objects.create(patient=patient, added_by=user, **fields)
    return _history(record.pk)


def history_for(user: User, patient_id: int | None = None):
    qs = MedicalHistory.objects.select_related('patient', 'added_by')
    if user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    elif patient_id:
        qs = qs.filter(patient_id=patient_id)
    return qs.order_by('-created_at', '-id')


def update_history(record_id: int, data: dict) -> MedicalHistory:
    record = _history(record_id)
    for key, attr in HISTORY_FIELDS:
        if key in data:
            setattr(record, attr, data[key])
    record.save()
    return record


def delete_history(record_id: int) -> MedicalHistory:
    record = _history(record_id)
    record.delete()
    return record
