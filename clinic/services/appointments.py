"""Appointment booking, listing and the status state machine."""
from __future__ import annotations

from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.exceptions import BusinessRuleError
from clinic.models import Appointment, Role, User
from clinic.services import realtime
from clinic.services.notifications import notify
from clinic.services.users import format_user_ref, get_user_with_role

# Completed and Cancelled are terminal
ALLOWED_TRANSITIONS = {
    Appointment.STATUS_PENDING: {Appointment.STATUS_CONFIRMED, Appointment.STATUS_CANCELLED,
                                 Appointment.STATUS_COMPLETED},
    Appointment.STATUS_CONFIRMED: {Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_COMPLETED: set(),
    Appointment.STATUS_CANCELLED: set(),
}


def can_transition(old: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(old, set())


def format_appointment(a: Appointment) -> dict:
    doctor = format_user_ref(a.doctor)
    if doctor is not None:
        doctor['doctorDepartment'] = a.doctor.doctor_department
    return {
        'id': a.id,
        'patient': format_user_ref(a.patient),
        'doctor': doctor,
        'appointmentDate': a.appointment_date.isoformat(),
        'reason': a.reason,
        'status': a.status,
        'createdAt': a.created_at.isoformat() if a.created_at else None,
        'updatedAt': a.updated_at.isoformat() if a.updated_at else None,
    }


def local_day(dt) -> str:
    return timezone.localtime(dt).date().isoformat()


def book(user: User, *, doctor_id: int, appointment_date, reason: str = '',
         patient_id: int | None = None) -> Appointment:
    doctor = get_user_with_role(doctor_id, Role.DOCTOR, 'Doctor')
    if user.role == Role.RECEPTIONIST:
        if not patient_id:
            raise BusinessRuleError('patientId is required')
        patient = get_user_with_role(patient_id, Role.PATIENT, 'Patient')
    else:
        patient = user
    appt = Appointment.objects.create(
        patient=patient, doctor=doctor, appointment_date=appointment_date, reason=reason or '',
        status=Appointment.STATUS_PENDING,
    )
    day = local_day(appointment_date)
    notify(doctor.id, 'New Appointment', f'New appointment booked for {day}', 'appointment', '/appointments')
    realtime.emit_to_user(doctor.id, 'appointment_created', format_appointment(appt))
    return appt


def list_for(user: User):
    qs = Appointment.objects.select_related('patient', 'doctor')
    if user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    elif user.role == Role.DOCTOR:
        qs = qs.filter(doctor=user)
    return qs.order_by('appointment_date', 'id')


def update_status(appointment_id: int, new_status: str) -> Appointment:
    appt = Appointment.objects.select_related('patient', 'doctor').filter(pk=appointment_id).first()
    if not appt:
        raise NotFound('Appointment not found')
    if not can_transition(appt.status, new_status):
        raise BusinessRuleError(f'Cannot change appointment from {appt.status} to {new_status}')
    appt.status = new_status
    appt.save(update_fields=['status', 'updated_at'])
    notify(appt.patient_id, 'Appointment Updated', f'Your appointment has been {new_status.lower()}',
           'appointment', '/appointments')
    realtime.emit_to_user(appt.patient_id, 'appointment_status_updated',
                          {'appointmentId': appt.id, 'status': new_status})
    return appt
