"""Global search across patients, doctors, medicines and appointments."""
from __future__ import annotations

from django.db.models import Q

from clinic.models import Appointment, Medicine, Role, User
from clinic.services.users import format_user_ref

MIN_QUERY = 2
LIMIT = 10


def empty_results() -> dict:
    return {'patients': [], 'doctors': [], 'medicines': [], 'appointments': []}


def _people(role: str, q: str, extra: Q | None = None):
    match = Q(first_name__icontains=q) | Q(last_name__icontains=q) | Q(email__icontains=q)
    if extra is not None:
        match |= extra
    return User.objects.filter(match, role=role).order_by('first_name', 'last_name')[:LIMIT]


def _appointments(user: User, q: str):
    qs = Appointment.objects.select_related('patient', 'doctor').filter(reason__icontains=q)
    if user.role == Role.PATIENT:
        qs = qs.filter(patient=user)
    elif user.role == Role.DOCTOR:
        qs = qs.filter(doctor=user)
    elif user.role != Role.ADMIN:
        qs = qs.filter(Q(patient=user) | Q(doctor=user))
    return qs.order_by('-appointment_date')[:LIMIT]


def search(user: User, raw: str | None) -> dict:
    q = (raw or '').strip()
    if len(q) < MIN_QUERY:
        return empty_results()
    results = empty_results()
    results['patients'] = [format_user_ref(u) for u in _people(Role.PATIENT, q)]
    results['doctors'] = [
        {**format_user_ref(u), 'doctorDepartment': u.doctor_department}
        for u in _people(Role.DOCTOR, q, Q(doctor_department__icontains=q))
    ]
    if user.role != Role.PATIENT:
        medicines = Medicine.objects.filter(Q(name__icontains=q) | Q(category__icontains=q)).order_by('name')[:LIMIT]
        results['medicines'] = [
            {'id': m.id, 'name': m.name, 'category': m.category, 'stock': m.stock, 'price': float(m.price)}
            for m in medicines
        ]
    results['appointments'] = [
        {
            'id': a.id,
            'appointmentDate': a.appointment_date.isoformat(),
            'reason': a.reason,
            'status': a.status,
            'patient': format_user_ref(a.patient),
            'doctor': format_user_ref(a.doctor),
        }
        for a in _appointments(user, q)
    ]
    return results
