"""
Staff attendance.

One record per user per local calendar day.  Check-in after 10:00 local
time is Late; checking out after fewer than four hours marks the day
Half-Day.
"""
from __future__ import annotations

from django.db import IntegrityError, transaction
from django.utils import timezone

from clinic.exceptions import BusinessRuleError
from clinic.models import Attendance, User
from clinic.services.users import format_user_ref

LATE_HOUR = 10
HALF_DAY_HOURS = 4


def format_attendance(a: Attendance) -> dict:
    return {
        'id': a.id,
        'user': format_user_ref(a.user),
        'date': a.date,
        'checkIn': a.check_in.isoformat() if a.check_in else None,
        'checkOut': a.check_out.isoformat() if a.check_out else None,
        'status': a.status,
        'hoursWorked': a.hours_worked,
        'notes': a.notes,
        'createdAt': a.created_at.isoformat() if a.created_at else None,
    }


def local_day(now) -> str:
    return timezone.localtime(now).date().isoformat()


def check_in(user: User, *, now=None, notes: str = '') -> Attendance:
    now = now or timezone.now()
    day = local_day(now)
    if Attendance.objects.filter(user=user, date=day).exists():
        raise BusinessRuleError('Already checked in today')
    status = Attendance.STATUS_LATE if timezone.localtime(now).hour >= LATE_HOUR else Attendance.STATUS_PRESENT
    try:
        with transaction.atomic():
            return Attendance.objects.create(user=user, date=day, check_in=now, status=status, notes=notes or '')
    except IntegrityError:
        # lost a race with a concurrent check-in
        raise BusinessRuleError('Already checked in today')


def check_out(user: User, *, now=None) -> Attendance:
    now = now or timezone.now()
    record = Attendance.objects.filter(user=user, date=local_day(now)).first()
    if not record:
        raise BusinessRuleError('You have not checked in today')
    if record.check_out:
        raise BusinessRuleError('Already checked out today')
    hours = round((now - record.check_in).total_seconds() / 3600, 2)
    record.check_out = now
    record.hours_worked = hours
    if hours < HALF_DAY_HOURS:
        record.status = Attendance.STATUS_HALF_DAY
    record.save(update_fields=['check_out', 'hours_worked', 'status', 'updated_at'])
    return record


def today(user: User, *, now=None) -> Attendance | None:
    return Attendance.objects.filter(user=user, date=local_day(now or timezone.now())).first()


def history(user: User, limit: int = 30):
    return Attendance.objects.select_related('user').filter(user=user).order_by('-date')[:limit]


def all_records(*, date=None, user_id=None, limit: int = 100):
    qs = Attendance.objects.select_related('user')
    if date:
        qs = qs.filter(date=date.isoformat())
    if user_id:
        qs = qs.filter(user_id=user_id)
    return qs.order_by('-date', '-check_in')[:limit]
