"""Patient reviews of completed appointments and doctor ratings."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.db.models import Count, Sum
from rest_framework.exceptions import NotFound, PermissionDenied

from clinic.exceptions import BusinessRuleError
from clinic.models import Appointment, Review, User
from clinic.services.users import format_user_ref

ALREADY_REVIEWED = 'You have already reviewed this appointment'


def average(total: int, count: int) -> float:
    """Mean rating rounded half-up to one decimal; 0 when there are none."""
    if not count:
        return 0
    return float((Decimal(total) / Decimal(count)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def format_review(r: Review) -> dict:
    return {
        'id': r.id,
        'patient': format_user_ref(r.patient),
        'doctor': format_user_ref(r.doctor),
        'appointment': r.appointment_id,
        'rating': r.rating,
        'comment': r.comment,
        'createdAt': r.created_at.isoformat() if r.created_at else None,
    }


def create_review(patient: User, *, appointment_id: int, rating: int, comment: str = '') -> Review:
    appt = Appointment.objects.filter(pk=appointment_id).first()
    if not appt:
        raise NotFound('Appointment not found')
    if appt.status != Appointment.STATUS_COMPLETED:
        raise BusinessRuleError('Can only review completed appointments')
    if appt.patient_id != patient.id:
        raise PermissionDenied('You can only review your own appointments')
    if Review.objects.filter(appointment=appt).exists():
        raise BusinessRuleError(ALREADY_REVIEWED)
    try:
        with transaction.atomic():
            review = Review.objects.create(patient=patient, doctor_id=appt.doctor_id, appointment=appt,
                                           rating=rating, comment=comment or '')
    except IntegrityError:
        raise BusinessRuleError(ALREADY_REVIEWED)
    return Review.objects.select_related('patient', 'doctor').get(pk=review.pk)


def doctor_reviews(doctor_id: int) -> dict:
    reviews = list(Review.objects.select_related('patient', 'doctor').filter(doctor_id=doctor_id)
                   .order_by('-created_at'))
    total = sum(r.rating for r in reviews)
    return {
        'reviews': [format_review(r) for r in reviews],
        'averageRating': average(total, len(reviews)),
        'totalReviews': len(reviews),
    }


def ratings_map() -> dict:
    rows = Review.objects.values('doctor_id').annotate(total=Sum('rating'), count=Count('id'))
    return {
        str(row['doctor_id']): {'averageRating': average(row['total'], row['count']), 'totalReviews': row['count']}
        for row in rows
    }


def check(appointment_id: int) -> dict:
    review = Review.objects.select_related('patient', 'doctor').filter(appointment_id=appointment_id).first()
    return {'reviewed': review is not None, 'review': format_review(review) if review else None}
