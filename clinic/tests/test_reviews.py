from datetime import timedelta

import pytest
from django.utils import timezone

from clinic.models import Appointment, Review, Role
from clinic.services.reviews import average

pytestmark = pytest.mark.django_db


@pytest.fixture
def visit(patient, doctor):
    def _visit(status=Appointment.STATUS_COMPLETED, patient=patient, doctor=doctor):
        return Appointment.objects.create(patient=patient, doctor=doctor, status=status,
                                          appointment_date=timezone.now() - timedelta(days=1))
    return _visit


def test_average_rounds_half_up():
    assert average(0, 0) == 0
    assert average(9, 2) == 4.5
    assert average(13, 3) == 4.3
    assert average(5, 4) == 1.3


def test_patient_reviews_completed_visit_once(patient, doctor, visit, client_for):
    appt = visit()
    client = client_for(patient)
    r = client.post('/api/reviews', {'appointmentId': appt.id, 'rating': 5, 'comment': '<b>Great</b> care'},
                    format='json')
    assert r.status_code == 201
    assert r.data['doctor']['id'] == doctor.id
    assert r.data['comment'] == 'Great care'

    again = client.post('/api/reviews', {'appointmentId': appt.id, 'rating': 1}, format='json')
    assert again.status_code == 400
    assert again.data['error']['message'] == 'You have already reviewed this appointment'

    check = client.get(f'/api/reviews/check/{appt.id}').data
    assert check['reviewed'] is True
    assert check['review']['rating'] == 5


def test_review_rules(patient, make_user, visit, client_for):
    client = client_for(patient)
    pending = visit(status=Appointment.STATUS_PENDING)
    r = client.post('/api/reviews', {'appointmentId': pending.id, 'rating': 4}, format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Can only review completed appointments'

    someone_elses = visit(patient=make_user(Role.PATIENT))
    assert client.post('/api/reviews', {'appointmentId': someone_elses.id, 'rating': 4},
                       format='json').status_code == 403
    assert client.post('/api/reviews', {'appointmentId': 99999, 'rating': 4}, format='json').status_code == 404
    assert client.post('/api/reviews', {'appointmentId': visit().id, 'rating': 6}, format='json').status_code == 400


def test_doctor_ratings(patient, doctor, make_user, visit, client_for):
    for rating in (4, 5):
        appt = visit()
        Review.objects.create(patient=patient, doctor=doctor, appointment=appt, rating=rating)

    client = client_for(make_user(Role.RECEPTIONIST))
    data = client.get(f'/api/reviews/doctor/{doctor.id}').data
    assert data['totalReviews'] == 2
    assert data['averageRating'] == 4.5

    ratings = client.get('/api/reviews/ratings').data
    assert ratings == {str(doctor.id): {'averageRating': 4.5, 'totalReviews': 2}}
    assert client.get('/api/reviews/check/424242').data == {'reviewed': False, 'review': None}


def test_only_patients_write_reviews(doctor, visit, client_for):
    assert client_for(doctor).post('/api/reviews', {'appointmentId': visit().id, 'rating': 3},
                                   format='json').status_code == 403
