from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from clinic.models import Appointment, Medicine, Role

pytestmark = pytest.mark.django_db


@pytest.fixture
def world(make_user):
    alice = make_user(Role.PATIENT, first_name='Alice', last_name='Carter')
    bob = make_user(Role.PATIENT, first_name='Bob', last_name='Carter')
    cardio = make_user(Role.DOCTOR, first_name='Cara', last_name='Heart', doctor_department='Cardiology')
    Medicine.objects.create(name='Carvedilol', category='Beta blocker', stock=10, price=Decimal('8'),
                            expiry_date=date.today() + timedelta(days=300))
    Appointment.objects.create(patient=alice, doctor=cardio, reason='Cardiac checkup',
                               appointment_date=timezone.now())
    Appointment.objects.create(patient=bob, doctor=cardio, reason='Cardiac follow-up',
                               appointment_date=timezone.now())
    return {'alice': alice, 'bob': bob, 'cardio': cardio}


def test_short_query_returns_empty_buckets(admin, client_for):
    r = client_for(admin).get('/api/search', {'q': ' c '})
    assert r.data == {'patients': [], 'doctors': [], 'medicines': [], 'appointments': []}


def test_admin_sees_everything(world, admin, client_for):
    r = client_for(admin).get('/api/search', {'q': 'car'})
    assert {p['firstName'] for p in r.data['patients']} == {'Alice', 'Bob'}
    assert r.data['doctors'][0]['doctorDepartment'] == 'Cardiology'
    assert [m['name'] for m in r.data['medicines']] == ['Carvedilol']
    assert len(r.data['appointments']) == 2


def test_patient_results_are_scoped(world, client_for):
    r = client_for(world['alice']).get('/api/search', {'q': 'car'})
    assert r.data['medicines'] == []
    assert [a['patient']['id'] for a in r.data['appointments']] == [world['alice'].id]


def test_doctor_sees_own_appointments(world, make_user, client_for):
    assert len(client_for(world['cardio']).get('/api/search', {'q': 'cardiac'}).data['appointments']) == 2
    other_doctor = make_user(Role.DOCTOR)
    assert client_for(other_doctor).get('/api/search', {'q': 'cardiac'}).data['appointments'] == []


def test_staff_only_see_appointments_they_are_party_to(world, receptionist, client_for):
    r = client_for(receptionist).get('/api/search', {'q': 'cardiac'})
    assert r.data['appointments'] == []
    assert r.data['medicines'] == []
