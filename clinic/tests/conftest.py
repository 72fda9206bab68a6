import itertools

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from clinic.models import Role, User

PASSWORD = 'S3cure-pass!9'

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle history lives in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(role=Role.PATIENT, **extra):
        n = next(_seq)
        extra.setdefault('email', f'{role.lower()}{n}@hospital.test')
        extra.setdefault('first_name', f'{role}{n}')
        extra.setdefault('last_name', 'Tester')
        if role == Role.DOCTOR:
            extra.setdefault('doctor_department', 'Cardiology')
        return User.objects.create_user(password=PASSWORD, role=role, **extra)
    return _make


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN)


@pytest.fixture
def doctor(make_user):
    return make_user(Role.DOCTOR)


@pytest.fixture
def patient(make_user):
    return make_user(Role.PATIENT)


@pytest.fixture
def receptionist(make_user):
    return make_user(Role.RECEPTIONIST)


@pytest.fixture
def pharmacist(make_user):
    return make_user(Role.PHARMACIST)


@pytest.fixture
def hr(make_user):
    return make_user(Role.HR)
