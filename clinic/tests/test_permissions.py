import pytest
from rest_framework.test import APIClient

from clinic.models import Role
from clinic.permissions import CAPABILITIES, allowed_roles, capability

pytestmark = pytest.mark.django_db


def test_every_capability_names_known_roles_only():
    for name, rules in CAPABILITIES.items():
        for method, roles in rules.items():
            assert method in {'GET', 'POST', 'PUT', 'DELETE'}, name
            assert set(roles) <= set(Role.values), name


def test_head_and_options_follow_get():
    assert allowed_roles('beds', 'HEAD') == allowed_roles('beds', 'GET')
    assert allowed_roles('activity_logs', 'OPTIONS') == {Role.ADMIN}


def test_unknown_capability_fails_fast():
    with pytest.raises(KeyError):
        capability('does.not.exist')


@pytest.mark.parametrize('method,path', [
    ('get', '/api/patients'),
    ('get', '/api/beds'),
    ('get', '/api/activity-logs'),
    ('post', '/api/attendance/check-in'),
    ('get', '/api/search?q=ab'),
])
def test_unauthenticated_requests_get_401(method, path):
    r = getattr(APIClient(), method)(path)
    assert r.status_code == 401


@pytest.mark.parametrize('role,method,path,expected', [
    (Role.PATIENT, 'get', '/api/patients', 403),
    (Role.PHARMACIST, 'get', '/api/patients', 200),
    (Role.PATIENT, 'get', '/api/beds', 403),
    (Role.RECEPTIONIST, 'get', '/api/beds', 200),
    (Role.DOCTOR, 'get', '/api/activity-logs', 403),
    (Role.ADMIN, 'get', '/api/activity-logs', 200),
    (Role.HR, 'get', '/api/leaves', 200),
    (Role.DOCTOR, 'get', '/api/leaves', 403),
    (Role.PATIENT, 'get', '/api/medicines/alerts', 403),
    (Role.PHARMACIST, 'get', '/api/medicines/alerts', 200),
    (Role.RECEPTIONIST, 'get', '/api/attendance', 403),
    (Role.PATIENT, 'get', '/api/doctors', 200),
])
def test_role_table_is_enforced(make_user, client_for, role, method, path, expected):
    r = getattr(client_for(make_user(role)), method)(path)
    assert r.status_code == expected


def test_forbidden_runs_before_the_view_body(make_user, client_for):
    # a Doctor may not create beds: rejected even with an invalid payload
    r = client_for(make_user(Role.DOCTOR)).post('/api/beds', {}, format='json')
    assert r.status_code == 403
    assert r.data['ok'] is False
    assert r.data['error']['message'] == 'Not authorized to access this route'
