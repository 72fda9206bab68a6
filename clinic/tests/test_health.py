import pytest
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_healthz_ok():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_healthz_reports_database_outage(monkeypatch):
    def broken_cursor(*args, **kwargs):
        raise OperationalError('database is down')

    monkeypatch.setattr(connections['default'], 'cursor', broken_cursor)
    r = APIClient().get('/healthz')
    assert r.status_code == 500
    assert r.json()['ok'] is False
