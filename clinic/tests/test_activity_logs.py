import pytest

from clinic.models import ActivityLog
from clinic.services.audit import log_activity, query_logs

pytestmark = pytest.mark.django_db


def test_log_activity_records_forwarded_ip(rf, doctor):
    request = rf.get('/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1')
    entry = log_activity(user=doctor, action='VIEW', entity='Patient', entity_id=3, request=request)
    assert entry.ip_address == '203.0.113.7'
    assert entry.entity_id == '3'


def test_log_activity_skips_anonymous_and_swallows_failures(doctor, monkeypatch):
    assert log_activity(user=None, action='VIEW', entity='Patient') is None

    def boom(*args, **kwargs):
        raise RuntimeError('disk full')

    monkeypatch.setattr(ActivityLog.objects, 'create', boom)
    assert log_activity(user=doctor, action='VIEW', entity='Patient') is None


def test_query_filters_and_paginates(doctor, patient):
    for i in range(5):
        log_activity(user=doctor, action='UPDATE', entity='Medicine', entity_id=i)
    log_activity(user=patient, action='LOGIN', entity='User')

    page = query_logs(page=2, limit=2, action='UPDATE')
    assert page['total'] == 5
    assert page['pages'] == 3
    assert page['page'] == 2
    assert [e['entityId'] for e in page['logs']] == ['2', '1']

    assert query_logs(user_id=patient.id)['total'] == 1
    assert query_logs(entity='Bed') == {'logs': [], 'page': 1, 'pages': 0, 'total': 0}


def test_endpoints(admin, doctor, client_for):
    log_activity(user=doctor, action='LOGIN', entity='User')
    r = client_for(admin).get('/api/activity-logs', {'action': 'LOGIN', 'limit': 10})
    assert r.status_code == 200
    assert r.data['total'] == 1
    assert r.data['logs'][0]['user']['id'] == doctor.id

    mine = client_for(doctor).get('/api/activity-logs/my').data
    assert [e['action'] for e in mine] == ['LOGIN']
    assert client_for(admin).get('/api/activity-logs', {'page': 0}).status_code == 400
