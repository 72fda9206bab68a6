from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from clinic.exceptions import BusinessRuleError
from clinic.models import Bed, Invoice, Notification
from clinic.services import beds as svc
from clinic.services.beds import compute_stay_charge

pytestmark = pytest.mark.django_db

T0 = timezone.make_aware(datetime(2026, 3, 1, 9, 0))


@pytest.fixture
def bed():
    return Bed.objects.create(room_number='101', bed_number='A', ward='General', daily_rate=Decimal('500'))


@pytest.mark.parametrize('elapsed,days', [
    (timedelta(minutes=5), 1),
    (timedelta(hours=24), 1),
    (timedelta(hours=25), 2),
    (timedelta(hours=48), 2),
    (timedelta(hours=48, seconds=1), 3),
    (timedelta(days=3), 3),
    (timedelta(0), 1),
])
def test_stay_charge_rounds_partial_days_up(elapsed, days):
    billed, total = compute_stay_charge(T0, T0 + elapsed, Decimal('500'))
    assert billed == days
    assert total == Decimal('500') * days


def test_stay_charge_falls_back_to_default_rate():
    _, total = compute_stay_charge(T0, T0 + timedelta(hours=1), None)
    assert total == Decimal(Bed.DEFAULT_DAILY_RATE)


def test_admin_creates_beds_and_duplicates_are_rejected(admin, client_for):
    client = client_for(admin)
    r = client.post('/api/beds', {'roomNumber': '201', 'bedNumber': 'B', 'ward': 'ICU', 'dailyRate': '1500'},
                    format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'Available'
    assert r.data['dailyRate'] == 1500.0

    dup = client.post('/api/beds', {'roomNumber': '201', 'bedNumber': 'B'}, format='json')
    assert dup.status_code == 400
    assert dup.data['error']['message'] == 'Bed already exists in this room'

    occupied = client.post('/api/beds', {'roomNumber': '201', 'bedNumber': 'C', 'status': 'Occupied'},
                           format='json')
    assert occupied.status_code == 400


def test_assign_then_discharge_bills_the_stay(bed, patient, receptionist):
    bed = svc.assign(bed.id, patient.id, receptionist, now=T0)
    assert bed.status == Bed.STATUS_OCCUPIED
    assert bed.patient_id == patient.id
    assert Notification.objects.filter(user=patient, title='Bed Assigned').exists()

    bed, summary = svc.discharge(bed.id, receptionist, now=T0 + timedelta(days=2, hours=1))
    assert bed.status == Bed.STATUS_AVAILABLE
    assert bed.patient_id is None
    assert summary['daysStayed'] == 3
    assert summary['totalAmount'] == 1500.0

    invoice = Invoice.objects.get(pk=summary['invoiceId'])
    assert invoice.invoice_type == Invoice.TYPE_BED
    assert invoice.total == Decimal('1500')
    assert invoice.patient_id == patient.id
    assert invoice.status == Invoice.STATUS_UNPAID


def test_occupied_bed_cannot_be_assigned_again(bed, patient, make_user, receptionist):
    svc.assign(bed.id, patient.id, receptionist, now=T0)
    with pytest.raises(BusinessRuleError, match='Bed is not available'):
        svc.assign(bed.id, make_user().id, receptionist, now=T0)


def test_maintenance_bed_cannot_be_assigned(bed, patient, receptionist):
    Bed.objects.filter(pk=bed.id).update(status=Bed.STATUS_MAINTENANCE)
    with pytest.raises(BusinessRuleError):
        svc.assign(bed.id, patient.id, receptionist)


def test_reserved_bed_can_be_assigned(bed, patient, receptionist):
    Bed.objects.filter(pk=bed.id).update(status=Bed.STATUS_RESERVED)
    assert svc.assign(bed.id, patient.id, receptionist).status == Bed.STATUS_OCCUPIED


def test_discharging_free_bed_fails(bed, receptionist):
    with pytest.raises(BusinessRuleError, match='Bed is not occupied'):
        svc.discharge(bed.id, receptionist)


def test_discharge_stands_when_billing_fails(bed, patient, receptionist, monkeypatch):
    svc.assign(bed.id, patient.id, receptionist, now=T0)

    def boom(*args, **kwargs):
        raise RuntimeError('billing offline')

    monkeypatch.setattr(Invoice.objects, 'create', boom)
    bed, summary = svc.discharge(bed.id, receptionist, now=T0 + timedelta(hours=3))
    assert bed.status == Bed.STATUS_AVAILABLE
    assert summary['invoiceId'] is None
    assert summary['daysStayed'] == 1


def test_occupied_bed_rules_over_http(bed, patient, admin, client_for):
    client = client_for(admin)
    r = client.post(f'/api/beds/{bed.id}/assign', {'patientId': patient.id}, format='json')
    assert r.status_code == 200
    assert r.data['patient']['id'] == patient.id

    assert client.put(f'/api/beds/{bed.id}', {'status': 'Maintenance'}, format='json').status_code == 400
    assert client.delete(f'/api/beds/{bed.id}').status_code == 400
    # notes can still change
    assert client.put(f'/api/beds/{bed.id}', {'notes': 'window side'}, format='json').status_code == 200

    r = client.put(f'/api/beds/{bed.id}/discharge')
    assert r.status_code == 200
    assert r.data['status'] == 'Available'
    assert r.data['discharge']['daysStayed'] == 1
    assert client.delete(f'/api/beds/{bed.id}').status_code == 200


def test_assign_non_patient_is_404(bed, doctor, admin, client_for):
    r = client_for(admin).put(f'/api/beds/{bed.id}/assign', {'patientId': doctor.id}, format='json')
    assert r.status_code == 404


def test_discharge_at_exactly_two_days_bills_two(bed, patient, receptionist):
    svc.assign(bed.id, patient.id, receptionist, now=T0)
    _, summary = svc.discharge(bed.id, receptionist, now=T0 + timedelta(hours=48))
    assert summary['daysStayed'] == 2
    assert summary['totalAmount'] == 1000.0


def _stale_first_read(monkeypatch, stale):
    real_get = svc._get
    reads = iter([stale])
    monkeypatch.setattr(svc, '_get', lambda bed_id: next(reads, None) or real_get(bed_id))


def test_notes_edit_keeps_concurrent_assignment(bed, patient, receptionist, monkeypatch):
    stale = Bed.objects.get(pk=bed.id)
    svc.assign(bed.id, patient.id, receptionist, now=T0)
    _stale_first_read(monkeypatch, stale)

    bed = svc.update_bed(bed.id, {'notes': 'window side'})
    assert bed.notes == 'window side'
    assert bed.status == Bed.STATUS_OCCUPIED
    assert bed.patient_id == patient.id
    assert bed.admission_date == T0


def test_status_edit_refused_when_bed_was_assigned_meanwhile(bed, patient, receptionist, monkeypatch):
    stale = Bed.objects.get(pk=bed.id)
    svc.assign(bed.id, patient.id, receptionist, now=T0)
    _stale_first_read(monkeypatch, stale)

    with pytest.raises(BusinessRuleError):
        svc.update_bed(bed.id, {'status': Bed.STATUS_MAINTENANCE})
    bed.refresh_from_db()
    assert bed.status == Bed.STATUS_OCCUPIED
    assert bed.patient_id == patient.id
