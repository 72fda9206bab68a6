from datetime import date, timedelta
from decimal import Decimal

import pytest

from clinic.models import ActivityLog, Invoice, Medicine, Notification, Role

pytestmark = pytest.mark.django_db


@pytest.fixture
def paracetamol():
    return Medicine.objects.create(name='Paracetamol', category='Analgesic', stock=20, price=Decimal('2.50'),
                                   expiry_date=date.today() + timedelta(days=365))


@pytest.fixture
def amoxicillin():
    return Medicine.objects.create(name='Amoxicillin', category='Antibiotic', stock=3, price=Decimal('12.00'),
                                   expiry_date=date.today() + timedelta(days=365))


def test_consultation_invoice_sums_items(receptionist, patient, doctor, client_for):
    r = client_for(receptionist).post('/api/invoices', {
        'patientId': patient.id,
        'doctorId': doctor.id,
        'items': [{'description': 'Consultation', 'cost': '500'}, {'description': 'ECG', 'cost': '249.99'}],
    }, format='json')
    assert r.status_code == 201
    assert r.data['total'] == 749.99
    assert r.data['status'] == 'Unpaid'
    assert r.data['invoiceType'] == 'Consultation'
    assert [i['cost'] for i in r.data['items']] == [500.0, 249.99]
    assert Notification.objects.filter(user=patient, type='billing').exists()
    assert ActivityLog.objects.filter(entity='Invoice', entity_id=str(r.data['id'])).exists()


def test_invoice_requires_items(receptionist, patient, client_for):
    r = client_for(receptionist).post('/api/invoices', {'patientId': patient.id}, format='json')
    assert r.status_code == 400


def test_invoice_for_unknown_patient_is_404(receptionist, client_for):
    r = client_for(receptionist).post('/api/invoices', {
        'patientId': 424242, 'items': [{'description': 'X', 'cost': 1}],
    }, format='json')
    assert r.status_code == 404


def test_pharmacy_sale_prices_from_inventory(pharmacist, patient, paracetamol, amoxicillin, client_for):
    r = client_for(pharmacist).post('/api/invoices', {
        'patientId': patient.id,
        'invoiceType': 'Pharmacy',
        'medicineItems': [
            {'medicineId': paracetamol.id, 'quantity': 4},
            {'medicineId': amoxicillin.id, 'quantity': 2},
        ],
        # client supplied prices are ignored for a sale
        'items': [{'description': 'cheap', 'cost': '0.01'}],
    }, format='json')
    assert r.status_code == 201
    assert r.data['total'] == 34.0
    assert r.data['items'][0]['description'] == 'Paracetamol × 4'
    paracetamol.refresh_from_db()
    amoxicillin.refresh_from_db()
    assert paracetamol.stock == 16
    assert amoxicillin.stock == 1


def test_insufficient_stock_rolls_back_whole_sale(pharmacist, patient, paracetamol, amoxicillin, client_for):
    r = client_for(pharmacist).post('/api/invoices', {
        'patientId': patient.id,
        'invoiceType': 'Pharmacy',
        'medicineItems': [
            {'medicineId': paracetamol.id, 'quantity': 5},
            {'medicineId': amoxicillin.id, 'quantity': 10},
        ],
    }, format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Not enough stock for Amoxicillin. Available: 3'
    paracetamol.refresh_from_db()
    assert paracetamol.stock == 20
    assert not Invoice.objects.exists()


def test_sale_with_unknown_medicine_is_404(pharmacist, patient, paracetamol, client_for):
    r = client_for(pharmacist).post('/api/invoices', {
        'patientId': patient.id,
        'invoiceType': 'Pharmacy',
        'medicineItems': [{'medicineId': paracetamol.id, 'quantity': 1}, {'medicineId': 99999, 'quantity': 1}],
    }, format='json')
    assert r.status_code == 404
    paracetamol.refresh_from_db()
    assert paracetamol.stock == 20


def test_pay_is_idempotent(receptionist, patient, client_for):
    invoice = Invoice.objects.create(patient=patient, items=[{'description': 'X', 'cost': '10.00'}],
                                     total=Decimal('10.00'))
    client = client_for(receptionist)
    for _ in range(2):
        r = client.put(f'/api/invoices/{invoice.id}/pay')
        assert r.status_code == 200
        assert r.data['status'] == 'Paid'
    assert client.put('/api/invoices/999999/pay').status_code == 404


def test_invoice_list_scoping(make_user, client_for, patient, doctor, pharmacist):
    other = make_user(Role.PATIENT)
    Invoice.objects.create(patient=patient, doctor=doctor, total=Decimal('1'), items=[])
    Invoice.objects.create(patient=other, created_by=pharmacist, total=Decimal('2'), items=[])

    assert len(client_for(patient).get('/api/invoices').data) == 1
    assert len(client_for(other).get('/api/invoices').data) == 1
    assert len(client_for(doctor).get('/api/invoices').data) == 1
    assert len(client_for(pharmacist).get('/api/invoices').data) == 1
    assert len(client_for(make_user(Role.ADMIN)).get('/api/invoices').data) == 2


def test_patient_cannot_create_or_pay(patient, client_for):
    client = client_for(patient)
    assert client.post('/api/invoices', {}, format='json').status_code == 403
    assert client.put('/api/invoices/1/pay').status_code == 403
