import pytest

from clinic.models import ActivityLog, Role, User
from clinic.tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def _account(**overrides):
    data = {'firstName': 'Ivy', 'lastName': 'Stone', 'email': 'ivy@hospital.test', 'password': PASSWORD}
    data.update(overrides)
    return data


def test_receptionist_creates_patient(receptionist, client_for):
    client = client_for(receptionist)
    r = client.post('/api/patients', _account(), format='json')
    assert r.status_code == 201
    assert r.data['role'] == 'Patient'
    assert ActivityLog.objects.filter(user=receptionist, action='CREATE', entity='Patient').exists()

    dup = client.post('/api/patients', _account(), format='json')
    assert dup.status_code == 400


def test_patient_list_and_detail(admin, patient, doctor, client_for):
    client = client_for(admin)
    ids = [p['id'] for p in client.get('/api/patients').data]
    assert patient.id in ids and doctor.id not in ids
    assert client.get(f'/api/patients/{patient.id}').data['email'] == patient.email
    # a doctor id is not a patient
    assert client.get(f'/api/patients/{doctor.id}').status_code == 404


def test_admin_creates_doctor_with_department(admin, client_for):
    r = client_for(admin).post('/api/doctors', _account(email='doc@hospital.test', doctorDepartment='Oncology'),
                               format='json')
    assert r.status_code == 201
    created = User.objects.get(email='doc@hospital.test')
    assert created.role == Role.DOCTOR
    assert created.doctor_department == 'Oncology'


def test_doctor_detail_404_for_non_doctor(patient, client_for):
    client = client_for(patient)
    assert client.get(f'/api/doctors/{patient.id}').status_code == 404
    assert client.post('/api/doctors', _account(), format='json').status_code == 403
