from datetime import timedelta

import pytest
from django.utils import timezone

from clinic.models import Appointment, LabReport, MedicalHistory, Notification, Prescription, Role

pytestmark = pytest.mark.django_db


@pytest.fixture
def appointment(patient, doctor):
    return Appointment.objects.create(patient=patient, doctor=doctor, status=Appointment.STATUS_CONFIRMED,
                                      appointment_date=timezone.now() + timedelta(hours=1))


def test_prescribing_completes_the_appointment(doctor, patient, appointment, client_for):
    r = client_for(doctor).post('/api/prescriptions', {
        'patientId': patient.id,
        'appointmentId': appointment.id,
        'diagnosis': 'Migraine',
        'medicines': [{'name': 'Sumatriptan', 'dosage': '50mg', 'duration': '5 days'}],
    }, format='json')
    assert r.status_code == 201
    assert r.data['medicines'][0]['name'] == 'Sumatriptan'
    appointment.refresh_from_db()
    assert appointment.status == Appointment.STATUS_COMPLETED
    assert Notification.objects.filter(user=patient, type='prescription').exists()


def test_prescription_needs_medicines(doctor, patient, appointment, client_for):
    r = client_for(doctor).post('/api/prescriptions', {
        'patientId': patient.id, 'appointmentId': appointment.id, 'diagnosis': 'Nothing', 'medicines': [],
    }, format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'No medicines prescribed'
    appointment.refresh_from_db()
    assert appointment.status == Appointment.STATUS_CONFIRMED
    assert not Prescription.objects.exists()


def test_prescriptions_are_scoped(doctor, patient, make_user, appointment, client_for):
    Prescription.objects.create(doctor=doctor, patient=patient, appointment=appointment, diagnosis='Flu',
                                medicines=[{'name': 'Rest'}])
    assert len(client_for(patient).get('/api/prescriptions').data) == 1
    assert client_for(make_user()).get('/api/prescriptions').data == []
    assert client_for(patient).post('/api/prescriptions', {}, format='json').status_code == 403


def test_lab_report_lifecycle(doctor, patient, admin, client_for):
    client = client_for(doctor)
    r = client.post('/api/lab-reports', {'patientId': patient.id, 'testName': 'CBC'}, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'Ordered'
    assert r.data['doctor']['id'] == doctor.id
    report_id = r.data['id']

    r = client.put(f'/api/lab-reports/{report_id}', {'status': 'In Progress'}, format='json')
    assert r.data['completedAt'] is None

    r = client.put(f'/api/lab-reports/{report_id}', {'status': 'Completed', 'results': 'Normal'}, format='json')
    assert r.data['status'] == 'Completed'
    assert r.data['completedAt'] is not None
    assert Notification.objects.filter(user=patient, title='Lab Results Ready').exists()

    assert [x['id'] for x in client_for(patient).get('/api/lab-reports').data] == [report_id]
    assert client.delete(f'/api/lab-reports/{report_id}').status_code == 403
    assert client_for(admin).delete(f'/api/lab-reports/{report_id}').status_code == 200
    assert not LabReport.objects.exists()


def test_admin_ordering_lab_test_names_the_doctor(admin, doctor, patient, client_for):
    client = client_for(admin)
    r = client.post('/api/lab-reports', {'patientId': patient.id, 'testName': 'MRI scan', 'testCategory': 'MRI'},
                    format='json')
    assert r.status_code == 400
    r = client.post('/api/lab-reports', {'patientId': patient.id, 'testName': 'MRI scan', 'testCategory': 'MRI',
                                         'doctorId': doctor.id}, format='json')
    assert r.status_code == 201
    assert r.data['orderedBy']['id'] == admin.id


def test_medical_history(doctor, patient, make_user, admin, client_for):
    client = client_for(doctor)
    r = client.post('/api/medical-history', {'patientId': patient.id, 'type': 'Allergy', 'title': 'Penicillin',
                                             'severity': 'Severe'}, format='json')
    assert r.status_code == 201
    assert r.data['isActive'] is True
    record_id = r.data['id']

    r = client.put(f'/api/medical-history/{record_id}', {'isActive': False}, format='json')
    assert r.status_code == 200
    assert r.data['isActive'] is False
    assert r.data['title'] == 'Penicillin'

    other = make_user()
    MedicalHistory.objects.create(patient=other, added_by=doctor, type='Surgery', title='Appendix',
                                  date_recorded=timezone.now())
    assert len(client.get('/api/medical-history', {'patientId': patient.id}).data) == 1
    assert len(client.get('/api/medical-history').data) == 2
    # a patient only ever sees their own history
    assert len(client_for(patient).get('/api/medical-history', {'patientId': other.id}).data) == 1

    assert client.delete(f'/api/medical-history/{record_id}').status_code == 403
    assert client_for(admin).delete(f'/api/medical-history/{record_id}').status_code == 200
    assert client_for(admin).delete(f'/api/medical-history/{record_id}').status_code == 404


def _prescribe(client, patient, appointment):
    return client.post('/api/prescriptions', {
        'patientId': patient.id,
        'appointmentId': appointment.id,
        'diagnosis': 'Flu',
        'medicines': [{'name': 'Paracetamol', 'dosage': '500mg'}],
    }, format='json')


@pytest.mark.parametrize('status', [Appointment.STATUS_CANCELLED, Appointment.STATUS_COMPLETED])
def test_closed_appointment_cannot_be_prescribed_on(status, doctor, patient, appointment, client_for):
    Appointment.objects.filter(pk=appointment.id).update(status=status)
    r = _prescribe(client_for(doctor), patient, appointment)
    assert r.status_code == 400
    appointment.refresh_from_db()
    assert appointment.status == status
    assert not Prescription.objects.exists()


def test_pending_appointment_can_be_prescribed_on(doctor, patient, appointment, client_for):
    Appointment.objects.filter(pk=appointment.id).update(status=Appointment.STATUS_PENDING)
    assert _prescribe(client_for(doctor), patient, appointment).status_code == 201
    appointment.refresh_from_db()
    assert appointment.status == Appointment.STATUS_COMPLETED


def test_only_the_appointments_doctor_prescribes(patient, appointment, make_user, client_for):
    other_doctor = make_user(Role.DOCTOR)
    other_patient = make_user()
    r = _prescribe(client_for(other_doctor), other_patient, appointment)
    assert r.status_code == 403
    appointment.refresh_from_db()
    assert appointment.status == Appointment.STATUS_CONFIRMED
    assert not Prescription.objects.exists()


def test_prescription_patient_must_match_appointment(doctor, appointment, make_user, client_for):
    r = _prescribe(client_for(doctor), make_user(), appointment)
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Patient does not match the appointment'
    appointment.refresh_from_db()
    assert appointment.status == Appointment.STATUS_CONFIRMED


def test_lab_report_status_only_moves_forward(doctor, patient, client_for):
    client = client_for(doctor)
    report_id = client.post('/api/lab-reports', {'patientId': patient.id, 'testName': 'Lipid panel'},
                            format='json').data['id']
    r = client.put(f'/api/lab-reports/{report_id}', {'status': 'Completed', 'results': 'LDL 90'}, format='json')
    completed_at = r.data['completedAt']
    assert completed_at is not None

    r = client.put(f'/api/lab-reports/{report_id}', {'status': 'Ordered'}, format='json')
    assert r.status_code == 400
    report = LabReport.objects.get(pk=report_id)
    assert report.status == LabReport.STATUS_COMPLETED
    assert report.completed_at is not None

    # repeating the current status only edits the other fields
    r = client.put(f'/api/lab-reports/{report_id}', {'status': 'Completed', 'notes': 'fasting'}, format='json')
    assert r.status_code == 200
    assert r.data['notes'] == 'fasting'
    assert r.data['completedAt'] == completed_at
    assert Notification.objects.filter(user=patient, title='Lab Results Ready').count() == 1
