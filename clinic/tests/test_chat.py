import pytest

from clinic.models import Message, Role

pytestmark = pytest.mark.django_db


def test_send_and_read_conversation(patient, doctor, client_for):
    r = client_for(patient).post('/api/chat/send', {'receiverId': doctor.id, 'message': ' Hello <script>x</script>doc '},
                                 format='json')
    assert r.status_code == 201
    assert r.data['message'] == 'Hello xdoc'
    assert r.data['read'] is False

    doctor_client = client_for(doctor)
    reply = doctor_client.post('/api/chat/send', {'receiverId': patient.id, 'message': 'Hi'}, format='json')
    assert reply.status_code == 201

    thread = doctor_client.get(f'/api/chat/{patient.id}').data
    assert [m['message'] for m in thread] == ['Hello xdoc', 'Hi']

    assert doctor_client.put(f'/api/chat/read/{patient.id}').status_code == 200
    assert not Message.objects.filter(receiver=doctor, read=False).exists()
    assert Message.objects.filter(receiver=patient, read=False).count() == 1


def test_empty_and_misaddressed_messages(patient, doctor, client_for):
    client = client_for(patient)
    assert client.post('/api/chat/send', {'receiverId': doctor.id, 'message': '<i></i>  '},
                       format='json').status_code == 400
    assert client.post('/api/chat/send', {'receiverId': 987654, 'message': 'hello'},
                       format='json').status_code == 404


def test_contacts(patient, doctor, make_user, client_for):
    quiet_doctor = make_user(Role.DOCTOR, first_name='Aaron')
    receptionist = make_user(Role.RECEPTIONIST)
    Message.objects.create(sender=doctor, receiver=patient, message='Take your pills')
    Message.objects.create(sender=doctor, receiver=patient, message='Twice a day')

    contacts = client_for(patient).get('/api/chat/users').data
    ids = [c['id'] for c in contacts]
    # patients only see doctors, latest conversation first
    assert ids == [doctor.id, quiet_doctor.id]
    assert receptionist.id not in ids
    assert contacts[0]['unreadCount'] == 2
    assert contacts[0]['lastMessageTime'] > 0
    assert contacts[1]['lastMessageTime'] == 0

    staff_view = [c['id'] for c in client_for(receptionist).get('/api/chat/users').data]
    assert patient.id in staff_view and doctor.id in staff_view
