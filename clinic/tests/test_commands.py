from io import StringIO

import pytest
from django.core.management import call_command

from clinic.models import Bed, Medicine, Message, Role, User

pytestmark = pytest.mark.django_db


def test_ensure_demo_users_is_idempotent():
    call_command('ensure_demo_users', '--password', 'An0ther-demo!', stdout=StringIO())
    call_command('ensure_demo_users', '--password', 'An0ther-demo!', stdout=StringIO())
    assert User.objects.count() == 6
    assert set(User.objects.values_list('role', flat=True)) == set(Role.values)
    doctor = User.objects.get(email='doctor@hospital.test')
    assert doctor.check_password('An0ther-demo!')
    assert doctor.doctor_department == 'General Medicine'


def test_seed_data_is_idempotent():
    out = StringIO()
    call_command('seed_data', stdout=out)
    beds, medicines = Bed.objects.count(), Medicine.objects.count()
    assert beds > 0 and medicines > 0
    call_command('seed_data', stdout=out)
    assert (Bed.objects.count(), Medicine.objects.count()) == (beds, medicines)
    assert 'Seeded 0 beds and 0 medicines.' in out.getvalue()
    assert Bed.objects.filter(ward='ICU').first().daily_rate == 5000


def test_mark_messages_read(patient, doctor):
    Message.objects.create(sender=patient, receiver=doctor, message='a')
    Message.objects.create(sender=doctor, receiver=patient, message='b', read=True)
    out = StringIO()
    call_command('mark_messages_read', stdout=out)
    assert 'Marked 1 messages as read.' in out.getvalue()
    assert not Message.objects.filter(read=False).exists()
