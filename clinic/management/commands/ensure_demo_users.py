# clinic/management/commands/ensure_demo_users.py
from django.core.management.base import BaseCommand

from clinic.models import Role, User

DEMO_SET = [
    ("admin@hospital.test", Role.ADMIN, "Ada", "Admin"),
    ("doctor@hospital.test", Role.DOCTOR, "Derek", "House"),
    ("reception@hospital.test", Role.RECEPTIONIST, "Rita", "Desk"),
    ("pharmacy@hospital.test", Role.PHARMACIST, "Phil", "Pills"),
    ("hr@hospital.test", Role.HR, "Hana", "People"),
    ("patient@hospital.test", Role.PATIENT, "Paul", "Patient"),
]


class Command(BaseCommand):
    help = "Ensure one demo account per role exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="Demo-pass-2024!")

    def handle(self, *args, **opts):
        password = opts["password"]
        for email, role, first, last in DEMO_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "role": role, "first_name": first, "last_name": last},
            )
            # reset password, role and activation on every run
            u.set_password(password)
            u.role = role
            u.is_active = True
            if role == Role.DOCTOR and not u.doctor_department:
                u.doctor_department = "General Medicine"
            u.save()
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
