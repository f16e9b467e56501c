from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from clinical.models import Doctor, Nurse, Patient, User

TEST_SET = [
    ("admin1", User.ROLE_ADMIN),
    ("doctor1", User.ROLE_DOCTOR),
    ("nurse1", User.ROLE_NURSE),
    ("patient1", User.ROLE_PATIENT),
]

class Command(BaseCommand):
    help = "Ensure test users and their profiles exist with password=123456 (idempotent)."

    def handle(self, *args, **opts):
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": make_password("123456"), "is_active": True},
            )
            if not created:
                # reset password, role and active flag on existing rows
                u.password = make_password("123456")
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.ensure_profile(u)
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))

    def ensure_profile(self, user):
        if user.role == User.ROLE_DOCTOR:
            Doctor.objects.get_or_create(user=user, defaults={"specialization": "General Medicine"})
        elif user.role == User.ROLE_NURSE:
            Nurse.objects.get_or_create(user=user, defaults={"ward": "General"})
        elif user.role == User.ROLE_PATIENT:
            Patient.objects.get_or_create(user=user, defaults={"name": user.get_full_name() or user.username})
