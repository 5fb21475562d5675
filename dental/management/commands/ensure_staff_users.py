# dental/management/commands/ensure_staff_users.py
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from dental.models import User

STAFF_SET = [
    ("admin1", User.ROLE_ADMIN, "Clinic", "Admin"),
    ("dentist1", User.ROLE_DENTIST, "Daniel", "Mushi"),
    ("reception1", User.ROLE_RECEPTIONIST, "Rehema", "Juma"),
    ("assistant1", User.ROLE_ASSISTANT, "Asha", "Said"),
    ("technician1", User.ROLE_TECHNICIAN, "Tumaini", "Kweka"),
    ("radiology1", User.ROLE_RADIOLOGIST, "Neema", "Mollel"),
    ("finance1", User.ROLE_FINANCE, "Baraka", "Mrema"),
]


class Command(BaseCommand):
    help = "Ensure one demo staff account per role exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="Dental#2024", help="Password set on every account.")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role, first, last in STAFF_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "role": role,
                    "first_name": first,
                    "last_name": last,
                    "email": f"{username}@sddental.local",
                    "password": password,
                    "is_active": True,
                    "is_staff": role == User.ROLE_ADMIN,
                },
            )
            if not created:
                # reset password, role and active flag
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All staff users ensured."))
