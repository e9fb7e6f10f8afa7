from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from records.models import Facility, User

DEFAULT_PASSWORD = "Health@2024"

# username, role, bound to the first facility
TEST_SET = [
    ("admin1", "admin", False),
    ("supervisor1", "supervisor", False),
    ("doctor1", "doctor", True),
    ("staff1", "staff", True),
]


class Command(BaseCommand):
    help = "Ensure one user per role exists with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--password', default=DEFAULT_PASSWORD)

    def handle(self, *args, **opts):
        password = make_password(opts['password'])
        facility = Facility.objects.order_by('id').first()
        for username, role, bound in TEST_SET:
            if bound and facility is None:
                self.stdout.write(self.style.WARNING(
                    f"{username}: no facility exists yet, created unbound (run seed_demo_data first)"))
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "role": role,
                    "password": password,
                    "is_active": True,
                    "is_staff": role == "admin",
                    "facility": facility if bound else None,
                },
            )
            if not created:
                u.password = password
                u.role = role
                u.is_active = True
                if bound and u.facility_id is None:
                    u.facility = facility
                u.save(update_fields=["password", "role", "is_active", "facility"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
