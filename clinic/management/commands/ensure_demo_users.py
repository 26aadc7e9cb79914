from django.conf import settings
from django.core.management.base import BaseCommand

from clinic.models import Patient, User
from clinic.services.linking import forget_links

DEMO_SET = [
    ("admin@medicare.test", "admin", "Ada Admin"),
    ("doctor@medicare.test", "doctor", "Dr. Grace Hopper"),
    ("reception@medicare.test", "receptionist", "Rita Reception"),
    ("patient@medicare.test", "patient", "Paul Patient"),
]


class Command(BaseCommand):
    help = "Ensure one demo account per role exists with the demo password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=None, help="Override DEMO_PASSWORD.")

    def handle(self, *args, **opts):
        password = opts.get("password") or settings.DEMO_PASSWORD
        for email, role, name in DEMO_SET:
            u = User.objects.filter(email__iexact=email).first()
            if u is None:
                u = User.objects.create_user(email=email, password=password, role=role, full_name=name)
                created = True
            else:
                # force password, active state and role back to the demo values
                u.set_password(password)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
                created = False
            if role == "patient":
                Patient.objects.get_or_create(email=email, defaults={"name": name, "phone": "555-0100"})
                forget_links([email])
            verb = "created" if created else "reset"
            self.stdout.write(self.style.SUCCESS(f"{verb}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
