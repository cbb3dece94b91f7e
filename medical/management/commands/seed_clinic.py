# medical/management/commands/seed_clinic.py
from django.core.management.base import BaseCommand
from django.db import transaction

from medical.models import InventoryItem, User

TEST_USERS = [
    ("STAFF001", "medical-staff", "Clinic Staff"),
    ("21CS001", "student", "Test Student"),
]

INVENTORY = [
    ("Paracetamol", 100),
    ("Cetirizine", 50),
    ("ORS", 40),
    ("Ibuprofen", 60),
]


class Command(BaseCommand):
    help = "Ensure demo users and starting inventory exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="clinic123", help="password for the demo users")
        parser.add_argument("--reset-stock", action="store_true", help="overwrite stock of existing medicines")

    @transaction.atomic
    def handle(self, *args, **opts):
        password = opts["password"]
        for roll_no, role, name in TEST_USERS:
            u, created = User.objects.get_or_create(roll_no=roll_no, defaults={"role": role, "name": name})
            u.role = role
            u.is_active = True
            u.set_password(password)
            u.save()
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {roll_no} ({role})"))

        for medicine, stock in INVENTORY:
            item, created = InventoryItem.objects.get_or_create(medicine=medicine, defaults={"stock": stock})
            if not created and opts["reset_stock"]:
                item.stock = stock
                item.save(update_fields=["stock"])
            self.stdout.write(f"{medicine}: {item.stock}")
        self.stdout.write(self.style.SUCCESS("Clinic seed data ensured."))
