"""
Management command to seed wards, beds and the medicine catalogue.
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import Bed, Medicine

WARDS = [
    # ward, rooms, beds per room, daily rate
    ("General", ["101", "102", "103"], 4, Decimal("500")),
    ("Semi-Private", ["201", "202"], 2, Decimal("1200")),
    ("Private", ["301", "302"], 1, Decimal("2500")),
    ("ICU", ["ICU-1"], 6, Decimal("5000")),
    ("Emergency", ["ER"], 4, Decimal("1500")),
    ("Maternity", ["401"], 3, Decimal("1800")),
    ("Pediatric", ["501"], 3, Decimal("900")),
]

MEDICINES = [
    # name, category, stock, price, days to expiry, supplier
    ("Paracetamol 500mg", "Analgesic", 500, Decimal("2.50"), 540, "Cipla"),
    ("Amoxicillin 250mg", "Antibiotic", 200, Decimal("8.00"), 365, "Sun Pharma"),
    ("Cetirizine 10mg", "Antihistamine", 150, Decimal("3.00"), 400, "Dr. Reddy's"),
    ("Omeprazole 20mg", "Antacid", 8, Decimal("5.50"), 200, "Lupin"),
    ("Metformin 500mg", "Antidiabetic", 0, Decimal("4.00"), 300, "Zydus"),
    ("Insulin Glargine", "Antidiabetic", 25, Decimal("650.00"), 20, "Sanofi"),
    ("Azithromycin 500mg", "Antibiotic", 60, Decimal("22.00"), -10, "Cipla"),
    ("ORS Sachet", "Electrolyte", 300, Decimal("15.00"), 720, "FDC"),
]


class Command(BaseCommand):
    help = "Seed beds for every ward and a starter medicine catalogue (idempotent)."

    @transaction.atomic
    def handle(self, *args, **options):
        beds = 0
        for ward, rooms, per_room, rate in WARDS:
            for room in rooms:
                for n in range(1, per_room + 1):
                    _, created = Bed.objects.get_or_create(
                        room_number=room, bed_number=str(n), defaults={"ward": ward, "daily_rate": rate}
                    )
                    beds += int(created)

        today = timezone.localdate()
        medicines = 0
        for name, category, stock, price, days, supplier in MEDICINES:
            _, created = Medicine.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "stock": stock,
                    "price": price,
                    "expiry_date": today + timedelta(days=days),
                    "supplier": supplier,
                },
            )
            medicines += int(created)

        self.stdout.write(self.style.SUCCESS(f"Seeded {beds} beds and {medicines} medicines."))
