from django.core.management.base import BaseCommand
from django.db import transaction

from dental.models import TreatmentPricing

# (name, category, cash price, duration minutes, SMART item code)
DEFAULT_TREATMENTS = [
    ("Consultation", "General", 30000, 30, "DENT001"),
    ("Scaling and Polishing", "Preventive", 60000, 45, "DENT010"),
    ("Fluoride Application", "Preventive", 40000, 20, "DENT011"),
    ("Composite Filling", "Restorative", 80000, 45, "DENT020"),
    ("Amalgam Filling", "Restorative", 60000, 45, "DENT021"),
    ("Simple Extraction", "Surgery", 50000, 30, "DENT030"),
    ("Surgical Extraction", "Surgery", 150000, 60, "DENT031"),
    ("Root Canal Treatment", "Endodontics", 350000, 90, "DENT040"),
    ("Crown (PFM)", "Prosthodontics", 450000, 60, "DENT050"),
    ("Periapical X-ray", "Radiology", 20000, 15, "DENT060"),
    ("Panoramic X-ray", "Radiology", 50000, 15, "DENT061"),
    ("Teeth Whitening", "Cosmetic", 300000, 60, ""),
]

# Insurer price as a share of the cash price
PROVIDER_RATES = {
    "GA": 100,
    "JUBILEE": 90,
}


class Command(BaseCommand):
    help = "Seed default cash, GA and Jubilee treatment prices (existing rows are updated)."

    @transaction.atomic
    def handle(self, *args, **options):
        created = updated = 0
        for name, category, price, duration, code in DEFAULT_TREATMENTS:
            rows = [("", price)]
            for provider, pct in PROVIDER_RATES.items():
                if category == "Cosmetic":
                    continue
                rows.append((provider, price * pct // 100))
            for provider, amount in rows:
                _, was_created = TreatmentPricing.objects.update_or_create(
                    name=name,
                    insurance_provider=provider,
                    defaults={
                        "category": category,
                        "base_price": amount,
                        "duration": duration,
                        "smart_item_code": code if provider == "GA" else "",
                        "is_active": True,
                    },
                )
                if was_created:
                    created += 1
                else:
                    updated += 1
        self.stdout.write(self.style.SUCCESS(f"Treatment prices seeded: {created} created, {updated} updated"))
