"""
Load a handful of sample bar products with opening godown and counter stock.
Run: python manage.py seed_sample_data
Products whose SKU already exists are left alone.
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import Location, Product, Stock
from inventory.services.stock_ledger import receive_stock

# (name, variant, sku, barcode, price, cost, category, unit, godown, counter, min_level)
SAMPLE_PRODUCTS = [
    ("Kingfisher Beer", "330ml", "KF-330", "1234567890001", "80.00", "60.00", "Beer", "bottle", 120, 24, 30),
    ("Kingfisher Beer", "650ml", "KF-650", "1234567890002", "150.00", "120.00", "Beer", "bottle", 96, 12, 24),
    ("Old Monk Rum", "180ml", "OM-180", "1234567890010", "190.00", "140.00", "Spirits", "bottle", 40, 6, 10),
    ("Chicken Tikka", "Full", "CT-FULL", "1234567890003", "280.00", "180.00", "Non-Veg", "plate", 0, 20, 5),
    ("Paneer Butter Masala", "Regular", "PBM-REG", "1234567890005", "220.00", "140.00", "Veg", "plate", 0, 15, 5),
    ("Naan", "Butter", "NAAN-BUTTER", "1234567890007", "40.00", "20.00", "Bread", "pcs", 0, 50, 10),
    ("Soda", "300ml", "SODA-300", "1234567890020", "25.00", "12.00", "Mixers", "bottle", 200, 30, 40),
]


class Command(BaseCommand):
    help = "Create sample products with opening stock (skips SKUs that already exist)."

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        for name, variant, sku, barcode, price, cost, category, unit, godown, counter, min_level in SAMPLE_PRODUCTS:
            if Product.objects.filter(sku=sku).exists():
                self.stdout.write(f"  {sku}: already present, skipped")
                continue
            product = Product.objects.create(
                name=name,
                variant=variant,
                sku=sku,
                barcode=barcode,
                price=Decimal(price),
                cost=Decimal(cost),
                category=category,
                unit=unit,
            )
            Stock.objects.filter(product=product).update(min_stock_level=min_level)
            if godown:
                receive_stock(product.pk, godown, Location.GODOWN, notes="Opening stock")
            if counter:
                receive_stock(product.pk, counter, Location.COUNTER, notes="Opening stock")
            created += 1
        self.stdout.write(self.style.SUCCESS(f"Created {created} sample product(s)."))
