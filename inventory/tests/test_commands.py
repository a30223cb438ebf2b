from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from inventory.management.commands.seed_sample_data import SAMPLE_PRODUCTS
from inventory.models import Product, StockMovement
from inventory.services.stock_ledger import get_stock

from .factories import make_product


class SeedSampleDataTests(TestCase):
    def test_seeds_once(self):
        call_command("seed_sample_data", stdout=StringIO())
        self.assertEqual(Product.objects.count(), len(SAMPLE_PRODUCTS))
        self.assertEqual(get_stock(Product.objects.get(sku="KF-650").pk), (96, 12))
        self.assertTrue(StockMovement.objects.filter(movement_type=StockMovement.IN).exists())

        out = StringIO()
        call_command("seed_sample_data", stdout=out)
        self.assertEqual(Product.objects.count(), len(SAMPLE_PRODUCTS))
        self.assertIn("Created 0 sample product(s).", out.getvalue())


class LowStockReportTests(TestCase):
    def test_lists_only_low_products(self):
        make_product("Kingfisher", godown=1, counter=0, min_level=5, cost="10.00")
        make_product("Old Monk", godown=50, counter=0, min_level=5, cost="10.00")
        out = StringIO()
        call_command("low_stock_report", stdout=out)
        text = out.getvalue()
        self.assertIn("Kingfisher", text)
        self.assertNotIn("Old Monk", text)
        self.assertIn("Total value: ₹510.00", text)

    def test_all_flag(self):
        make_product("Old Monk", godown=50, counter=0, min_level=5)
        out = StringIO()
        call_command("low_stock_report", "--all", stdout=out)
        self.assertIn("Old Monk", out.getvalue())
