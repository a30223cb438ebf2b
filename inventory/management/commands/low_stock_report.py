"""
Print products at or below their minimum stock, plus the value of stock on hand.
Run: python manage.py low_stock_report [--all]
"""
from django.core.management.base import BaseCommand

from common.money import format_money
from inventory.services.queries import low_stock_products, with_stock
from inventory.services.valuation import inventory_value_per_location


class Command(BaseCommand):
    help = "List low-stock products and inventory value at cost per location."

    def add_arguments(self, parser):
        parser.add_argument(
            "--all",
            action="store_true",
            help="List every product with its status, not only the low ones.",
        )

    def handle(self, *args, **options):
        products = with_stock() if options["all"] else low_stock_products()
        rows = list(products)
        if not rows:
            self.stdout.write(self.style.SUCCESS("No products at or below minimum stock."))
        else:
            self.stdout.write("  Product (godown, counter, total / min) status:")
            for p in rows:
                line = (
                    f"    {p}: {p.stock.godown_stock}, {p.stock.counter_stock}, "
                    f"{p.stock.total_stock} / {p.stock.min_stock_level} {p.stock.status}"
                )
                if p.stock.status == "low":
                    self.stdout.write(self.style.WARNING(line))
                else:
                    self.stdout.write(line)

        value_rows, total = inventory_value_per_location()
        for label, value in value_rows:
            self.stdout.write(f"  {label} value: {format_money(value)}")
        self.stdout.write(f"  Total value: {format_money(total)}")
