from decimal import Decimal

from django.test import TestCase

from inventory.models import Location, StockStatus
from inventory.services import queries
from inventory.services.valuation import inventory_value, inventory_value_per_location

from .factories import make_product


class StockStatusTests(TestCase):
    def test_thresholds(self):
        self.assertEqual(queries.stock_status(2, 3, 5, 100), StockStatus.LOW)
        self.assertEqual(queries.stock_status(2, 4, 5, 100), StockStatus.NORMAL)
        self.assertEqual(queries.stock_status(60, 40, 5, 100), StockStatus.OVERSTOCK)

    def test_low_wins_when_thresholds_overlap(self):
        self.assertEqual(queries.stock_status(5, 0, 5, 5), StockStatus.LOW)

    def test_stock_row_status(self):
        product = make_product("Kingfisher", godown=1, counter=0, min_level=2)
        self.assertEqual(product.stock.status, StockStatus.LOW)


class SearchTests(TestCase):
    def setUp(self):
        self.kf = make_product("Kingfisher Premium", sku="KF-650", barcode="8901234")
        self.om = make_product("Old Monk", sku="OM-750")

    def test_blank_query_returns_everything_by_name(self):
        names = [p.name for p in queries.search_products("  ")]
        self.assertEqual(names, ["Kingfisher Premium", "Old Monk"])

    def test_case_insensitive_name_and_sku(self):
        self.assertEqual(list(queries.search_products("premium")), [self.kf])
        self.assertEqual(list(queries.search_products("om-7")), [self.om])

    def test_barcode_only_when_asked(self):
        self.assertEqual(list(queries.search_products("8901")), [])
        self.assertEqual(list(queries.search_products("8901", include_barcode=True)), [self.kf])


class AvailabilityTests(TestCase):
    def setUp(self):
        self.in_godown = make_product("A", godown=5, counter=0, min_level=1)
        self.on_counter = make_product("B", godown=0, counter=5, min_level=1)
        self.empty = make_product("C", godown=0, counter=0, min_level=1)

    def test_transferable(self):
        self.assertEqual(list(queries.transferable_products()), [self.in_godown])

    def test_sellable(self):
        self.assertEqual(list(queries.sellable_products()), [self.on_counter])

    def test_low_stock(self):
        self.assertEqual(list(queries.low_stock_products()), [self.empty])

    def test_total_stock_annotation(self):
        totals = {p.pk: p.total_stock for p in queries.with_stock()}
        self.assertEqual(totals[self.in_godown.pk], 5)


class ValuationTests(TestCase):
    def test_value_at_cost_per_location(self):
        make_product("A", godown=10, counter=2, cost="50.00")
        make_product("B", godown=0, counter=4, cost="12.50")
        self.assertEqual(inventory_value(Location.GODOWN), Decimal("500.00"))
        self.assertEqual(inventory_value(Location.COUNTER), Decimal("150.00"))
        self.assertEqual(inventory_value(), Decimal("650.00"))
        rows, total = inventory_value_per_location()
        self.assertEqual(dict(rows), {"Godown": Decimal("500.00"), "Counter": Decimal("150.00")})
        self.assertEqual(total, Decimal("650.00"))

    def test_empty_inventory_is_zero(self):
        self.assertEqual(inventory_value(), Decimal("0.00"))
