from django.test import TestCase

from inventory.exceptions import InsufficientStockError, InvalidLocationError, InvalidQuantityError, NotFoundError
from inventory.models import Location, Stock, StockMovement
from inventory.services import stock_ledger

from .factories import make_product


class StockRowTests(TestCase):
    def test_new_product_gets_empty_stock_row(self):
        product = make_product("Old Monk")
        stock = Stock.objects.get(product=product)
        self.assertEqual((stock.godown_stock, stock.counter_stock), (0, 0))

    def test_get_stock_unknown_product(self):
        with self.assertRaises(NotFoundError):
            stock_ledger.get_stock(999999)


class TransferStockTests(TestCase):
    def setUp(self):
        self.product = make_product("Kingfisher", godown=50, counter=10)

    def test_godown_to_counter_conserves_total(self):
        level = stock_ledger.transfer_stock(self.product.pk, 12, Location.GODOWN, Location.COUNTER)
        self.assertEqual((level.godown, level.counter), (38, 22))
        self.assertEqual(level.total, 60)

    def test_counter_to_godown(self):
        level = stock_ledger.transfer_stock(self.product.pk, 10, Location.COUNTER, Location.GODOWN)
        self.assertEqual((level.godown, level.counter), (60, 0))

    def test_writes_transfer_movement(self):
        stock_ledger.transfer_stock(self.product.pk, 5, Location.GODOWN, Location.COUNTER, notes="top up")
        movement = StockMovement.objects.get(product=self.product)
        self.assertEqual(movement.movement_type, StockMovement.TRANSFER)
        self.assertEqual(movement.quantity, 5)
        self.assertEqual(movement.from_location, Location.GODOWN)
        self.assertEqual(movement.to_location, Location.COUNTER)
        self.assertEqual(movement.notes, "top up")

    def test_insufficient_stock_leaves_levels_unchanged(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            stock_ledger.transfer_stock(self.product.pk, 51, Location.GODOWN, Location.COUNTER)
        self.assertEqual(ctx.exception.available, 50)
        self.assertEqual(ctx.exception.requested, 51)
        self.assertEqual(ctx.exception.code, "INSUFFICIENT_STOCK")
        self.assertEqual(stock_ledger.get_stock(self.product.pk), (50, 10))
        self.assertFalse(StockMovement.objects.exists())

    def test_same_location_rejected(self):
        with self.assertRaises(InvalidLocationError):
            stock_ledger.transfer_stock(self.product.pk, 1, Location.GODOWN, Location.GODOWN)

    def test_unknown_location_rejected(self):
        with self.assertRaises(InvalidLocationError):
            stock_ledger.transfer_stock(self.product.pk, 1, "cellar", Location.COUNTER)

    def test_bad_quantities_rejected(self):
        for qty in (0, -3, 1.5, "2", True):
            with self.subTest(qty=qty):
                with self.assertRaises(InvalidQuantityError):
                    stock_ledger.transfer_stock(self.product.pk, qty, Location.GODOWN, Location.COUNTER)
        self.assertEqual(stock_ledger.get_stock(self.product.pk), (50, 10))

    def test_unknown_product(self):
        with self.assertRaises(NotFoundError):
            stock_ledger.transfer_stock(999999, 1, Location.GODOWN, Location.COUNTER)


class UpdateStockTests(TestCase):
    def test_overwrites_both_and_logs_adjustments(self):
        product = make_product("Bacardi", godown=10, counter=4)
        level = stock_ledger.update_stock(product.pk, 7, 9)
        self.assertEqual(level, (7, 9))
        self.assertEqual(stock_ledger.get_stock(product.pk), (7, 9))
        moves = {m.from_location or m.to_location: m for m in StockMovement.objects.filter(product=product)}
        self.assertEqual(moves[Location.GODOWN].quantity, 3)
        self.assertEqual(moves[Location.GODOWN].from_location, Location.GODOWN)
        self.assertEqual(moves[Location.COUNTER].quantity, 5)
        self.assertEqual(moves[Location.COUNTER].to_location, Location.COUNTER)

    def test_unchanged_values_write_no_movement(self):
        product = make_product("Bacardi", godown=10, counter=4)
        stock_ledger.update_stock(product.pk, 10, 4)
        self.assertFalse(StockMovement.objects.exists())

    def test_negative_rejected(self):
        product = make_product("Bacardi", godown=10, counter=4)
        with self.assertRaises(InvalidQuantityError):
            stock_ledger.update_stock(product.pk, -1, 4)
        self.assertEqual(stock_ledger.get_stock(product.pk), (10, 4))


class ReceiveRemoveTests(TestCase):
    def setUp(self):
        self.product = make_product("Smirnoff", godown=0, counter=3)

    def test_receive_into_godown(self):
        level = stock_ledger.receive_stock(self.product.pk, 24)
        self.assertEqual(level, (24, 3))
        self.assertEqual(StockMovement.objects.get().movement_type, StockMovement.IN)

    def test_remove_from_counter_with_reference(self):
        level = stock_ledger.remove_stock(self.product.pk, 2, reference_id=77)
        self.assertEqual(level, (0, 1))
        movement = StockMovement.objects.get()
        self.assertEqual(movement.movement_type, StockMovement.OUT)
        self.assertEqual(movement.reference_id, 77)

    def test_remove_never_goes_negative(self):
        with self.assertRaises(InsufficientStockError):
            stock_ledger.remove_stock(self.product.pk, 4)
        self.assertEqual(stock_ledger.get_stock(self.product.pk), (0, 3))


class StockMovementsTests(TestCase):
    def test_newest_first_and_limited(self):
        product = make_product("Kingfisher", godown=10)
        for _ in range(5):
            stock_ledger.transfer_stock(product.pk, 1, Location.GODOWN, Location.COUNTER)
        movements = stock_ledger.stock_movements(limit=3)
        self.assertEqual(len(movements), 3)
        ids = [m.pk for m in movements]
        self.assertEqual(ids, sorted(ids, reverse=True))

    def test_filter_by_product(self):
        a = make_product("A", godown=5)
        b = make_product("B", godown=5)
        stock_ledger.transfer_stock(a.pk, 1, Location.GODOWN, Location.COUNTER)
        stock_ledger.transfer_stock(b.pk, 1, Location.GODOWN, Location.COUNTER)
        movements = stock_ledger.stock_movements(product_id=b.pk)
        self.assertEqual([m.product_id for m in movements], [b.pk])
