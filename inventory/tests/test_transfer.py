from datetime import timedelta
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from common.dates import parse_local
from inventory.exceptions import EmptyTransferError, InsufficientStockError, NotFoundError, ZeroQuantityError
from inventory.models import DailyTransfer, Location, StockMovement
from inventory.services import stock_ledger
from inventory.services.transfer import (
    SESSION_KEY,
    TransferStaging,
    commit_transfer,
    get_history,
    load_staging,
    save_staging,
    transfer_report_rows,
)

from .factories import make_product


class StagingTests(TestCase):
    def setUp(self):
        self.product = make_product("Kingfisher", godown=3, counter=0, variant="650ml")

    def test_add_starts_at_one_and_increments(self):
        staging = TransferStaging()
        staging.add(self.product)
        staging.add(self.product)
        self.assertEqual(len(staging), 1)
        entry = staging.get(self.product.pk)
        self.assertEqual(entry.quantity, 2)
        self.assertEqual(entry.available, 3)
        self.assertEqual(entry.variant, "650ml")

    def test_add_is_capped_at_godown_stock(self):
        staging = TransferStaging()
        for _ in range(6):
            staging.add(self.product)
        self.assertEqual(staging.get(self.product.pk).quantity, 3)

    def test_add_ignores_empty_godown(self):
        empty = make_product("Tuborg", godown=0, counter=5)
        staging = TransferStaging()
        self.assertIsNone(staging.add(empty))
        self.assertTrue(staging.is_empty)

    def test_set_quantity_clamps(self):
        staging = TransferStaging()
        staging.add(self.product)
        self.assertEqual(staging.set_quantity(self.product.pk, 99).quantity, 3)
        self.assertEqual(staging.set_quantity(self.product.pk, -4).quantity, 0)
        self.assertEqual(staging.set_quantity(self.product.pk, 2).quantity, 2)

    def test_set_quantity_unstaged_product(self):
        with self.assertRaises(NotFoundError):
            TransferStaging().set_quantity(self.product.pk, 1)

    def test_remove_and_clear(self):
        other = make_product("Tuborg", godown=4)
        staging = TransferStaging()
        staging.add(self.product)
        staging.add(other)
        staging.remove(self.product.pk)
        self.assertEqual([e.product_id for e in staging], [other.pk])
        staging.clear()
        self.assertTrue(staging.is_empty)

    def test_refresh_keeps_staged_quantity(self):
        staging = TransferStaging()
        staging.add(self.product)
        staging.set_quantity(self.product.pk, 3)
        stock_ledger.update_stock(self.product.pk, 1, 0)
        self.product.stock.refresh_from_db()
        staging.refresh([self.product])
        entry = staging.get(self.product.pk)
        self.assertEqual((entry.available, entry.quantity), (1, 3))
        self.assertTrue(entry.is_short)

    def test_session_round_trip(self):
        session = {}
        staging = TransferStaging()
        staging.add(self.product)
        save_staging(session, staging)
        self.assertIn(SESSION_KEY, session)
        loaded = load_staging(session)
        self.assertEqual(loaded.get(self.product.pk).quantity, 1)
        self.assertTrue(load_staging({}).is_empty)


class CommitTransferTests(TestCase):
    def _staged(self, *pairs):
        staging = TransferStaging()
        for product, qty in pairs:
            staging.add(product)
            staging.set_quantity(product.pk, qty)
        return staging

    def test_single_product_commit(self):
        a = make_product("Kingfisher", godown=50, counter=10)
        staging = self._staged((a, 12))
        record = commit_transfer(staging)
        self.assertEqual(stock_ledger.get_stock(a.pk), (38, 22))
        self.assertEqual(DailyTransfer.objects.count(), 1)
        self.assertEqual(record.total_items, 1)
        self.assertEqual(record.total_quantity, 12)
        self.assertEqual(record.transfer_date, timezone.localdate())
        self.assertTrue(staging.is_empty)

    def test_two_products_one_record(self):
        a = make_product("Kingfisher", godown=20)
        b = make_product("Old Monk", godown=20)
        record = commit_transfer(self._staged((a, 5), (b, 3)))
        self.assertEqual((record.total_items, record.total_quantity), (2, 8))
        self.assertEqual([i["name"] for i in record.items_transferred], ["Kingfisher", "Old Monk"])
        for item in record.items_transferred:
            self.assertIsNotNone(parse_local(item["transfer_time"]))
        self.assertEqual(StockMovement.objects.filter(movement_type=StockMovement.TRANSFER).count(), 2)

    def test_empty_staging_raises_and_records_nothing(self):
        with self.assertRaises(EmptyTransferError):
            commit_transfer(TransferStaging())
        self.assertFalse(DailyTransfer.objects.exists())

    def test_zero_quantity_blocks_commit_before_any_change(self):
        a = make_product("Kingfisher", godown=20)
        b = make_product("Old Monk", godown=20)
        staging = self._staged((a, 4), (b, 0))
        with self.assertRaises(ZeroQuantityError) as ctx:
            commit_transfer(staging)
        self.assertEqual(ctx.exception.product_ids, [b.pk])
        self.assertEqual(stock_ledger.get_stock(a.pk), (20, 0))
        self.assertFalse(DailyTransfer.objects.exists())
        self.assertEqual(len(staging), 2)

    def test_stale_entry_rolls_back_whole_batch(self):
        a = make_product("Kingfisher", godown=20)
        b = make_product("Old Monk", godown=20)
        staging = self._staged((a, 5), (b, 10))
        # Someone else drains B after it was staged
        stock_ledger.update_stock(b.pk, 2, 0)
        with self.assertRaises(InsufficientStockError):
            commit_transfer(staging)
        self.assertEqual(stock_ledger.get_stock(a.pk), (20, 0))
        self.assertEqual(stock_ledger.get_stock(b.pk), (2, 0))
        self.assertFalse(DailyTransfer.objects.exists())
        self.assertEqual(len(staging), 2)

    def test_failure_mid_batch_rolls_back(self):
        a = make_product("Kingfisher", godown=20)
        b = make_product("Old Monk", godown=20)
        staging = self._staged((a, 5), (b, 3))
        real = stock_ledger.transfer_stock
        calls = []

        def flaky(product_id, *args, **kwargs):
            calls.append(product_id)
            if product_id == b.pk:
                raise InsufficientStockError(b.pk, Location.GODOWN, 0, 3)
            return real(product_id, *args, **kwargs)

        with mock.patch("inventory.services.transfer.transfer_stock", side_effect=flaky):
            with self.assertRaises(InsufficientStockError):
                commit_transfer(staging)
        self.assertEqual(calls, [a.pk, b.pk])
        self.assertEqual(stock_ledger.get_stock(a.pk), (20, 0))
        self.assertFalse(StockMovement.objects.exists())
        self.assertFalse(DailyTransfer.objects.exists())


class HistoryTests(TestCase):
    def _record(self, days_ago, qty=1):
        return DailyTransfer.objects.create(
            transfer_date=timezone.localdate() - timedelta(days=days_ago),
            total_items=1,
            total_quantity=qty,
            items_transferred=[{"id": 1, "name": "Kingfisher", "variant": "", "quantity": qty,
                                "transfer_time": "2024-01-01 10:00:00"}],
        )

    def test_default_window_is_last_thirty_days(self):
        recent = self._record(1)
        edge = self._record(30)
        self._record(31)
        self.assertEqual({r.pk for r in get_history()}, {recent.pk, edge.pk})

    def test_explicit_range_newest_first(self):
        first = self._record(5)
        second = self._record(3)
        today = timezone.localdate()
        records = get_history(today - timedelta(days=6), today)
        self.assertEqual([r.pk for r in records], [second.pk, first.pk])

    def test_records_cannot_be_edited(self):
        record = self._record(0)
        record.total_quantity = 99
        with self.assertRaises(ValidationError):
            record.save()

    def test_report_rows(self):
        record = self._record(0, qty=4)
        rows = list(transfer_report_rows(record, bar_name="The Tap Room"))
        self.assertEqual(rows[0], ["The Tap Room"])
        self.assertIn(["Total quantity", 4], rows)
        self.assertEqual(rows[-1], [1, "Kingfisher", "", 4, "2024-01-01 10:00:00"])
