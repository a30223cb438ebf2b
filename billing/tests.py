from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from billing.forms import SaleRowForm
from billing.models import PaymentMethod, PendingBill, Sale, SaleType, Table, TableStatus
from billing.services import (
    BillLine,
    compute_totals,
    delete_pending_bill,
    delete_table,
    generate_bill_number,
    record_sale,
    save_pending_bill,
    settle_pending_bill,
    table_overview,
)
from inventory.exceptions import InsufficientStockError
from inventory.models import StockMovement
from inventory.services.stock_ledger import get_stock
from inventory.tests.factories import make_product


class TotalsTests(TestCase):
    def test_tax_and_discount_are_percentages_of_subtotal(self):
        totals = compute_totals([(2, "120.00"), (1, "60.50")], tax_percent=5, discount_percent=10)
        self.assertEqual(totals.subtotal, Decimal("300.50"))
        self.assertEqual(totals.tax_amount, Decimal("15.03"))
        self.assertEqual(totals.discount_amount, Decimal("30.05"))
        self.assertEqual(totals.total_amount, Decimal("285.48"))

    def test_empty_bill(self):
        self.assertEqual(compute_totals([]).total_amount, Decimal("0.00"))

    def test_bill_number_shape(self):
        number = generate_bill_number()
        self.assertEqual(len(number), 9)
        self.assertTrue(number.isdigit())

    def test_bill_number_fallback_skips_taken_numbers(self):
        now = timezone.now()
        base = timezone.localtime(now).strftime("%d%m%y")
        Sale.objects.create(sale_number=f"{base}500", total_amount=Decimal("1.00"))
        PendingBill.objects.create(bill_number=f"{base}00003", subtotal=Decimal("1.00"), total_amount=Decimal("1.00"))
        for old in ("01019900777", "01019900778"):
            PendingBill.objects.create(bill_number=old, subtotal=Decimal("1.00"), total_amount=Decimal("1.00"))
        with mock.patch("billing.services.random.randint", return_value=500):
            number = generate_bill_number(now)
        self.assertEqual(number, f"{base}00004")


class RecordSaleTests(TestCase):
    def setUp(self):
        self.beer = make_product("Kingfisher", godown=10, counter=6, price="150.00", cost="90.00")
        self.rum = make_product("Old Monk", godown=0, counter=2, price="200.00", cost="120.00")

    def test_sale_takes_stock_off_counter(self):
        sale = record_sale(
            [BillLine(self.beer.pk, 2), BillLine(self.rum.pk, 1, unit_price=Decimal("180.00"))],
            sale_type=SaleType.TABLE,
            table_number="T4",
        )
        self.assertEqual(sale.subtotal, Decimal("480.00"))
        self.assertEqual(sale.total_amount, Decimal("480.00"))
        self.assertEqual(sale.customer_name, "Walk-in Customer")
        self.assertEqual(sale.items.count(), 2)
        self.assertEqual(sale.total_cost, Decimal("300.00"))
        self.assertEqual(get_stock(self.beer.pk), (10, 4))
        self.assertEqual(get_stock(self.rum.pk), (0, 1))
        outs = StockMovement.objects.filter(movement_type=StockMovement.OUT)
        self.assertEqual({m.reference_id for m in outs}, {sale.pk})

    def test_short_line_rolls_back_whole_sale(self):
        with self.assertRaises(InsufficientStockError):
            record_sale([BillLine(self.beer.pk, 2), BillLine(self.rum.pk, 3)], sale_type=SaleType.PARCEL)
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(get_stock(self.beer.pk), (10, 6))

    def test_table_sale_needs_table_number(self):
        with self.assertRaises(ValidationError):
            record_sale([BillLine(self.beer.pk, 1)], sale_type=SaleType.TABLE, table_number=" ")

    def test_empty_bill_rejected(self):
        with self.assertRaises(ValidationError):
            record_sale([], sale_type=SaleType.PARCEL)

    def test_parcel_drops_table_number(self):
        sale = record_sale([BillLine(self.beer.pk, 1)], sale_type=SaleType.PARCEL, table_number="T9")
        self.assertEqual(sale.table_number, "")


class PendingBillTests(TestCase):
    def setUp(self):
        self.beer = make_product("Kingfisher", godown=0, counter=5, price="150.00")

    def test_save_does_not_touch_stock(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 3)], table_number="T2", tax_percent=5)
        self.assertEqual(bill.items[0]["quantity"], 3)
        self.assertEqual(bill.total_amount, Decimal("472.50"))
        self.assertEqual(get_stock(self.beer.pk), (0, 5))

    def test_update_in_place(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 1)], table_number="T2")
        save_pending_bill([BillLine(self.beer.pk, 2)], bill=bill, table_number="T3")
        bill.refresh_from_db()
        self.assertEqual(PendingBill.objects.count(), 1)
        self.assertEqual((bill.table_number, bill.items[0]["quantity"]), ("T3", 2))

    def test_settle_turns_bill_into_sale(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 2)], table_number="T2")
        sale = settle_pending_bill(bill.pk, payment_method=PaymentMethod.UPI)
        self.assertEqual(sale.payment_method, PaymentMethod.UPI)
        self.assertEqual(sale.total_amount, Decimal("300.00"))
        self.assertFalse(PendingBill.objects.exists())
        self.assertEqual(get_stock(self.beer.pk), (0, 3))

    def test_settle_failure_keeps_bill(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 6)], table_number="T2")
        with self.assertRaises(InsufficientStockError):
            settle_pending_bill(bill.pk)
        self.assertTrue(PendingBill.objects.filter(pk=bill.pk).exists())
        self.assertFalse(Sale.objects.exists())

    def test_delete(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 1)], table_number="T2")
        self.assertTrue(delete_pending_bill(bill.pk))
        self.assertFalse(delete_pending_bill(bill.pk))


class BillingViewTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_user("cashier", password="pass")
        self.client.force_login(user)
        self.beer = make_product("Kingfisher", godown=0, counter=5, price="150.00")

    def _bill(self, action, **overrides):
        data = {
            "sale_type": "table", "table_number": "T1", "customer_name": "", "customer_phone": "",
            "payment_method": "cash", "tax_percent": "0", "discount_percent": "0", "notes": "",
            "rows-TOTAL_FORMS": "1", "rows-INITIAL_FORMS": "0", "rows-MIN_NUM_FORMS": "1", "rows-MAX_NUM_FORMS": "1000",
            "rows-0-product": str(self.beer.pk), "rows-0-quantity": "2", "rows-0-unit_price": "",
            "action": action,
        }
        data.update(overrides)
        return self.client.post(reverse("billing:sale_create"), data)

    def test_complete_sale(self):
        resp = self._bill("complete")
        sale = Sale.objects.get()
        self.assertRedirects(resp, reverse("billing:sale_detail", args=[sale.pk]))
        self.assertEqual(get_stock(self.beer.pk), (0, 3))
        detail = self.client.get(reverse("billing:sale_detail", args=[sale.pk]))
        self.assertContains(detail, sale.sale_number)

    def test_save_pending_then_settle(self):
        resp = self._bill("pending")
        self.assertRedirects(resp, reverse("billing:pending_bills"))
        bill = PendingBill.objects.get()
        self.assertEqual(get_stock(self.beer.pk), (0, 5))
        self.client.post(reverse("billing:pending_bill_settle", args=[bill.pk]))
        self.assertFalse(PendingBill.objects.exists())
        self.assertEqual(Sale.objects.count(), 1)

    def test_oversell_shows_error(self):
        resp = self._bill("complete", **{"rows-0-quantity": "9"})
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Could not complete sale")
        self.assertFalse(Sale.objects.exists())

    def test_sales_list_defaults_to_today(self):
        self._bill("complete")
        resp = self.client.get(reverse("billing:sales_list"))
        self.assertEqual(len(resp.context["sales"]), 1)
        self.assertEqual(resp.context["total"], Decimal("300.00"))

    def test_complete_sale_shows_currency(self):
        self._bill("complete")
        sale = Sale.objects.get()
        detail = self.client.get(reverse("billing:sale_detail", args=[sale.pk]))
        self.assertContains(detail, "Total: ₹300.00")

    def test_only_counter_stock_is_billable(self):
        make_product("Old Monk", godown=10, counter=0)
        self.assertEqual(list(SaleRowForm().fields["product"].queryset), [self.beer])


class TableTests(TestCase):
    def setUp(self):
        self.beer = make_product("Kingfisher", godown=0, counter=5, price="150.00")
        self.t1 = Table.objects.create(name="T1", capacity=4)
        self.t2 = Table.objects.create(name="T2", capacity=2)

    def status(self, table):
        table.refresh_from_db()
        return table.status

    def test_pending_bill_occupies_table_until_settled(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 2)], table=self.t1)
        self.assertEqual(bill.table_number, "T1")
        self.assertEqual(self.status(self.t1), TableStatus.OCCUPIED)
        overview = {t.name: t for t in table_overview()}
        self.assertEqual((overview["T1"].open_bills, overview["T1"].open_total), (1, Decimal("300.00")))

        sale = settle_pending_bill(bill.pk)
        self.assertEqual((sale.table, sale.table_number), (self.t1, "T1"))
        self.assertEqual(self.status(self.t1), TableStatus.AVAILABLE)

    def test_moving_bill_frees_old_table(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 1)], table=self.t1)
        save_pending_bill([BillLine(self.beer.pk, 1)], bill=bill, table=self.t2)
        self.assertEqual(self.status(self.t1), TableStatus.AVAILABLE)
        self.assertEqual(self.status(self.t2), TableStatus.OCCUPIED)

    def test_deleting_bill_frees_table(self):
        bill = save_pending_bill([BillLine(self.beer.pk, 1)], table=self.t1)
        delete_pending_bill(bill.pk)
        self.assertEqual(self.status(self.t1), TableStatus.AVAILABLE)

    def test_reserved_table_stays_reserved_without_bills(self):
        self.t1.status = TableStatus.RESERVED
        self.t1.save()
        bill = save_pending_bill([BillLine(self.beer.pk, 1)], table=self.t1)
        self.assertEqual(self.status(self.t1), TableStatus.OCCUPIED)
        delete_pending_bill(bill.pk)
        self.assertEqual(self.status(self.t1), TableStatus.AVAILABLE)
        self.t2.status = TableStatus.RESERVED
        self.t2.save()
        record_sale([BillLine(self.beer.pk, 1)], table=self.t2)
        self.assertEqual(self.status(self.t2), TableStatus.RESERVED)

    def test_parcel_ignores_table(self):
        sale = record_sale([BillLine(self.beer.pk, 1)], sale_type=SaleType.PARCEL, table=self.t1)
        self.assertIsNone(sale.table)
        self.assertEqual(sale.table_number, "")

    def test_table_with_open_bill_cannot_be_deleted(self):
        save_pending_bill([BillLine(self.beer.pk, 1)], table=self.t1)
        with self.assertRaises(ValidationError):
            delete_table(self.t1.pk)
        self.assertTrue(delete_table(self.t2.pk))
        self.assertFalse(delete_table(self.t2.pk))


class TableViewTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_user("manager", password="pass")
        self.client.force_login(user)

    def test_create_edit_delete(self):
        resp = self.client.post(reverse("billing:table_create"),
                                {"name": " Bar 1 ", "capacity": "6", "area": "bar", "status": "available"})
        self.assertRedirects(resp, reverse("billing:tables"))
        table = Table.objects.get()
        self.assertEqual((table.name, table.capacity, table.area), ("Bar 1", 6, "bar"))

        self.client.post(reverse("billing:table_edit", args=[table.pk]),
                         {"name": "Bar 1", "capacity": "8", "area": "bar", "status": "reserved"})
        table.refresh_from_db()
        self.assertEqual((table.capacity, table.status), (8, TableStatus.RESERVED))

        board = self.client.get(reverse("billing:tables"))
        self.assertContains(board, "Bar 1")

        self.client.post(reverse("billing:table_delete", args=[table.pk]))
        self.assertFalse(Table.objects.exists())

    def test_zero_capacity_rejected(self):
        resp = self.client.post(reverse("billing:table_create"),
                                {"name": "T9", "capacity": "0", "area": "restaurant", "status": "available"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn("capacity", resp.context["form"].errors)

    def test_bill_picked_from_table(self):
        beer = make_product("Kingfisher", godown=0, counter=5, price="150.00")
        table = Table.objects.create(name="T7")
        page = self.client.get(reverse("billing:sale_create"), {"table": table.pk})
        self.assertEqual(str(page.context["form"].initial["table"]), str(table.pk))
        self.client.post(reverse("billing:sale_create"), {
            "sale_type": "table", "table": str(table.pk), "table_number": "", "customer_name": "",
            "customer_phone": "", "payment_method": "cash", "tax_percent": "0", "discount_percent": "0", "notes": "",
            "rows-TOTAL_FORMS": "1", "rows-INITIAL_FORMS": "0", "rows-MIN_NUM_FORMS": "1", "rows-MAX_NUM_FORMS": "1000",
            "rows-0-product": str(beer.pk), "rows-0-quantity": "1", "rows-0-unit_price": "",
            "action": "pending",
        })
        bill = PendingBill.objects.get()
        self.assertEqual((bill.table, bill.table_number), (table, "T7"))
        table.refresh_from_db()
        self.assertEqual(table.status, TableStatus.OCCUPIED)
