from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from billing.models import SaleType
from billing.services import BillLine, record_sale
from inventory.tests.factories import make_product
from reports.models import CounterBalance, Spending
from reports.services.daily_report import compute_daily_report, daily_report_rows, opening_balance_for, \
    set_counter_balance


class OpeningBalanceTests(TestCase):
    def test_zero_without_history(self):
        self.assertEqual(opening_balance_for(date(2024, 3, 9)), Decimal("0.00"))

    def test_same_day_row_wins(self):
        CounterBalance.objects.create(balance_date=date(2024, 3, 8), closing_balance=Decimal("900"))
        CounterBalance.objects.create(balance_date=date(2024, 3, 9), opening_balance=Decimal("500"))
        self.assertEqual(opening_balance_for(date(2024, 3, 9)), Decimal("500"))

    def test_carries_latest_earlier_closing(self):
        CounterBalance.objects.create(balance_date=date(2024, 3, 1), closing_balance=Decimal("100"))
        CounterBalance.objects.create(balance_date=date(2024, 3, 6), closing_balance=Decimal("750"))
        self.assertEqual(opening_balance_for(date(2024, 3, 9)), Decimal("750"))

    def test_set_counter_balance_creates_then_updates(self):
        CounterBalance.objects.create(balance_date=date(2024, 3, 8), closing_balance=Decimal("400"))
        row = set_counter_balance(date(2024, 3, 9), closing_balance="1250")
        self.assertEqual(row.opening_balance, Decimal("400"))
        self.assertEqual(row.closing_balance, Decimal("1250.00"))
        set_counter_balance(date(2024, 3, 9), opening_balance="450", notes="recount")
        row.refresh_from_db()
        self.assertEqual((row.opening_balance, row.closing_balance, row.notes), (Decimal("450.00"), Decimal("1250.00"), "recount"))
        self.assertEqual(CounterBalance.objects.count(), 2)


class DailyReportTests(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        self.beer = make_product("Kingfisher", counter=20, price="150.00", cost="90.00", min_level=25)
        self.rum = make_product("Old Monk", counter=20, price="200.00", cost="120.00", variant="750ml")

    def test_figures(self):
        record_sale([BillLine(self.beer.pk, 3)], sale_type=SaleType.TABLE, table_number="T1")
        record_sale([BillLine(self.rum.pk, 1), BillLine(self.beer.pk, 1)], sale_type=SaleType.PARCEL)
        record_sale([BillLine(self.rum.pk, 5)], sale_type=SaleType.PARCEL,
                    sale_date=timezone.now() - timedelta(days=2))
        Spending.objects.create(description="Ice", amount=Decimal("100.00"), category="Supplies",
                                spending_date=self.today)
        CounterBalance.objects.create(balance_date=self.today - timedelta(days=1), closing_balance=Decimal("1000"))

        report = compute_daily_report(self.today)
        self.assertEqual((report.total_sales, report.table_sales, report.parcel_sales), (2, 1, 1))
        self.assertEqual(report.total_revenue, Decimal("800.00"))
        self.assertEqual(report.total_cost, Decimal("480.00"))
        self.assertEqual(report.total_profit, Decimal("320.00"))
        self.assertEqual(report.total_spendings, Decimal("100.00"))
        self.assertEqual(report.opening_balance, Decimal("1000.00"))
        self.assertEqual(report.net_income, Decimal("700.00"))
        self.assertEqual(report.total_balance, Decimal("1700.00"))
        self.assertEqual(report.profit_margin, Decimal("87.5"))
        self.assertEqual(report.total_products, 2)
        self.assertEqual(report.low_stock_count, 1)
        self.assertEqual([(i.name, i.quantity) for i in report.top_items], [("Kingfisher", 4), ("Old Monk (750ml)", 1)])

    def test_empty_day(self):
        report = compute_daily_report(self.today)
        self.assertEqual(report.total_sales, 0)
        self.assertEqual(report.total_revenue, Decimal("0.00"))
        self.assertEqual(report.profit_margin, Decimal("0.0"))
        self.assertEqual(report.top_items, [])

    def test_csv_rows(self):
        record_sale([BillLine(self.beer.pk, 2)], sale_type=SaleType.PARCEL)
        rows = list(daily_report_rows(compute_daily_report(self.today), bar_name="The Tap Room"))
        self.assertEqual(rows[0], ["The Tap Room"])
        self.assertIn(["Revenue", Decimal("300.00")], rows)
        self.assertIn([1, "Kingfisher", 2, Decimal("300.00")], rows)


class ReportViewTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_user("owner", password="pass")
        self.client.force_login(user)

    def test_daily_report_page_and_export(self):
        resp = self.client.get(reverse("reports:daily_report"), {"report_date": "2024-03-09"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context["report"].report_date, date(2024, 3, 9))
        export = self.client.get(reverse("reports:daily_report_export"), {"report_date": "2024-03-09"})
        self.assertIn("daily-report-2024-03-09.csv", export["Content-Disposition"])

    def test_add_spending(self):
        resp = self.client.post(reverse("reports:spendings"), {
            "description": "Lemons", "amount": "45.00", "category": "Supplies",
            "spending_date": timezone.localdate().isoformat(), "payment_method": "cash", "notes": "",
        })
        self.assertRedirects(resp, reverse("reports:spendings"))
        self.assertEqual(Spending.objects.get().amount, Decimal("45.00"))

    def test_counter_balance_form_updates_existing_day(self):
        CounterBalance.objects.create(balance_date=date(2024, 3, 9), opening_balance=Decimal("10"))
        self.client.post(reverse("reports:counter_balance"), {
            "balance_date": "2024-03-09", "opening_balance": "20.00", "closing_balance": "500.00", "notes": "",
        })
        row = CounterBalance.objects.get()
        self.assertEqual((row.opening_balance, row.closing_balance), (Decimal("20.00"), Decimal("500.00")))
