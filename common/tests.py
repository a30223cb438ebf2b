from datetime import date, datetime
from decimal import Decimal

from django.template import Context, Template
from django.test import SimpleTestCase, override_settings

from common import dates
from common.csvutils import csv_cell, stream_csv
from common.money import format_money, to_money


class DateStringTests(SimpleTestCase):
    def test_format_and_parse_round_trip(self):
        value = datetime(2024, 3, 9, 21, 5, 7)
        text = dates.format_datetime(value)
        self.assertEqual(text, "2024-03-09 21:05:07")
        self.assertEqual(dates.parse_local(text), value)

    def test_parse_date_only_and_missing_seconds(self):
        self.assertEqual(dates.parse_local("2024-03-09"), datetime(2024, 3, 9))
        self.assertEqual(dates.parse_local("2024-03-09 21:05"), datetime(2024, 3, 9, 21, 5))
        self.assertEqual(dates.parse_date("2024-03-09 21:05:07"), date(2024, 3, 9))

    def test_unparsable_values(self):
        for value in (None, "", "yesterday", "2024-13-01", 20240309):
            with self.subTest(value=value):
                self.assertIsNone(dates.parse_local(value))
        self.assertEqual(dates.format_for_display("garbage"), "-")

    def test_display_format(self):
        self.assertEqual(dates.format_for_display("2024-03-09 21:05:07"), "09/03/2024")
        self.assertEqual(dates.format_for_display(date(2024, 3, 9)), "09/03/2024")

    def test_rejects_trailing_or_partial_fields(self):
        for value in ("2024-03-09 21:05:07:99", "2024-03-09 21", "2024-03-09T21:05:07"):
            with self.subTest(value=value):
                self.assertIsNone(dates.parse_local(value))

    def test_format_date_round_trips_any_time_of_day(self):
        for moment in (datetime(2024, 3, 9, 0, 0, 0), datetime(2024, 3, 9, 12, 30), datetime(2024, 3, 9, 23, 59, 59)):
            with self.subTest(moment=moment):
                text = dates.format_date(moment)
                self.assertEqual(text, "2024-03-09")
                self.assertEqual(dates.parse_date(text), date(2024, 3, 9))
        self.assertEqual(dates.parse_date(dates.format_date(date(2024, 2, 29))), date(2024, 2, 29))

    @override_settings(TIME_ZONE="Asia/Kolkata", USE_TZ=True)
    def test_day_bounds_cover_local_day(self):
        start, end = dates.day_bounds(date(2024, 3, 9))
        self.assertEqual(dates.format_datetime(start), "2024-03-09 00:00:00")
        self.assertEqual(dates.format_datetime(end), "2024-03-10 00:00:00")


class MoneyTests(SimpleTestCase):
    def test_to_money(self):
        self.assertEqual(to_money("12.346"), Decimal("12.35"))
        self.assertEqual(to_money(None), Decimal("0.00"))
        with self.assertRaises(ValueError):
            to_money("twelve")

    @override_settings(CURRENCY_SYMBOL="₹")
    def test_format_money(self):
        self.assertEqual(format_money("12.5"), "₹12.50")
        self.assertEqual(format_money(Decimal("-3")), "-₹3.00")


@override_settings(CURRENCY_SYMBOL="₹")
class FormattingFilterTests(SimpleTestCase):
    def render(self, text, **context):
        return Template("{% load formatting %}" + text).render(Context(context))

    def test_money_filter(self):
        self.assertEqual(self.render("{{ v|money }}", v=Decimal("1234.5")), "₹1234.50")
        self.assertEqual(self.render("{{ v|money }}", v=None), "₹0.00")
        self.assertEqual(self.render("{{ v|money }}", v="n/a"), "n/a")

    def test_display_date_filter(self):
        self.assertEqual(self.render("{{ v|display_date }}", v="2024-03-09 21:05:07"), "09/03/2024")
        self.assertEqual(self.render("{{ v|display_date }}", v=date(2024, 3, 9)), "09/03/2024")
        self.assertEqual(self.render("{{ v|display_date }}", v=""), "-")


class CsvTests(SimpleTestCase):
    def test_cells(self):
        self.assertEqual(csv_cell(Decimal("12.5")), "12.50")
        self.assertEqual(csv_cell(date(2024, 3, 9)), "2024-03-09")
        self.assertEqual(csv_cell(datetime(2024, 3, 9, 21, 5, 7)), "2024-03-09 21:05:07")
        self.assertEqual(csv_cell(None), "")
        self.assertEqual(csv_cell(3), 3)

    def test_stream_csv(self):
        resp = stream_csv([["Item", "Total"], ["Kingfisher, 650ml", Decimal("300")]], "sales.csv")
        self.assertEqual(resp["Content-Disposition"], 'attachment; filename="sales.csv"')
        body = b"".join(resp.streaming_content).decode()
        self.assertEqual(body, 'Item,Total\r\n"Kingfisher, 650ml",300.00\r\n')
