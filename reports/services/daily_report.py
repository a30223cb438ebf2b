"""
End-of-day report: sales, spendings and counter cash for one local calendar day.

Opening balance comes from that day's CounterBalance row; without one it carries
over the closing balance of the most recent earlier day (0 when there is none).
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum

from billing.models import SaleItem, SaleType
from billing.services import sales_on
from common.dates import local_datetime_string
from common.money import to_money
from inventory.models import Product
from inventory.services.queries import low_stock_products

from ..models import CounterBalance, Spending

log = logging.getLogger(__name__)

TOP_ITEMS_LIMIT = 10


@dataclass
class TopItem:
    name: str
    quantity: int
    revenue: Decimal


@dataclass
class DailyReport:
    report_date: date
    total_products: int
    low_stock_count: int
    total_sales: int
    table_sales: int
    parcel_sales: int
    total_revenue: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_spendings: Decimal
    opening_balance: Decimal
    net_income: Decimal
    total_balance: Decimal
    generated_at: str
    top_items: list = field(default_factory=list)
    low_stock_items: list = field(default_factory=list)
    spendings: list = field(default_factory=list)

    @property
    def profit_margin(self) -> Decimal:
        if not self.total_revenue:
            return Decimal("0.0")
        return (self.net_income / self.total_revenue * 100).quantize(Decimal("0.1"))


def opening_balance_for(day: date) -> Decimal:
    row = CounterBalance.objects.filter(balance_date=day).first()
    if row is not None:
        return row.opening_balance
    previous = CounterBalance.objects.filter(balance_date__lt=day).order_by("-balance_date").first()
    return previous.closing_balance if previous is not None else Decimal("0.00")


@transaction.atomic
def set_counter_balance(day: date, *, opening_balance=None, closing_balance=None, notes=None) -> CounterBalance:
    """
    Create or update the balance row for `day`. Fields left as None keep their current
    value; a new row's opening balance defaults to the carried-over closing balance.
    """
    row, created = CounterBalance.objects.select_for_update().get_or_create(
        balance_date=day,
        defaults={"opening_balance": opening_balance_for(day)},
    )
    if opening_balance is not None:
        row.opening_balance = to_money(opening_balance)
    if closing_balance is not None:
        row.closing_balance = to_money(closing_balance)
    if notes is not None:
        row.notes = notes
    row.save()
    log.info("Counter balance %s %s: opening %s closing %s",
             day, "created" if created else "updated", row.opening_balance, row.closing_balance)
    return row


def top_selling_items(day: date, limit=TOP_ITEMS_LIMIT):
    line_total = ExpressionWrapper(F("quantity") * F("unit_price"), output_field=DecimalField(max_digits=18, decimal_places=2))
    rows = (
        SaleItem.objects.filter(sale__in=sales_on(day))
        .values("product_id", "product__name", "product__variant")
        .annotate(qty=Sum("quantity"), revenue=Sum(line_total))
        .order_by("-qty", "product__name")[:limit]
    )
    items = []
    for r in rows:
        name = r["product__name"]
        if r["product__variant"]:
            name = f"{name} ({r['product__variant']})"
        items.append(TopItem(name=name, quantity=r["qty"], revenue=to_money(r["revenue"])))
    return items


def compute_daily_report(day: date) -> DailyReport:
    sales = sales_on(day)
    agg = sales.aggregate(
        n=Count("id"),
        tables=Count("id", filter=Q(sale_type=SaleType.TABLE)),
        parcels=Count("id", filter=Q(sale_type=SaleType.PARCEL)),
        revenue=Sum("total_amount"),
    )
    cost_expr = ExpressionWrapper(F("quantity") * F("unit_cost"), output_field=DecimalField(max_digits=18, decimal_places=2))
    cost = SaleItem.objects.filter(sale__in=sales).aggregate(c=Sum(cost_expr))["c"]

    spendings = list(Spending.objects.filter(spending_date=day).order_by("id"))
    revenue = to_money(agg["revenue"])
    cost = to_money(cost)
    spent = to_money(sum((s.amount for s in spendings), Decimal("0")))
    opening = to_money(opening_balance_for(day))
    net_income = revenue - spent
    low = list(low_stock_products())

    return DailyReport(
        report_date=day,
        total_products=Product.objects.count(),
        low_stock_count=len(low),
        total_sales=agg["n"] or 0,
        table_sales=agg["tables"] or 0,
        parcel_sales=agg["parcels"] or 0,
        total_revenue=revenue,
        total_cost=cost,
        total_profit=revenue - cost,
        total_spendings=spent,
        opening_balance=opening,
        net_income=net_income,
        total_balance=net_income + opening,
        generated_at=local_datetime_string(),
        top_items=top_selling_items(day),
        low_stock_items=low,
        spendings=spendings,
    )


def daily_report_rows(report: DailyReport, bar_name=""):
    """Rows for the CSV export of a daily report."""
    if bar_name:
        yield [bar_name]
    yield ["Daily Report", report.report_date.isoformat()]
    yield ["Generated at", report.generated_at]
    yield []
    yield ["Summary", "Value"]
    yield ["Total sales", report.total_sales]
    yield ["Table sales", report.table_sales]
    yield ["Parcel sales", report.parcel_sales]
    yield ["Revenue", report.total_revenue]
    yield ["Cost of goods sold", report.total_cost]
    yield ["Gross profit", report.total_profit]
    yield ["Spendings", report.total_spendings]
    yield ["Opening balance", report.opening_balance]
    yield ["Net income", report.net_income]
    yield ["Profit margin %", report.profit_margin]
    yield ["Total balance", report.total_balance]
    yield []
    yield ["Top selling items"]
    yield ["#", "Item", "Quantity", "Revenue"]
    for n, item in enumerate(report.top_items, start=1):
        yield [n, item.name, item.quantity, item.revenue]
    yield []
    yield ["Spendings"]
    yield ["Description", "Category", "Payment", "Amount"]
    for s in report.spendings:
        yield [s.description, s.category, s.get_payment_method_display(), s.amount]
    yield []
    yield ["Low stock items", report.low_stock_count]
    yield ["Product", "Godown", "Counter", "Minimum"]
    for p in report.low_stock_items:
        yield [str(p), p.stock.godown_stock, p.stock.counter_stock, p.stock.min_stock_level]
