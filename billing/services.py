"""
Sales entry and pending bills.

Completing a sale takes the billed quantities off counter stock through the stock
ledger, inside the same transaction as the Sale rows: if any line is short the
whole bill is rolled back and InsufficientStockError reaches the caller.
"""
import logging
import random
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from common.dates import day_bounds
from common.money import to_money
from inventory.exceptions import NotFoundError
from inventory.models import Location, Product
from inventory.services.stock_ledger import remove_stock

from .models import PaymentMethod, PendingBill, Sale, SaleItem, SaleType, Table, TableStatus

log = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Walk-in Customer"


@dataclass
class BillLine:
    product_id: int
    quantity: int
    unit_price: Decimal = None  # None -> product's selling price


@dataclass
class BillTotals:
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal


def compute_totals(priced_lines, tax_percent=0, discount_percent=0) -> BillTotals:
    """
    priced_lines: iterable of (quantity, unit_price).
    Tax and discount are percentages of the subtotal; total = subtotal + tax - discount.
    """
    subtotal = sum((Decimal(q) * to_money(p) for q, p in priced_lines), Decimal("0.00"))
    subtotal = to_money(subtotal)
    tax = to_money(subtotal * Decimal(str(tax_percent or 0)) / 100)
    discount = to_money(subtotal * Decimal(str(discount_percent or 0)) / 100)
    return BillTotals(subtotal, tax, discount, to_money(subtotal + tax - discount))


def _bill_number_taken(number) -> bool:
    return Sale.objects.filter(sale_number=number).exists() or PendingBill.objects.filter(bill_number=number).exists()


def generate_bill_number(now=None) -> str:
    """DDMMYY followed by three random digits, unique across sales and pending bills."""
    now = timezone.localtime(now or timezone.now())
    base = now.strftime("%d%m%y")
    for _ in range(50):
        candidate = f"{base}{random.randint(100, 999)}"
        if not _bill_number_taken(candidate):
            return candidate
    # Busy day: fall back to a running sequence
    n = (Sale.objects.filter(sale_number__startswith=base).count()
         + PendingBill.objects.filter(bill_number__startswith=base).count() + 1)
    while _bill_number_taken(f"{base}{n:05d}"):
        n += 1
    return f"{base}{n:05d}"


def _resolve_lines(lines):
    """[(product, quantity, unit_price)]; raises ValidationError / NotFoundError."""
    lines = list(lines)
    if not lines:
        raise ValidationError("Add at least one item to the bill.")
    products = Product.objects.in_bulk([line.product_id for line in lines])
    resolved = []
    for n, line in enumerate(lines, start=1):
        product = products.get(line.product_id)
        if product is None:
            raise NotFoundError(line.product_id)
        qty = line.quantity
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise ValidationError(f"Item {n}: quantity must be a whole number above zero.")
        price = product.price if line.unit_price is None else to_money(line.unit_price)
        if price < 0:
            raise ValidationError(f"Item {n}: unit price cannot be negative.")
        resolved.append((product, qty, price))
    return resolved


def _check_header(sale_type, table_number, payment_method):
    if sale_type not in SaleType.values:
        raise ValidationError(f"Unknown sale type: {sale_type!r}")
    if payment_method not in PaymentMethod.values:
        raise ValidationError(f"Unknown payment method: {payment_method!r}")
    if sale_type == SaleType.TABLE and not (table_number or "").strip():
        raise ValidationError("Table number is required for table sales.")


def _seat(sale_type, table, table_number):
    """(table, table_number) to store on a bill. A picked table supplies its own name."""
    if sale_type != SaleType.TABLE:
        return None, ""
    if table is not None:
        return table, table.name
    return None, (table_number or "").strip()


def sync_table_status(table):
    """Occupied while any pending bill is open on the table; an occupied table with none is freed."""
    if table is None:
        return
    table = Table.objects.select_for_update().get(pk=table.pk)
    if table.pending_bills.exists():
        status = TableStatus.OCCUPIED
    elif table.status == TableStatus.OCCUPIED:
        status = TableStatus.AVAILABLE
    else:
        return
    if status != table.status:
        table.status = status
        table.save(update_fields=["status", "updated_at"])
        log.info("Table %s is now %s", table.name, status)


def table_overview():
    """Tables with the count and running total of their open pending bills."""
    return Table.objects.annotate(open_bills=Count("pending_bills"), open_total=Sum("pending_bills__total_amount"))


@transaction.atomic
def delete_table(table_id) -> bool:
    table = Table.objects.filter(pk=table_id).first()
    if table is None:
        return False
    if table.pending_bills.exists():
        raise ValidationError(f"Table {table.name} has an open bill. Settle or delete it first.")
    table.delete()
    return True


@transaction.atomic
def record_sale(
    lines,
    *,
    sale_type=SaleType.TABLE,
    table=None,
    table_number="",
    customer_name="",
    customer_phone="",
    payment_method=PaymentMethod.CASH,
    tax_percent=0,
    discount_percent=0,
    sale_date=None,
) -> Sale:
    table, table_number = _seat(sale_type, table, table_number)
    _check_header(sale_type, table_number, payment_method)
    resolved = _resolve_lines(lines)
    totals = compute_totals([(q, p) for _, q, p in resolved], tax_percent, discount_percent)

    sale = Sale.objects.create(
        sale_number=generate_bill_number(),
        sale_type=sale_type,
        table=table,
        table_number=table_number,
        customer_name=(customer_name or "").strip() or WALK_IN_CUSTOMER,
        customer_phone=(customer_phone or "").strip(),
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        discount_amount=totals.discount_amount,
        total_amount=totals.total_amount,
        payment_method=payment_method,
        sale_date=sale_date or timezone.now(),
    )
    for product, qty, price in resolved:
        SaleItem.objects.create(
            sale=sale,
            product=product,
            quantity=qty,
            unit_price=price,
            unit_cost=product.cost,
            total_price=to_money(price * qty),
        )
        remove_stock(product.pk, qty, Location.COUNTER, reference_id=sale.pk, notes=f"Sale {sale.sale_number}")
    log.info("Sale %s recorded: %s line(s), total %s", sale.sale_number, len(resolved), sale.total_amount)
    return sale


def sales_on(day):
    start, end = day_bounds(day)
    return Sale.objects.filter(sale_date__gte=start, sale_date__lt=end).prefetch_related("items__product")


def sales_between(start_date, end_date):
    start, _ = day_bounds(start_date)
    _, end = day_bounds(end_date)
    return Sale.objects.filter(sale_date__gte=start, sale_date__lt=end).order_by("-sale_date", "-id")


@transaction.atomic
def save_pending_bill(
    lines,
    *,
    bill=None,
    sale_type=SaleType.TABLE,
    table=None,
    table_number="",
    customer_name="",
    customer_phone="",
    payment_method=PaymentMethod.CASH,
    tax_percent=0,
    discount_percent=0,
    notes="",
) -> PendingBill:
    """Create a pending bill, or overwrite `bill` when given. Stock is not touched."""
    table, table_number = _seat(sale_type, table, table_number)
    _check_header(sale_type, table_number, payment_method)
    resolved = _resolve_lines(lines)
    totals = compute_totals([(q, p) for _, q, p in resolved], tax_percent, discount_percent)
    if bill is None:
        bill = PendingBill(bill_number=generate_bill_number())
    bill.sale_type = sale_type
    previous_table = bill.table
    bill.table = table
    bill.table_number = table_number
    bill.customer_name = (customer_name or "").strip()
    bill.customer_phone = (customer_phone or "").strip()
    bill.items = [
        {
            "product_id": product.pk,
            "name": product.name,
            "variant": product.variant,
            "quantity": qty,
            "unit_price": str(price),
        }
        for product, qty, price in resolved
    ]
    bill.tax_percent = to_money(tax_percent)
    bill.discount_percent = to_money(discount_percent)
    bill.subtotal = totals.subtotal
    bill.tax_amount = totals.tax_amount
    bill.discount_amount = totals.discount_amount
    bill.total_amount = totals.total_amount
    bill.payment_method = payment_method
    bill.notes = notes or ""
    bill.save()
    sync_table_status(table)
    if previous_table is not None and previous_table != table:
        sync_table_status(previous_table)
    return bill


def pending_bill_lines(bill: PendingBill):
    return [
        BillLine(product_id=int(i["product_id"]), quantity=int(i["quantity"]), unit_price=Decimal(i["unit_price"]))
        for i in bill.items
    ]


@transaction.atomic
def settle_pending_bill(bill_id, *, payment_method=None) -> Sale:
    """Turn a pending bill into a sale and delete it, all in one transaction."""
    bill = PendingBill.objects.select_for_update().get(pk=bill_id)
    sale = record_sale(
        pending_bill_lines(bill),
        sale_type=bill.sale_type,
        table=bill.table,
        table_number=bill.table_number,
        customer_name=bill.customer_name,
        customer_phone=bill.customer_phone,
        payment_method=payment_method or bill.payment_method,
        tax_percent=bill.tax_percent,
        discount_percent=bill.discount_percent,
    )
    bill.delete()
    sync_table_status(bill.table)
    log.info("Pending bill %s settled as sale %s", bill.bill_number, sale.sale_number)
    return sale


@transaction.atomic
def delete_pending_bill(bill_id) -> bool:
    bill = PendingBill.objects.select_related("table").filter(pk=bill_id).first()
    if bill is None:
        return False
    bill.delete()
    sync_table_status(bill.table)
    return True
