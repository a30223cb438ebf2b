from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Sum
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from inventory.exceptions import InventoryError
from inventory.forms import DateRangeForm
from org.models import BarProfile

from .forms import SaleForm, TableForm, sale_row_formset
from .models import PendingBill, Sale, Table
from .services import BillLine, compute_totals, delete_pending_bill, delete_table, record_sale, sales_between, \
    save_pending_bill, settle_pending_bill, sync_table_status, table_overview


@login_required
def sales_list(request):
    """Sales in a date range (default: today), newest first."""
    form = DateRangeForm(request.GET or None)
    start = end = timezone.localdate()
    if form.is_valid():
        start = form.cleaned_data.get("date_from") or start
        end = form.cleaned_data.get("date_to") or end
    sales = sales_between(start, end)
    total = sales.aggregate(t=Sum("total_amount"))["t"]
    return render(request, "billing/sales_list.html", {
        "form": form,
        "sales": sales,
        "total": total,
        "date_from": start,
        "date_to": end,
    })


@login_required
def sale_detail(request, pk: int):
    sale = get_object_or_404(Sale.objects.prefetch_related("items__product"), pk=pk)
    return render(request, "billing/sale_detail.html", {"sale": sale, "profile": BarProfile.current()})


def _bill_lines(row_formset):
    return [
        BillLine(product_id=r["product"].pk, quantity=r["quantity"], unit_price=r.get("unit_price"))
        for r in row_formset.cleaned_data
        if r.get("product") and r.get("quantity")
    ]


def _pending_initial(bill):
    header = {
        "sale_type": bill.sale_type,
        "table": bill.table_id,
        "table_number": bill.table_number,
        "customer_name": bill.customer_name,
        "customer_phone": bill.customer_phone,
        "payment_method": bill.payment_method,
        "tax_percent": bill.tax_percent,
        "discount_percent": bill.discount_percent,
        "notes": bill.notes,
    }
    rows = [
        {"product": i["product_id"], "quantity": i["quantity"], "unit_price": i["unit_price"]}
        for i in bill.items
    ]
    return header, rows


@require_http_methods(["GET", "POST"])
@login_required
def sale_create(request, pending_id: int = None):
    """
    New bill. POST action "complete" records the sale and takes stock off the counter;
    "pending" parks the bill without touching stock. With pending_id the parked bill is edited.
    """
    bill = get_object_or_404(PendingBill, pk=pending_id) if pending_id else None
    if request.method == "POST":
        form = SaleForm(request.POST)
        row_formset = sale_row_formset(data=request.POST)
    else:
        header, rows = _pending_initial(bill) if bill else ({}, None)
        if bill is None and request.GET.get("table"):
            header = {"table": request.GET["table"]}
        form = SaleForm(initial=header or None)
        row_formset = sale_row_formset(initial=rows)

    totals = None
    if request.method == "POST" and form.is_valid() and row_formset.is_valid():
        cd = form.cleaned_data
        lines = _bill_lines(row_formset)
        header = {
            "sale_type": cd["sale_type"],
            "table": cd["table"],
            "table_number": cd["table_number"],
            "customer_name": cd["customer_name"],
            "customer_phone": cd["customer_phone"],
            "payment_method": cd["payment_method"],
            "tax_percent": cd["tax_percent"],
            "discount_percent": cd["discount_percent"],
        }
        try:
            if request.POST.get("action") == "pending":
                saved = save_pending_bill(lines, bill=bill, notes=cd["notes"], **header)
                messages.success(request, f"Bill {saved.bill_number} saved as pending.")
                return redirect("billing:pending_bills")
            with transaction.atomic():
                sale = record_sale(lines, **header)
                if bill is not None:
                    delete_pending_bill(bill.pk)
            messages.success(request, f"Sale {sale.sale_number} completed.")
            return redirect("billing:sale_detail", pk=sale.pk)
        except ValidationError as e:
            form.add_error(None, e)
        except InventoryError as e:
            messages.error(request, f"Could not complete sale: {e}")
        priced = [(r["quantity"], r["product"].price if r.get("unit_price") is None else r["unit_price"])
                  for r in row_formset.cleaned_data if r.get("product") and r.get("quantity")]
        totals = compute_totals(priced, cd["tax_percent"], cd["discount_percent"])
    elif request.method == "POST":
        messages.error(request, "Could not save bill. Please fix the errors below.")

    return render(request, "billing/sale_form.html", {
        "form": form,
        "row_formset": row_formset,
        "bill": bill,
        "totals": totals,
    })


@login_required
def pending_bills(request):
    return render(request, "billing/pending_bills.html", {"bills": PendingBill.objects.all()})


@require_POST
@login_required
def pending_bill_settle(request, pk: int):
    bill = get_object_or_404(PendingBill, pk=pk)
    try:
        sale = settle_pending_bill(bill.pk, payment_method=request.POST.get("payment_method") or None)
    except (InventoryError, ValidationError) as e:
        messages.error(request, f"Could not settle bill {bill.bill_number}: {e}")
        return redirect("billing:pending_bills")
    messages.success(request, f"Bill {bill.bill_number} settled as sale {sale.sale_number}.")
    return redirect("billing:sale_detail", pk=sale.pk)


@require_POST
@login_required
def pending_bill_delete(request, pk: int):
    if delete_pending_bill(pk):
        messages.success(request, "Pending bill deleted.")
    else:
        messages.error(request, "Pending bill not found.")
    return redirect("billing:pending_bills")


@login_required
def tables(request):
    """Table board: every table with its status and the total of any open bill on it."""
    return render(request, "billing/tables.html", {"tables": table_overview()})


@require_http_methods(["GET", "POST"])
@login_required
def table_form(request, pk: int = None):
    table = get_object_or_404(Table, pk=pk) if pk else None
    form = TableForm(request.POST or None, instance=table)
    if request.method == "POST":
        if form.is_valid():
            with transaction.atomic():
                saved = form.save()
                # An open bill keeps the table occupied whatever was picked
                sync_table_status(saved)
            messages.success(request, f"Table {saved.name} saved.")
            return redirect("billing:tables")
        messages.error(request, "Could not save table. Please fix the errors below.")
    return render(request, "billing/table_form.html", {"form": form, "table": table})


@require_POST
@login_required
def table_delete(request, pk: int):
    try:
        deleted = delete_table(pk)
    except ValidationError as e:
        messages.error(request, e.messages[0])
        return redirect("billing:tables")
    if deleted:
        messages.success(request, "Table deleted.")
    else:
        messages.error(request, "Table not found.")
    return redirect("billing:tables")
