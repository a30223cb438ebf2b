from datetime import timedelta

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from common.csvutils import stream_csv
from common.dates import format_date
from org.models import BarProfile

from .exceptions import InventoryError
from .forms import DateRangeForm, ProductForm, StagedQuantityForm, StockEditForm, StockLevelsForm, StockTransferForm
from .models import DailyTransfer, Product, Stock
from .services import queries, stock_ledger
from .services.transfer import commit_transfer, get_history, load_staging, save_staging, transfer_report_rows
from .services.valuation import inventory_value_per_location


@login_required
def gateway(request):
    """Landing page: counts and shortcuts."""
    low = queries.low_stock_products()
    return render(request, "inventory/gateway.html", {
        "product_count": Product.objects.count(),
        "low_stock_count": low.count(),
        "low_stock_products": low[:10],
    })


@login_required
def inventory_list(request):
    """Godown / counter / total per product with stock status. ?q= filters by name or SKU."""
    q = request.GET.get("q", "")
    products = queries.search_products(q)
    rows = [(p, p.stock, p.stock.status) for p in products]
    value_rows, value_total = inventory_value_per_location()
    return render(request, "inventory/inventory_list.html", {
        "rows": rows,
        "q": q,
        "low_stock_count": queries.low_stock_products().count(),
        "value_rows": value_rows,
        "value_total": value_total,
    })


@login_required
def products_list(request):
    q = request.GET.get("q", "")
    products = queries.search_products(q, include_barcode=True)
    return render(request, "inventory/products_list.html", {"products": products, "q": q})


@require_http_methods(["GET", "POST"])
@login_required
def product_create(request):
    form = ProductForm(request.POST or None)
    levels_form = StockLevelsForm(request.POST or None, prefix="levels")
    if request.method == "POST" and form.is_valid() and levels_form.is_valid():
        try:
            with transaction.atomic():
                product = form.save()
                Stock.objects.filter(product=product).update(
                    min_stock_level=levels_form.cleaned_data["min_stock_level"],
                    max_stock_level=levels_form.cleaned_data["max_stock_level"],
                )
            messages.success(request, "Product created.")
            return redirect("inventory:products_list")
        except IntegrityError:
            messages.error(request, "A product with this SKU or barcode already exists.")
    elif request.method == "POST":
        messages.error(request, "Could not save product. Please fix the errors below.")
    return render(request, "inventory/product_form.html", {
        "form": form,
        "levels_form": levels_form,
        "title": "New Product",
    })


@require_http_methods(["GET", "POST"])
@login_required
def product_edit(request, pk: int):
    product = get_object_or_404(Product.objects.select_related("stock"), pk=pk)
    form = ProductForm(request.POST or None, instance=product)
    levels_form = StockLevelsForm(request.POST or None, instance=product.stock, prefix="levels")
    if request.method == "POST" and form.is_valid() and levels_form.is_valid():
        try:
            with transaction.atomic():
                form.save()
                Stock.objects.filter(product=product).update(
                    min_stock_level=levels_form.cleaned_data["min_stock_level"],
                    max_stock_level=levels_form.cleaned_data["max_stock_level"],
                )
            messages.success(request, "Product updated.")
            return redirect("inventory:products_list")
        except IntegrityError:
            messages.error(request, "A product with this SKU or barcode already exists.")
    elif request.method == "POST":
        messages.error(request, "Could not save product. Please fix the errors below.")
    return render(request, "inventory/product_form.html", {
        "form": form,
        "levels_form": levels_form,
        "title": "Edit Product",
    })


@require_POST
@login_required
def product_delete(request, pk: int):
    product = get_object_or_404(Product, pk=pk)
    try:
        product.delete()
        messages.success(request, "Product deleted.")
    except ProtectedError:
        messages.error(request, "This product appears on recorded sales and cannot be deleted.")
    return redirect("inventory:products_list")


@require_http_methods(["GET", "POST"])
@login_required
def stock_edit(request, pk: int):
    """Manual correction of godown and counter stock."""
    product = get_object_or_404(Product.objects.select_related("stock"), pk=pk)
    initial = {"godown_stock": product.stock.godown_stock, "counter_stock": product.stock.counter_stock}
    form = StockEditForm(request.POST or None, initial=initial)
    if request.method == "POST" and form.is_valid():
        try:
            stock_ledger.update_stock(
                product.pk, form.cleaned_data["godown_stock"], form.cleaned_data["counter_stock"]
            )
            messages.success(request, f"Stock updated for {product}.")
            return redirect("inventory:inventory_list")
        except InventoryError as e:
            messages.error(request, f"Failed to update stock: {e}")
    return render(request, "inventory/stock_edit.html", {"product": product, "form": form})


@require_http_methods(["GET", "POST"])
@login_required
def stock_transfer(request, pk: int):
    """Move stock for one product between godown and counter. Checks source stock before posting."""
    product = get_object_or_404(Product.objects.select_related("stock"), pk=pk)
    form = StockTransferForm(request.POST or None, stock=product.stock)
    if request.method == "POST" and form.is_valid():
        cd = form.cleaned_data
        try:
            stock_ledger.transfer_stock(product.pk, cd["quantity"], cd["from_location"], cd["to_location"])
            messages.success(request, f"Transferred {cd['quantity']} of {product} to {cd['to_location']}.")
            return redirect("inventory:inventory_list")
        except InventoryError as e:
            messages.error(request, f"Failed to transfer stock: {e}")
    return render(request, "inventory/stock_transfer.html", {"product": product, "form": form})


@login_required
def stock_movements(request):
    movements = stock_ledger.stock_movements()
    return render(request, "inventory/stock_movements.html", {"movements": movements})


def _parse_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@require_http_methods(["GET", "POST"])
@login_required
def daily_transfer(request):
    """
    Daily Transfer screen. POST actions: add, set_quantity, remove, clear, commit.
    The staged list lives in the session until it is committed or cleared.
    """
    staging = load_staging(request.session)
    products = list(queries.transferable_products())
    staging.refresh(queries.with_stock().filter(pk__in=[e.product_id for e in staging]))

    if request.method == "POST":
        action = request.POST.get("action")
        product_id = _parse_int(request.POST.get("product_id"))
        try:
            if action == "add":
                product = get_object_or_404(Product.objects.select_related("stock"), pk=product_id)
                if staging.add(product) is None:
                    messages.error(request, f"{product} has no godown stock to transfer.")
            elif action == "set_quantity":
                form = StagedQuantityForm(request.POST)
                if form.is_valid():
                    staging.set_quantity(form.cleaned_data["product_id"], form.cleaned_data["quantity"])
                else:
                    messages.error(request, "Enter a whole number for the quantity.")
            elif action == "remove":
                staging.remove(product_id)
            elif action == "clear":
                staging.clear()
            elif action == "commit":
                record = commit_transfer(staging)
                messages.success(
                    request,
                    f"Successfully transferred {record.total_items} items from godown to counter!",
                )
            else:
                messages.error(request, "Unknown action.")
        except InventoryError as e:
            messages.error(request, f"Failed to transfer stock: {e}")
        save_staging(request.session, staging)
        return redirect("inventory:daily_transfer")

    q = request.GET.get("q", "")
    visible = list(queries.search_products(q, queryset=queries.transferable_products()))
    return render(request, "inventory/daily_transfer.html", {
        "products": visible,
        "has_products": bool(products),
        "q": q,
        "staging": staging,
        "total_quantity": staging.total_quantity,
        "recent_transfers": get_history()[:5],
    })


@login_required
def transfer_history(request):
    """Transfer records in a date range (default: last TRANSFER_HISTORY_DAYS days), newest first."""
    form = DateRangeForm(request.GET or None)
    end = timezone.localdate()
    start = end - timedelta(days=settings.TRANSFER_HISTORY_DAYS)
    if form.is_valid():
        start = form.cleaned_data.get("date_from") or start
        end = form.cleaned_data.get("date_to") or end
    records = get_history(start, end)
    return render(request, "inventory/transfer_history.html", {
        "form": form,
        "records": records,
        "date_from": start,
        "date_to": end,
    })


@login_required
def transfer_export(request, pk: int):
    """Download one transfer record as CSV."""
    record = get_object_or_404(DailyTransfer, pk=pk)
    profile = BarProfile.current()
    filename = f"daily-transfer-report-{format_date(record.transfer_date)}-{record.pk}.csv"
    return stream_csv(transfer_report_rows(record, bar_name=profile.bar_name), filename)
