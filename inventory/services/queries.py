"""Read-side helpers for the product screens: search, stock status, availability filters."""
from django.db.models import F, Q

from ..models import Product, StockStatus


def stock_status(godown_stock, counter_stock, min_stock_level, max_stock_level) -> str:
    """low when total <= min, overstock when total >= max, normal otherwise. Low wins a tie."""
    total = (godown_stock or 0) + (counter_stock or 0)
    if total <= (min_stock_level or 0):
        return StockStatus.LOW
    if max_stock_level is not None and total >= max_stock_level:
        return StockStatus.OVERSTOCK
    return StockStatus.NORMAL


def with_stock(queryset=None):
    """Products joined to their stock row, with total_stock annotated. Ordered by name."""
    qs = queryset if queryset is not None else Product.objects.all()
    return qs.select_related("stock").annotate(
        total_stock=F("stock__godown_stock") + F("stock__counter_stock")
    ).order_by("name", "id")


def search_products(query, *, include_barcode=False, queryset=None):
    """
    Case-insensitive substring match on name or SKU (and barcode for the sales screen).
    Blank query returns the full list; order is the underlying list's order.
    """
    qs = queryset if queryset is not None else with_stock()
    term = (query or "").strip()
    if not term:
        return qs
    cond = Q(name__icontains=term) | Q(sku__icontains=term)
    if include_barcode:
        cond |= Q(barcode__icontains=term)
    return qs.filter(cond)


def low_stock_products(queryset=None):
    return with_stock(queryset).filter(total_stock__lte=F("stock__min_stock_level"))


def transferable_products(queryset=None):
    """Products that still have something in the godown."""
    return with_stock(queryset).filter(stock__godown_stock__gt=0)


def sellable_products(queryset=None):
    """Products that can be billed from the counter."""
    return with_stock(queryset).filter(stock__counter_stock__gt=0)
