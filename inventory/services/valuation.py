"""
Stock valuation at cost for the inventory screen and the low-stock report.
Value per product and location = quantity * product.cost.
"""
from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum

from ..models import Location, Stock


def inventory_value(location=None):
    """
    Total value of stock at cost. location=None values both godown and counter.
    Returns Decimal (0.00 when there is no stock).
    """
    if location is None:
        qty = F("godown_stock") + F("counter_stock")
    else:
        qty = F(f"{location}_stock")
    value = ExpressionWrapper(qty * F("product__cost"), output_field=DecimalField(max_digits=18, decimal_places=2))
    total = Stock.objects.aggregate(v=Sum(value))["v"]
    return Decimal(total or 0).quantize(Decimal("0.01"))


def inventory_value_per_location():
    """Returns [(location_label, value), ...] plus the overall total."""
    rows = []
    total = Decimal("0.00")
    for location in Location:
        val = inventory_value(location.value)
        rows.append((location.label, val))
        total += val
    return rows, total
