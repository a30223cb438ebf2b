from django import template

from common.dates import format_for_display
from common.money import format_money

register = template.Library()


@register.filter
def money(value):
    """{{ amount|money }} -> ₹12.50. Blank values show as ₹0.00."""
    try:
        return format_money(value)
    except ValueError:
        return value


@register.filter
def display_date(value):
    """{{ value|display_date }} -> DD/MM/YYYY for dates, datetimes and stored timestamp strings."""
    return format_for_display(value)
