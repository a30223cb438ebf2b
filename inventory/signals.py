from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Product, Stock


@receiver(post_save, sender=Product, dispatch_uid="inventory_product_stock_row")
def ensure_stock_row(sender, instance, created, raw=False, **kwargs):
    """Every product gets an empty Stock row (godown 0, counter 0) when it is created."""
    if raw:
        return
    if created:
        Stock.objects.get_or_create(product=instance)
