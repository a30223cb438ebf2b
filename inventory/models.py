from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Location(models.TextChoices):
    GODOWN = "godown", "Godown"
    COUNTER = "counter", "Counter"


class StockStatus(models.TextChoices):
    LOW = "low", "Low stock"
    NORMAL = "normal", "Normal"
    OVERSTOCK = "overstock", "Overstock"


class Product(models.Model):
    """Catalog entry. Stock lives on the one-to-one Stock row created with it."""
    name = models.CharField(max_length=200)
    variant = models.CharField(max_length=100, blank=True, default="")
    sku = models.CharField(max_length=64, unique=True)
    barcode = models.CharField(max_length=64, unique=True, null=True, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    cost = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    unit = models.CharField(max_length=16, default="pcs")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(price__gte=0) & Q(cost__gte=0),
                name="inventory_product_price_cost_non_negative",
            ),
        ]

    def __str__(self):
        if self.variant:
            return f"{self.name} ({self.variant})"
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        self.sku = (self.sku or "").strip()
        self.variant = (self.variant or "").strip()
        # Blank barcodes are stored as NULL so the unique index ignores them
        self.barcode = (self.barcode or "").strip() or None
        if not self.name:
            raise ValidationError({"name": "Product name is required."})
        if not self.sku:
            raise ValidationError({"sku": "Product SKU is required."})


class Stock(models.Model):
    """
    Live counters for one product at the two locations.
    Only inventory.services.stock_ledger writes these.
    """
    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name="stock")
    godown_stock = models.PositiveIntegerField(default=0)
    counter_stock = models.PositiveIntegerField(default=0)
    min_stock_level = models.PositiveIntegerField(default=0)
    max_stock_level = models.PositiveIntegerField(default=1000)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(godown_stock__gte=0) & Q(counter_stock__gte=0),
                name="inventory_stock_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.product}: godown={self.godown_stock} counter={self.counter_stock}"

    @property
    def total_stock(self) -> int:
        return self.godown_stock + self.counter_stock

    @property
    def status(self) -> str:
        from .services.queries import stock_status

        return stock_status(self.godown_stock, self.counter_stock, self.min_stock_level, self.max_stock_level)

    def quantity_at(self, location: str) -> int:
        return getattr(self, f"{location}_stock")


class StockMovement(models.Model):
    """Append-only trail of every change to the stock counters."""
    IN = "IN"
    OUT = "OUT"
    TRANSFER = "TRANSFER"
    ADJUST = "ADJUST"
    MOVEMENT_TYPES = [(IN, "In"), (OUT, "Out"), (TRANSFER, "Transfer"), (ADJUST, "Adjust")]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="movements")
    movement_type = models.CharField(max_length=16, choices=MOVEMENT_TYPES)
    quantity = models.PositiveIntegerField()
    from_location = models.CharField(max_length=16, choices=Location.choices, blank=True, default="")
    to_location = models.CharField(max_length=16, choices=Location.choices, blank=True, default="")
    reference_id = models.IntegerField(null=True, blank=True)
    notes = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.movement_type} {self.quantity} x {self.product_id}"


class DailyTransfer(models.Model):
    """
    One committed godown -> counter batch. Written once, never altered.
    items_transferred: [{"id", "name", "variant", "quantity", "transfer_time"}, ...]
    """
    transfer_date = models.DateField()
    total_items = models.PositiveIntegerField(default=0)
    total_quantity = models.PositiveIntegerField(default=0)
    items_transferred = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Transfer {self.transfer_date} ({self.total_items} items, {self.total_quantity} qty)"

    def save(self, *args, **kwargs):
        if self.pk and DailyTransfer.objects.filter(pk=self.pk).exists():
            raise ValidationError("Transfer records are locked once saved.")
        return super().save(*args, **kwargs)
