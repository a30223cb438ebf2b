from decimal import Decimal

from django.db import models
from django.utils import timezone

from inventory.models import Product


class SaleType(models.TextChoices):
    TABLE = "table", "Table"
    PARCEL = "parcel", "Parcel"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    CARD = "card", "Card"
    UPI = "upi", "UPI"


class TableArea(models.TextChoices):
    RESTAURANT = "restaurant", "Restaurant"
    BAR = "bar", "Bar"


class TableStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    OCCUPIED = "occupied", "Occupied"
    RESERVED = "reserved", "Reserved"


class Table(models.Model):
    """
    A seating table. Status goes to occupied while a pending bill is open on it
    and back to available once the last one is settled or deleted.
    """
    name = models.CharField(max_length=32, unique=True)
    capacity = models.PositiveIntegerField(default=4)
    area = models.CharField(max_length=16, choices=TableArea.choices, default=TableArea.RESTAURANT)
    status = models.CharField(max_length=16, choices=TableStatus.choices, default=TableStatus.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["area", "name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(capacity__gte=1), name="billing_table_capacity_positive"),
        ]

    def __str__(self):
        return self.name


class Sale(models.Model):
    """A completed bill. Its items have already come off counter stock."""
    sale_number = models.CharField(max_length=32, unique=True)
    sale_type = models.CharField(max_length=16, choices=SaleType.choices, default=SaleType.TABLE)
    table_number = models.CharField(max_length=32, blank=True, default="")
    table = models.ForeignKey("Table", null=True, blank=True, on_delete=models.SET_NULL, related_name="sales")
    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    sale_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-sale_date", "-id"]

    def __str__(self):
        return f"Sale {self.sale_number}"

    @property
    def total_cost(self) -> Decimal:
        return sum((i.unit_cost * i.quantity for i in self.items.all()), Decimal("0.00"))


class SaleItem(models.Model):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="sale_items")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    # Cost at the time of sale, so later cost edits do not rewrite past profit
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=14, decimal_places=2)

    def __str__(self):
        return f"{self.product} x{self.quantity}"


class PendingBill(models.Model):
    """
    A bill parked before payment. items: [{"product_id", "name", "variant", "quantity", "unit_price"}].
    Stock is untouched until the bill is settled.
    """
    bill_number = models.CharField(max_length=32, unique=True)
    sale_type = models.CharField(max_length=16, choices=SaleType.choices, default=SaleType.TABLE)
    table_number = models.CharField(max_length=32, blank=True, default="")
    table = models.ForeignKey("Table", null=True, blank=True, on_delete=models.SET_NULL, related_name="pending_bills")
    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")
    items = models.JSONField(default=list)
    tax_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    subtotal = models.DecimalField(max_digits=14, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Pending bill {self.bill_number}"
