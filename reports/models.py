from decimal import Decimal

from django.db import models
from django.utils import timezone

from billing.models import PaymentMethod


class Spending(models.Model):
    """Money paid out of the counter (supplies, wages, repairs...)."""
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(max_length=100)
    spending_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-spending_date", "-id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gte=0), name="reports_spending_amount_non_negative"),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount})"


class CounterBalance(models.Model):
    balance_date = models.DateField(unique=True)
    opening_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    closing_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-balance_date"]

    def __str__(self):
        return f"Counter balance {self.balance_date}"
