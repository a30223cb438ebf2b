import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sale_number", models.CharField(max_length=32, unique=True)),
                ("sale_type", models.CharField(choices=[("table", "Table"), ("parcel", "Parcel")], default="table", max_length=16)),
                ("table_number", models.CharField(blank=True, default="", max_length=32)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("payment_method", models.CharField(choices=[("cash", "Cash"), ("card", "Card"), ("upi", "UPI")], default="cash", max_length=16)),
                ("sale_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-sale_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("unit_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sale_items", to="inventory.product")),
                ("sale", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="billing.sale")),
            ],
        ),
        migrations.CreateModel(
            name="PendingBill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bill_number", models.CharField(max_length=32, unique=True)),
                ("sale_type", models.CharField(choices=[("table", "Table"), ("parcel", "Parcel")], default="table", max_length=16)),
                ("table_number", models.CharField(blank=True, default="", max_length=32)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("items", models.JSONField(default=list)),
                ("tax_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("discount_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=14)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("payment_method", models.CharField(choices=[("cash", "Cash"), ("card", "Card"), ("upi", "UPI")], default="cash", max_length=16)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
