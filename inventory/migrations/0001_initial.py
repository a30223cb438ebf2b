import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("variant", models.CharField(blank=True, default="", max_length=100)),
                ("sku", models.CharField(max_length=64, unique=True)),
                ("barcode", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("cost", models.DecimalField(decimal_places=2, max_digits=12)),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                ("unit", models.CharField(default="pcs", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="product",
            constraint=models.CheckConstraint(
                condition=models.Q(("price__gte", 0), ("cost__gte", 0)),
                name="inventory_product_price_cost_non_negative",
            ),
        ),
        migrations.CreateModel(
            name="Stock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("godown_stock", models.PositiveIntegerField(default=0)),
                ("counter_stock", models.PositiveIntegerField(default=0)),
                ("min_stock_level", models.PositiveIntegerField(default=0)),
                ("max_stock_level", models.PositiveIntegerField(default=1000)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="stock", to="inventory.product")),
            ],
        ),
        migrations.AddConstraint(
            model_name="stock",
            constraint=models.CheckConstraint(
                condition=models.Q(("godown_stock__gte", 0), ("counter_stock__gte", 0)),
                name="inventory_stock_non_negative",
            ),
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("movement_type", models.CharField(choices=[("IN", "In"), ("OUT", "Out"), ("TRANSFER", "Transfer"), ("ADJUST", "Adjust")], max_length=16)),
                ("quantity", models.PositiveIntegerField()),
                ("from_location", models.CharField(blank=True, choices=[("godown", "Godown"), ("counter", "Counter")], default="", max_length=16)),
                ("to_location", models.CharField(blank=True, choices=[("godown", "Godown"), ("counter", "Counter")], default="", max_length=16)),
                ("reference_id", models.IntegerField(blank=True, null=True)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="movements", to="inventory.product")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="DailyTransfer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transfer_date", models.DateField()),
                ("total_items", models.PositiveIntegerField(default=0)),
                ("total_quantity", models.PositiveIntegerField(default=0)),
                ("items_transferred", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
