import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("billing", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Table",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=32, unique=True)),
                ("capacity", models.PositiveIntegerField(default=4)),
                ("area", models.CharField(choices=[("restaurant", "Restaurant"), ("bar", "Bar")], default="restaurant", max_length=16)),
                ("status", models.CharField(choices=[("available", "Available"), ("occupied", "Occupied"), ("reserved", "Reserved")], default="available", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["area", "name"],
            },
        ),
        migrations.AddConstraint(
            model_name="table",
            constraint=models.CheckConstraint(condition=models.Q(("capacity__gte", 1)), name="billing_table_capacity_positive"),
        ),
        migrations.AddField(
            model_name="sale",
            name="table",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sales", to="billing.table"),
        ),
        migrations.AddField(
            model_name="pendingbill",
            name="table",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="pending_bills", to="billing.table"),
        ),
    ]
