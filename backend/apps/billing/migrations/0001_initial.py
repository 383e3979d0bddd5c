import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        ("students", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "product_type",
                    models.CharField(
                        choices=[("physical", "Physical"), ("service", "Service")],
                        default="service",
                        max_length=20,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(decimal_places=2, help_text="Price in BRL, e.g. 89.90", max_digits=10),
                ),
                (
                    "recurring_interval",
                    models.CharField(
                        blank=True,
                        choices=[("week", "Weekly"), ("month", "Monthly"), ("year", "Yearly")],
                        help_text="Billing interval; empty for one-time sales",
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(default=0, help_text="Units in stock (physical products only)"),
                ),
                ("stripe_product_id", models.CharField(blank=True, db_index=True, max_length=255)),
                ("stripe_price_id", models.CharField(blank=True, db_index=True, max_length=255)),
                ("is_archived", models.BooleanField(default=False)),
                (
                    "modality",
                    models.ForeignKey(
                        blank=True,
                        help_text="Modality whose enrollment is renewed when this product is paid",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="students.modality",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_set",
                        to="organizations.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]
