from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(blank=True, max_length=20)),
                (
                    "gympass_integration_code",
                    models.BigIntegerField(
                        blank=True,
                        help_text="Numeric gym id assigned by Gympass/Wellhub",
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "totalpass_integration_code",
                    models.CharField(
                        blank=True,
                        help_text="Alphanumeric integration code assigned by TotalPass",
                        max_length=64,
                        null=True,
                        unique=True,
                    ),
                ),
                ("gympass_api_secret", models.CharField(blank=True, max_length=255)),
                ("totalpass_api_secret", models.CharField(blank=True, max_length=255)),
                (
                    "stripe_account_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Connected account ID, e.g. 'acct_xxx'",
                        max_length=255,
                    ),
                ),
                (
                    "stripe_account_status",
                    models.CharField(
                        blank=True,
                        choices=[("pending", "Pending"), ("enabled", "Enabled"), ("restricted", "Restricted")],
                        max_length=20,
                    ),
                ),
                (
                    "subscription_status",
                    models.CharField(
                        choices=[
                            ("trial", "Trial"),
                            ("active", "Active"),
                            ("overdue", "Overdue"),
                            ("inactive", "Inactive"),
                        ],
                        db_index=True,
                        default="trial",
                        max_length=20,
                    ),
                ),
                ("trial_expires_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
