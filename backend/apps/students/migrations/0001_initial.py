import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                (
                    "phone_number",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Phone number in E.164 format, used for WhatsApp",
                        max_length=20,
                    ),
                ),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("gympass_user_token", models.CharField(blank=True, max_length=255, null=True)),
                ("totalpass_user_token", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "is_synthetic_name",
                    models.BooleanField(
                        default=False,
                        help_text="Name is a placeholder generated from a partner token",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="student_set",
                        to="organizations.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("organization", "gympass_user_token"),
                        name="students_student_org_gympass_token_unique",
                    ),
                    models.UniqueConstraint(
                        fields=("organization", "totalpass_user_token"),
                        name="students_student_org_totalpass_token_unique",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Modality",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "recurring_interval",
                    models.CharField(
                        blank=True,
                        choices=[("week", "Weekly"), ("month", "Monthly"), ("year", "Yearly")],
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modality_set",
                        to="organizations.organization",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "modalities",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Enrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("expiry_date", models.DateField(db_index=True)),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "modality",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="students.modality",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "ordering": ["-expiry_date"],
            },
        ),
        migrations.CreateModel(
            name="CheckIn",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("checked_in_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "checked_in_on",
                    models.DateField(editable=False, help_text="Local calendar day of checked_in_at"),
                ),
                (
                    "source",
                    models.CharField(
                        default="Staff",
                        help_text="Who recorded the check-in: Staff, WhatsApp, Gympass, TotalPass",
                        max_length=50,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="check_ins",
                        to="organizations.organization",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="check_ins",
                        to="students.student",
                    ),
                ),
            ],
            options={
                "ordering": ["-checked_in_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("student", "organization", "checked_in_on"),
                        name="check_ins_student_org_date_unique",
                    )
                ],
            },
        ),
    ]
