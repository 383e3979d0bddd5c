"""
Students models - members of a gym, their memberships and attendance.
"""

from django.db import models
from django.utils import timezone

from apps.core.models import TenantScopedModel, TimestampedModel


class RecurringInterval(models.TextChoices):
    """Billing cadence shared by modalities and products."""

    WEEK = "week", "Weekly"
    MONTH = "month", "Monthly"
    YEAR = "year", "Yearly"


class Student(TenantScopedModel):
    """
    A gym member.

    Created by staff, or automatically when a partner check-in arrives with
    an unseen benefit token. At most one student per (organization, token)
    for each partner.
    """

    name = models.CharField(max_length=255)
    phone_number = models.CharField(
        max_length=20,
        blank=True,
        db_index=True,
        help_text="Phone number in E.164 format, used for WhatsApp",
    )
    email = models.EmailField(blank=True)

    # Partner benefit tokens
    gympass_user_token = models.CharField(max_length=255, null=True, blank=True)
    totalpass_user_token = models.CharField(max_length=255, null=True, blank=True)
    is_synthetic_name = models.BooleanField(
        default=False,
        help_text="Name is a placeholder generated from a partner token",
    )

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "gympass_user_token"],
                name="students_student_org_gympass_token_unique",
            ),
            models.UniqueConstraint(
                fields=["organization", "totalpass_user_token"],
                name="students_student_org_totalpass_token_unique",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Modality(TenantScopedModel):
    """A service or class type students enroll in (e.g. 'Musculação')."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    recurring_interval = models.CharField(
        max_length=10,
        choices=RecurringInterval.choices,
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "modalities"

    def __str__(self) -> str:
        return self.name


class Enrollment(TimestampedModel):
    """
    A student's membership in one modality.

    ``expiry_date`` is the only source of truth for active/overdue status.
    """

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="enrollments")
    modality = models.ForeignKey(Modality, on_delete=models.CASCADE, related_name="enrollments")
    expiry_date = models.DateField(db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["-expiry_date"]

    def __str__(self) -> str:
        return f"{self.student} - {self.modality} (until {self.expiry_date})"


class CheckIn(models.Model):
    """
    One attendance event.

    The database allows a single check-in per student, organization and
    calendar day; a second insert on the same day fails the constraint.
    """

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="check_ins")
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="check_ins",
    )
    checked_in_at = models.DateTimeField(default=timezone.now)
    checked_in_on = models.DateField(
        editable=False,
        help_text="Local calendar day of checked_in_at",
    )
    source = models.CharField(
        max_length=50,
        default="Staff",
        help_text="Who recorded the check-in: Staff, WhatsApp, Gympass, TotalPass",
    )

    class Meta:
        ordering = ["-checked_in_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "organization", "checked_in_on"],
                name="check_ins_student_org_date_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} @ {self.checked_in_at:%Y-%m-%d %H:%M} ({self.source})"

    def save(self, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        """Derive the calendar day from checked_in_at."""
        self.checked_in_on = timezone.localdate(self.checked_in_at)
        super().save(*args, **kwargs)
