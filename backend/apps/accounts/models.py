"""
Accounts models - dashboard users as known by the auth provider.
"""

from django.db import models

from apps.core.models import TimestampedModel


class Profile(TimestampedModel):
    """
    Local profile for a dashboard user.

    The auth provider owns credentials and sessions; this row links the
    provider's user id (the session JWT ``sub`` claim) to an organization.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        STAFF = "staff", "Staff"
        SUPER_ADMIN = "super_admin", "Super Admin"

    auth_user_id = models.UUIDField(
        unique=True,
        db_index=True,
        help_text="User id issued by the auth provider",
    )
    email = models.EmailField(blank=True)
    full_name = models.CharField(max_length=255, blank=True)
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="profiles",
        null=True,
        blank=True,
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.ADMIN)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.full_name or self.email} ({self.role})"

    @property
    def is_admin(self) -> bool:
        """Check if profile can manage its organization."""
        return self.role in (self.Role.ADMIN, self.Role.SUPER_ADMIN)
