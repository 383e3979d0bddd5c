"""
Organizations models - multi-tenancy foundation.
"""

from django.db import models

from apps.core.models import TimestampedModel


class Organization(TimestampedModel):
    """
    A gym or studio: the tenant root.

    Created at tenant signup. Settings screens edit the partner codes;
    Stripe webhooks only ever move ``stripe_account_status``.
    """

    class StripeAccountStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        ENABLED = "enabled", "Enabled"
        RESTRICTED = "restricted", "Restricted"

    class SubscriptionStatus(models.TextChoices):
        TRIAL = "trial", "Trial"
        ACTIVE = "active", "Active"
        OVERDUE = "overdue", "Overdue"
        INACTIVE = "inactive", "Inactive"

    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=20, blank=True)

    # Partner integrations
    gympass_integration_code = models.BigIntegerField(
        null=True,
        blank=True,
        unique=True,
        help_text="Numeric gym id assigned by Gympass/Wellhub",
    )
    totalpass_integration_code = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        unique=True,
        help_text="Alphanumeric integration code assigned by TotalPass",
    )
    gympass_api_secret = models.CharField(max_length=255, blank=True)
    totalpass_api_secret = models.CharField(max_length=255, blank=True)

    # Stripe Connect (populated when the tenant connects a payout account)
    stripe_account_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Connected account ID, e.g. 'acct_xxx'",
    )
    stripe_account_status = models.CharField(
        max_length=20,
        choices=StripeAccountStatus.choices,
        blank=True,
    )

    # Platform subscription
    subscription_status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.TRIAL,
        db_index=True,
    )
    trial_expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    @property
    def has_active_payout_account(self) -> bool:
        """Whether payments can be routed to this organization's connected account."""
        return bool(self.stripe_account_id) and (
            self.stripe_account_status == self.StripeAccountStatus.ENABLED
        )
