"""
Billing models - products sold through the tenant's connected account.
"""

from django.db import models

from apps.core.models import TenantScopedModel
from apps.students.models import RecurringInterval


class Product(TenantScopedModel):
    """
    A product or service sold by the organization.

    Mirrors a Stripe product + price pair living on the organization's
    connected account. Source of truth for the amount is the Stripe price.
    """

    class ProductType(models.TextChoices):
        PHYSICAL = "physical", "Physical"
        SERVICE = "service", "Service"

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    product_type = models.CharField(
        max_length=20,
        choices=ProductType.choices,
        default=ProductType.SERVICE,
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Price in BRL, e.g. 89.90",
    )
    recurring_interval = models.CharField(
        max_length=10,
        choices=RecurringInterval.choices,
        null=True,
        blank=True,
        help_text="Billing interval; empty for one-time sales",
    )
    quantity = models.PositiveIntegerField(
        default=0,
        help_text="Units in stock (physical products only)",
    )
    modality = models.ForeignKey(
        "students.Modality",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        help_text="Modality whose enrollment is renewed when this product is paid",
    )

    # Stripe (on the connected account)
    stripe_product_id = models.CharField(max_length=255, blank=True, db_index=True)
    stripe_price_id = models.CharField(max_length=255, blank=True, db_index=True)
    is_archived = models.BooleanField(default=False)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurring_interval)

    @property
    def is_physical(self) -> bool:
        return self.product_type == self.ProductType.PHYSICAL
