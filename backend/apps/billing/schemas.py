"""
Billing API schemas - request/response types for billing endpoints.
"""

from decimal import Decimal
from typing import Literal

from ninja import Schema
from pydantic import ConfigDict, Field


class PaymentLinkRequest(Schema):
    """Request to create a payment link on the organization's connected account."""

    model_config = ConfigDict(populate_by_name=True)

    stripe_price_id: str = Field(..., alias="stripePriceId", min_length=1)
    organization_id: int = Field(..., alias="organizationId")
    recurring: bool = False
    student_id: int | None = Field(None, alias="studentId")


class PaymentLinkResponse(Schema):
    """Response with the payment link URL."""

    model_config = ConfigDict(populate_by_name=True)

    payment_link_url: str = Field(..., alias="paymentLinkUrl")


class BillingErrorResponse(Schema):
    """Error body for billing endpoints."""

    error: str


class FeeEstimateQuery(Schema):
    """Sale price in BRL."""

    price: Decimal = Field(..., ge=0)


class FeeEstimateResponse(Schema):
    """Display-only breakdown of a sale."""

    price: Decimal
    platform_fee: Decimal
    estimated_processor_fee: Decimal
    estimated_net: Decimal
    method: str


class ConnectAccountRequest(Schema):
    """Request to start Stripe Connect onboarding."""

    email: str = ""
    return_url: str | None = None
    refresh_url: str | None = None


class ConnectAccountResponse(Schema):
    """Onboarding link for the connected account."""

    onboarding_url: str
    stripe_account_id: str
    status: str


class ProductCreateRequest(Schema):
    """Request to create a product with its price."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    price: Decimal = Field(..., gt=0, decimal_places=2)
    recurring_interval: Literal["week", "month", "year", "one_time"] | None = None
    product_type: Literal["physical", "service"] = "service"
    quantity: int = Field(0, ge=0)
    modality_id: int | None = None


class ProductUpdateRequest(Schema):
    """Request to rename or re-describe a product."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class ProductResponse(Schema):
    """A product in the organization's catalog."""

    id: int
    name: str
    description: str
    product_type: str
    price: Decimal
    recurring_interval: str | None
    quantity: int
    modality_id: int | None
    stripe_product_id: str
    stripe_price_id: str
    is_archived: bool


class ProductListResponse(Schema):
    """Products of the organization."""

    products: list[ProductResponse]


class StudentCheckoutRequest(Schema):
    """Request to create a checkout session for a student's modality."""

    student_id: int
    modality_id: int
    success_url: str | None = None
    cancel_url: str | None = None


class StudentCheckoutResponse(Schema):
    """Response with Checkout session URL."""

    checkout_url: str
