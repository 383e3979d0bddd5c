"""
Billing services - Stripe Connect integration logic.

All Stripe API calls are isolated here for testability.
External calls must NOT be inside database transactions.
Every call touching a tenant's catalog or money carries
``stripe_account=<connected account id>``.
"""

from decimal import Decimal

import stripe

from apps.billing.exceptions import PayoutAccountNotActive, PriceNotFound
from apps.billing.fees import build_fee_split, calculate_application_fee, to_minor_units
from apps.billing.models import Product
from apps.billing.stripe_client import STRIPE_CURRENCY, get_stripe
from apps.core.logging import get_logger
from apps.organizations.models import Organization
from apps.students.models import Modality, Student
from config.settings.base import settings

logger = get_logger(__name__)

# Metadata value for payment links not tied to a student
STANDALONE_SALE = "venda_avulsa"

STUDENT_CHECKOUT_PAYMENT_METHODS = ["card", "pix", "boleto"]


def ensure_payout_account(org: Organization) -> str:
    """
    Return the organization's connected account id.

    Raises:
        PayoutAccountNotActive: If the account is missing or not enabled
    """
    if not org.has_active_payout_account:
        raise PayoutAccountNotActive(org.stripe_account_status)
    return org.stripe_account_id


def _stripe_interval(recurring_interval: str | None) -> str | None:
    if not recurring_interval or recurring_interval == "one_time":
        return None
    return recurring_interval


# --- Connect onboarding ---


def create_connect_account(
    org: Organization,
    email: str,
    return_url: str | None = None,
    refresh_url: str | None = None,
) -> str:
    """
    Create a Standard connected account for the organization.

    Reuses an existing account id so a repeated call only issues a fresh
    onboarding link.

    Returns:
        Onboarding URL to redirect the gym owner to
    """
    client = get_stripe()

    if not org.stripe_account_id:
        account = client.Account.create(
            type="standard",
            country="BR",
            email=email or None,
            metadata={"organization_id": str(org.id)},
        )
        org.stripe_account_id = account.id
        org.stripe_account_status = Organization.StripeAccountStatus.PENDING
        org.save(update_fields=["stripe_account_id", "stripe_account_status", "updated_at"])
        logger.info(
            "stripe_connect_account_created",
            stripe_account_id=account.id,
            **{"organization.id": str(org.id)},
        )

    link = client.AccountLink.create(
        account=org.stripe_account_id,
        refresh_url=refresh_url or settings.STRIPE_CONNECT_REFRESH_URL,
        return_url=return_url or settings.STRIPE_CONNECT_RETURN_URL,
        type="account_onboarding",
    )
    return link.url


def account_status_from_stripe(account: dict) -> str:
    """Map a Stripe account object to the local payout status."""
    if account.get("charges_enabled"):
        return Organization.StripeAccountStatus.ENABLED
    if account.get("details_submitted"):
        return Organization.StripeAccountStatus.PENDING
    return Organization.StripeAccountStatus.RESTRICTED


def handle_account_updated(account: dict) -> int:
    """
    Sync the payout status of every organization using this account.

    Returns:
        Number of organizations updated
    """
    account_id = account.get("id")
    if not account_id:
        logger.warning("stripe_account_updated_without_id")
        return 0

    status = account_status_from_stripe(account)
    updated = Organization.objects.filter(stripe_account_id=account_id).update(
        stripe_account_status=status
    )
    if not updated:
        logger.warning("stripe_account_updated_unknown_account", stripe_account_id=account_id)
    else:
        logger.info(
            "stripe_account_status_synced",
            stripe_account_id=account_id,
            status=status,
            organizations=updated,
        )
    return updated


# --- Payment links ---


def create_payment_link(
    org: Organization,
    stripe_price_id: str,
    recurring: bool,
    student_id: int | None = None,
) -> str:
    """
    Create a payment link on the organization's connected account.

    The platform fee is attached as a fixed amount for one-time prices and
    as a percentage for subscriptions.

    Raises:
        PayoutAccountNotActive: Before any Stripe call, if payouts are not enabled
        PriceNotFound: If the price has no unit amount
        stripe.StripeError: On Stripe failures

    Returns:
        The payment link URL
    """
    account_id = ensure_payout_account(org)
    client = get_stripe()

    price = client.Price.retrieve(stripe_price_id, stripe_account=account_id)
    unit_amount = price.get("unit_amount")
    if unit_amount is None:
        raise PriceNotFound(f"Price {stripe_price_id} has no unit amount")

    fee_split = build_fee_split(unit_amount, recurring)
    metadata = _payment_link_metadata(org, stripe_price_id, student_id)

    link = client.PaymentLink.create(
        line_items=[{"price": stripe_price_id, "quantity": 1}],
        metadata=metadata,
        stripe_account=account_id,
        **fee_split.as_payment_link_params(),
    )

    logger.info(
        "payment_link_created",
        payment_link_id=link.id,
        stripe_price_id=stripe_price_id,
        recurring=recurring,
        student_id=student_id,
        **{"organization.id": str(org.id)},
    )
    return link.url


def _payment_link_metadata(
    org: Organization,
    stripe_price_id: str,
    student_id: int | None,
) -> dict[str, str]:
    """
    Metadata copied by Stripe onto the resulting checkout session.

    Carries what the renewal webhook needs to find the enrollment.
    """
    metadata = {
        "student_id": str(student_id) if student_id else STANDALONE_SALE,
        "organization_id": str(org.id),
    }
    product = (
        Product.objects.filter(organization=org, stripe_price_id=stripe_price_id)
        .select_related("modality")
        .first()
    )
    if product is not None:
        metadata["product_id"] = str(product.id)
        if product.modality_id:
            metadata["modality_id"] = str(product.modality_id)
        interval = product.recurring_interval or (
            product.modality.recurring_interval if product.modality else None
        )
        if interval:
            metadata["recurring_interval"] = interval
    return metadata


# --- Product catalog ---


def create_product(
    org: Organization,
    name: str,
    price: Decimal,
    description: str = "",
    recurring_interval: str | None = None,
    product_type: str = Product.ProductType.SERVICE,
    quantity: int = 0,
    modality: Modality | None = None,
) -> Product:
    """
    Create a product and its price on the connected account, then store it.

    Raises:
        PayoutAccountNotActive: If payouts are not enabled
        stripe.StripeError: On Stripe failures (nothing is stored)
    """
    account_id = ensure_payout_account(org)
    client = get_stripe()
    interval = _stripe_interval(recurring_interval)

    stripe_product = client.Product.create(
        name=name,
        description=description or None,
        metadata={"organization_id": str(org.id), "type": product_type},
        stripe_account=account_id,
    )

    price_params: dict = {
        "product": stripe_product.id,
        "unit_amount": to_minor_units(price),
        "currency": STRIPE_CURRENCY,
        "stripe_account": account_id,
    }
    if interval:
        price_params["recurring"] = {"interval": interval}
    stripe_price = client.Price.create(**price_params)

    product = Product.objects.create(
        organization=org,
        name=name,
        description=description,
        product_type=product_type,
        price=price,
        recurring_interval=interval,
        quantity=quantity,
        modality=modality,
        stripe_product_id=stripe_product.id,
        stripe_price_id=stripe_price.id,
    )
    logger.info(
        "product_created",
        product_id=product.id,
        stripe_product_id=stripe_product.id,
        stripe_price_id=stripe_price.id,
        **{"organization.id": str(org.id)},
    )
    return product


def update_product(product: Product, name: str | None = None, description: str | None = None) -> Product:
    """Rename or re-describe a product locally and on Stripe."""
    org = product.organization
    client = get_stripe()

    changes: dict = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    if not changes:
        return product

    if product.stripe_product_id:
        client.Product.modify(
            product.stripe_product_id,
            stripe_account=org.stripe_account_id,
            **changes,
        )

    for field, value in changes.items():
        setattr(product, field, value)
    product.save(update_fields=[*changes, "updated_at"])
    logger.info("product_updated", product_id=product.id, fields=list(changes))
    return product


def _is_resource_missing(error: stripe.InvalidRequestError) -> bool:
    return getattr(error, "code", None) == "resource_missing"


def archive_product(product: Product) -> Product:
    """
    Deactivate the product's price, then the product, and flag it archived.

    Objects already gone from Stripe count as archived.
    """
    org = product.organization
    client = get_stripe()

    if product.stripe_price_id:
        try:
            client.Price.modify(
                product.stripe_price_id,
                active=False,
                stripe_account=org.stripe_account_id,
            )
        except stripe.InvalidRequestError as e:
            if not _is_resource_missing(e):
                raise
            logger.info("stripe_price_already_gone", stripe_price_id=product.stripe_price_id)

    if product.stripe_product_id:
        try:
            client.Product.modify(
                product.stripe_product_id,
                active=False,
                stripe_account=org.stripe_account_id,
            )
        except stripe.InvalidRequestError as e:
            if not _is_resource_missing(e):
                raise
            logger.info("stripe_product_already_gone", stripe_product_id=product.stripe_product_id)

    product.is_archived = True
    product.save(update_fields=["is_archived", "updated_at"])
    logger.info("product_archived", product_id=product.id)
    return product


# --- Student checkout ---


def create_student_checkout(
    student: Student,
    modality: Modality,
    success_url: str | None = None,
    cancel_url: str | None = None,
) -> str:
    """
    Create a one-time Checkout Session for a student's modality fee.

    Raises:
        PayoutAccountNotActive: If payouts are not enabled
        PriceNotFound: If the modality has no price
        stripe.StripeError: On Stripe failures

    Returns:
        Checkout session URL
    """
    org = student.organization
    account_id = ensure_payout_account(org)
    if modality.price is None:
        raise PriceNotFound(f"Modality {modality.id} has no price")
    client = get_stripe()

    unit_amount = to_minor_units(modality.price)
    session = client.checkout.Session.create(
        mode="payment",
        payment_method_types=STUDENT_CHECKOUT_PAYMENT_METHODS,
        line_items=[
            {
                "price_data": {
                    "currency": STRIPE_CURRENCY,
                    "unit_amount": unit_amount,
                    "product_data": {"name": modality.name},
                },
                "quantity": 1,
            }
        ],
        payment_intent_data={"application_fee_amount": calculate_application_fee(unit_amount)},
        metadata={
            "student_id": str(student.id),
            "modality_id": str(modality.id),
            "organization_id": str(org.id),
            "recurring_interval": modality.recurring_interval or "",
        },
        customer_email=student.email or None,
        success_url=success_url or settings.CHECKOUT_SUCCESS_URL,
        cancel_url=cancel_url or settings.CHECKOUT_CANCEL_URL,
        stripe_account=account_id,
    )
    logger.info(
        "student_checkout_created",
        session_id=session.id,
        student_id=student.id,
        modality_id=modality.id,
        **{"organization.id": str(org.id)},
    )
    return session.url
