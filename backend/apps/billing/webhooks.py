"""
Stripe webhook handler.

Handles Connect account updates and completed checkouts on connected
accounts. This is a separate view (not Django Ninja) for raw request
handling needed to verify Stripe signatures.
"""

import stripe
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.billing.renewals import handle_checkout_completed
from apps.billing.services import handle_account_updated
from apps.billing.stripe_client import get_stripe
from apps.core.logging import get_logger
from apps.core.webhooks import mark_webhook_processed
from config.settings.base import settings

logger = get_logger(__name__)

WEBHOOK_SOURCE = "stripe"


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Stripe webhook events.

    Verifies signature and dispatches to appropriate handler. Once the
    signature is valid the event is always acknowledged: the payment already
    happened, and failed local bookkeeping is logged for manual follow-up.
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature")

    if not sig_header:
        logger.warning("stripe_webhook_missing_signature")
        return HttpResponse(status=400)

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("stripe_webhook_secret_not_configured")
        return HttpResponse(status=500)

    # Verify signature
    get_stripe()
    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except ValueError as e:
        logger.warning("stripe_webhook_invalid_payload", error=str(e))
        return HttpResponse(status=400)
    except stripe.SignatureVerificationError as e:
        logger.warning("stripe_webhook_invalid_signature", error=str(e))
        return HttpResponse(status=400)

    event_type = event["type"]
    logger.info(
        "stripe_webhook_received",
        event_type=event_type,
        event_id=event["id"],
        stripe_account_id=event.get("account"),
    )

    try:
        claimed = mark_webhook_processed(WEBHOOK_SOURCE, event["id"])
    except DatabaseError:
        logger.exception("stripe_webhook_claim_failed", event_type=event_type, event_id=event["id"])
        return HttpResponse(status=200)
    if not claimed:
        return HttpResponse(status=200)

    try:
        match event_type:
            case "account.updated":
                handle_account_updated(event["data"]["object"])

            case "checkout.session.completed" | "checkout.session.async_payment_succeeded":
                outcome = handle_checkout_completed(event["data"]["object"])
                logger.info(
                    "stripe_checkout_reconciled",
                    event_id=event["id"],
                    renewal_status=outcome.status.value,
                )

            case _:
                logger.debug("stripe_webhook_unhandled_event", event_type=event_type)

    except Exception:
        logger.exception("stripe_webhook_handler_error", event_type=event_type, event_id=event["id"])

    return HttpResponse(status=200)
