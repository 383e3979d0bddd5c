"""
Idempotency for inbound provider events.

Providers redeliver an event until they get a 2xx, so the same event id can
arrive more than once, sometimes concurrently.
"""

from django.db import IntegrityError, transaction

from apps.core.logging import get_logger
from apps.core.models import ProcessedWebhook

logger = get_logger(__name__)


def mark_webhook_processed(source: str, event_id: str) -> bool:
    """
    Claim an event for processing.

    Inserts the (source, event_id) row and lets the unique constraint decide
    which delivery wins.

    Returns:
        True if this call claimed the event, False if it was already claimed
    """
    try:
        with transaction.atomic():
            ProcessedWebhook.objects.create(source=source, event_id=event_id)
    except IntegrityError:
        logger.info("webhook_already_processed", source=source, event_id=event_id)
        return False
    return True
