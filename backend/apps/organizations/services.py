"""
Organization services - tenant lifecycle jobs.
"""

from datetime import datetime

from django.utils import timezone

from apps.core.logging import get_logger
from apps.organizations.models import Organization

logger = get_logger(__name__)


def expire_trials(now: datetime | None = None) -> int:
    """
    Move organizations whose trial has ended to ``overdue``.

    Returns the number of organizations updated.
    """
    now = now or timezone.now()
    expired = Organization.objects.filter(
        subscription_status=Organization.SubscriptionStatus.TRIAL,
        trial_expires_at__lt=now,
    )
    updated = expired.update(
        subscription_status=Organization.SubscriptionStatus.OVERDUE,
        updated_at=now,
    )
    logger.info("organization_trials_expired", count=updated)
    return updated
