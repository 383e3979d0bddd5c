"""
Membership renewal on completed payments.

When Stripe reports a completed checkout, the student's enrollment in the
purchased modality is pushed forward by the purchased interval. The money
has already moved by then, so nothing here may make the webhook fail:
a missing enrollment or a database error ends as a logged, missed renewal
that staff can fix by hand.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from django.db import DatabaseError
from django.utils import timezone

from apps.billing.models import Product
from apps.core.logging import get_logger
from apps.students.models import Enrollment, Modality, RecurringInterval

logger = get_logger(__name__)

# Renewal length for one-time purchases
DEFAULT_RENEWAL_DAYS = 30

# Checkout payment states in which the money is already with the processor
SETTLED_PAYMENT_STATUSES = ("paid", "no_payment_required")


class RenewalStatus(StrEnum):
    RENEWED = "renewed"
    TARGET_NOT_FOUND = "target_not_found"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RenewalOutcome:
    """Result of one renewal attempt."""

    status: RenewalStatus
    enrollment_id: int | None = None
    previous_expiry: date | None = None
    new_expiry: date | None = None


def add_months(base: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)


def add_interval(base: date, interval: str | None) -> date:
    """
    Advance ``base`` by one billing interval.

    week: +7 days, month: +1 calendar month, year: +1 calendar year,
    anything else (one-time purchase): +30 days.
    """
    if interval == RecurringInterval.WEEK:
        return base + timedelta(days=7)
    if interval == RecurringInterval.MONTH:
        return add_months(base, 1)
    if interval == RecurringInterval.YEAR:
        return add_months(base, 12)
    return base + timedelta(days=DEFAULT_RENEWAL_DAYS)


def compute_renewal_base(current_expiry: date, today: date) -> date:
    """
    Date the new period starts from.

    A still-valid membership keeps its remaining days; an expired one
    restarts today instead of backfilling the gap.
    """
    return current_expiry if current_expiry > today else today


def compute_new_expiry(current_expiry: date, today: date, interval: str | None) -> date:
    """New expiry date: max(current expiry, today) plus one interval."""
    return add_interval(compute_renewal_base(current_expiry, today), interval)


def _parse_id(value: object) -> int | None:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def resolve_renewal_target(metadata: dict) -> tuple[int | None, Product | None]:
    """
    Find the modality a payment renews.

    ``modality_id`` in the metadata wins; otherwise the purchased product's
    modality is used.

    Returns:
        (modality_id or None, product or None)
    """
    product = None
    product_id = _parse_id(metadata.get("product_id"))
    if product_id is not None:
        product = Product.objects.filter(id=product_id).first()

    modality_id = _parse_id(metadata.get("modality_id"))
    if modality_id is None and product is not None:
        modality_id = product.modality_id
    return modality_id, product


def resolve_renewal_interval(
    metadata: dict,
    product: Product | None = None,
    modality_id: int | None = None,
) -> str | None:
    """
    Interval purchased: explicit metadata, else the product, else the modality.

    None means a one-time purchase.
    """
    interval = metadata.get("recurring_interval")
    if interval in RecurringInterval.values:
        return interval
    if product is not None and product.recurring_interval:
        return product.recurring_interval
    if modality_id is not None:
        return (
            Modality.objects.filter(id=modality_id)
            .values_list("recurring_interval", flat=True)
            .first()
        )
    return None


def renew_enrollment(
    student_id: int,
    modality_id: int,
    interval: str | None,
    today: date | None = None,
) -> RenewalOutcome:
    """
    Extend the student's most recent enrollment in the modality.

    Only that single row is updated; a student without an enrollment for
    the modality is logged and left alone.
    """
    today = today or timezone.localdate()
    enrollment = (
        Enrollment.objects.filter(student_id=student_id, modality_id=modality_id)
        .order_by("-expiry_date", "-id")
        .first()
    )
    if enrollment is None:
        logger.warning(
            "renewal_target_not_found",
            student_id=student_id,
            modality_id=modality_id,
        )
        return RenewalOutcome(status=RenewalStatus.TARGET_NOT_FOUND)

    previous_expiry = enrollment.expiry_date
    enrollment.expiry_date = compute_new_expiry(previous_expiry, today, interval)
    enrollment.save(update_fields=["expiry_date", "updated_at"])

    logger.info(
        "enrollment_renewed",
        enrollment_id=enrollment.id,
        student_id=student_id,
        modality_id=modality_id,
        interval=interval or "one_time",
        previous_expiry=previous_expiry.isoformat(),
        new_expiry=enrollment.expiry_date.isoformat(),
    )
    return RenewalOutcome(
        status=RenewalStatus.RENEWED,
        enrollment_id=enrollment.id,
        previous_expiry=previous_expiry,
        new_expiry=enrollment.expiry_date,
    )


def handle_checkout_completed(session: dict, today: date | None = None) -> RenewalOutcome:
    """
    Handle a checkout.session.completed or async_payment_succeeded event.

    Sessions still awaiting payment (boleto before it is paid) are skipped;
    their async_payment_succeeded event renews later.

    Never raises for database problems: they are logged and reported as
    FAILED so the webhook still acknowledges the event.
    """
    payment_status = session.get("payment_status")
    if payment_status not in SETTLED_PAYMENT_STATUSES:
        logger.info(
            "checkout_payment_not_settled",
            session_id=session.get("id"),
            payment_status=payment_status,
        )
        return RenewalOutcome(status=RenewalStatus.SKIPPED)

    metadata = dict(session.get("metadata") or {})
    student_id = _parse_id(metadata.get("student_id"))

    if student_id is None:
        logger.info(
            "checkout_completed_without_student",
            session_id=session.get("id"),
            student_id=metadata.get("student_id"),
        )
        return RenewalOutcome(status=RenewalStatus.SKIPPED)

    try:
        modality_id, product = resolve_renewal_target(metadata)
        if modality_id is None:
            logger.warning(
                "checkout_completed_without_renewable_item",
                session_id=session.get("id"),
                student_id=student_id,
            )
            return RenewalOutcome(status=RenewalStatus.TARGET_NOT_FOUND)

        interval = resolve_renewal_interval(metadata, product=product, modality_id=modality_id)
        return renew_enrollment(student_id, modality_id, interval, today=today)
    except DatabaseError:
        logger.exception(
            "renewal_failed",
            session_id=session.get("id"),
            student_id=student_id,
        )
        return RenewalOutcome(status=RenewalStatus.FAILED)
