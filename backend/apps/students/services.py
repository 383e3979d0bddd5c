"""
Students services - attendance recording and membership status.
"""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.logging import get_logger
from apps.organizations.models import Organization
from apps.students.models import CheckIn, Student

logger = get_logger(__name__)

# Enrollments expiring within this many days are flagged for a reminder
EXPIRING_SOON_DAYS = 10


@dataclass
class CheckInResult:
    """Outcome of a check-in attempt."""

    created: bool
    check_in: CheckIn | None = None

    @property
    def is_duplicate(self) -> bool:
        return not self.created


def record_check_in(student: Student, organization: Organization, source: str) -> CheckInResult:
    """
    Insert one check-in for the student, stamped now.

    No pre-check is made: concurrent deliveries are resolved by the
    (student, organization, day) unique constraint, and a violation is
    reported as a duplicate instead of an error. Any other database error
    propagates.
    """
    try:
        with transaction.atomic():
            check_in = CheckIn.objects.create(
                student=student,
                organization=organization,
                source=source,
            )
    except IntegrityError:
        logger.warning(
            "checkin_duplicate_ignored",
            student_id=student.id,
            organization_id=organization.id,
            source=source,
        )
        return CheckInResult(created=False)

    logger.info(
        "checkin_recorded",
        student_id=student.id,
        organization_id=organization.id,
        source=source,
    )
    return CheckInResult(created=True, check_in=check_in)


class EnrollmentState(StrEnum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    EXPIRING = "expiring"
    OK = "ok"


@dataclass(frozen=True)
class EnrollmentStatus:
    """Display status of an enrollment relative to today."""

    state: EnrollmentState
    label: str
    days: int
    should_notify: bool


def get_enrollment_status(expiry_date: date, today: date | None = None) -> EnrollmentStatus:
    """
    Classify an enrollment by the days between today and its expiry date.

    ``days`` is always non-negative: days overdue for past dates, days left
    otherwise.
    """
    today = today or timezone.localdate()
    diff_days = (expiry_date - today).days

    if diff_days < 0:
        return EnrollmentStatus(EnrollmentState.OVERDUE, "Vencida", abs(diff_days), True)
    if diff_days == 0:
        return EnrollmentStatus(EnrollmentState.DUE_TODAY, "Vence Hoje", 0, True)
    if diff_days <= EXPIRING_SOON_DAYS:
        return EnrollmentStatus(EnrollmentState.EXPIRING, f"{diff_days} dias", diff_days, True)
    return EnrollmentStatus(EnrollmentState.OK, "Em dia", diff_days, False)
