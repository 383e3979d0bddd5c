"""
Partner check-in services.

Flow for one webhook delivery:
    detect partner -> verify signature -> parse payload
    -> resolve organization -> resolve/create student -> record check-in

Nothing is written before the signature and the organization are checked.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from apps.core.logging import get_logger
from apps.organizations.models import Organization
from apps.partners.config import PartnerConfig
from apps.partners.constants import (
    GYMPASS_CHECKIN_EVENTS,
    GYMPASS_SIGNATURE_HEADER,
    PARTNER_PLATFORM_HEADER,
    Partner,
)
from apps.partners.exceptions import (
    InvalidPartnerPayload,
    OrganizationNotFound,
    SignatureInvalid,
    UnknownPartner,
)
from apps.partners.signing import verify_gympass_signature, verify_totalpass_signature
from apps.students.models import Student
from apps.students.services import CheckInResult, record_check_in

logger = get_logger(__name__)

# Characters of the partner token embedded in a placeholder name
PLACEHOLDER_TOKEN_CHARS = 4


@dataclass(frozen=True)
class PartnerCheckIn:
    """Partner-agnostic view of a check-in webhook payload."""

    partner: Partner
    gym_identifier: Any
    user_token: str
    name: str = ""
    email: str = ""


@dataclass
class PartnerCheckInOutcome:
    """What happened for one partner webhook."""

    partner: Partner
    organization: Organization
    student: Student
    student_created: bool
    check_in: CheckInResult

    @property
    def message(self) -> str:
        return f"Check-in {self.partner.value} processado para {self.student.name}."


def detect_partner(headers: Mapping[str, str]) -> Partner:
    """
    Work out which partner sent the request.

    The explicit X-Partner-Platform header wins; otherwise a Gympass
    signature header identifies Gympass.

    Raises:
        UnknownPartner: If neither header identifies a partner
    """
    platform = headers.get(PARTNER_PLATFORM_HEADER)
    if platform == Partner.GYMPASS or headers.get(GYMPASS_SIGNATURE_HEADER):
        return Partner.GYMPASS
    if platform == Partner.TOTALPASS:
        return Partner.TOTALPASS
    raise UnknownPartner("Could not determine partner from request headers")


def verify_partner_signature(
    partner: Partner,
    config: PartnerConfig,
    body: bytes,
    headers: Mapping[str, str],
) -> None:
    """
    Check the webhook signature for ``partner``.

    Raises:
        PartnerSecretNotConfigured: If the partner secret is missing
        SignatureInvalid: If the signature does not match
    """
    secret = config.secret_for(partner)
    if partner is Partner.GYMPASS:
        valid = verify_gympass_signature(secret, body, headers.get(GYMPASS_SIGNATURE_HEADER))
    else:
        valid = verify_totalpass_signature(secret, body, None)

    if not valid:
        raise SignatureInvalid(f"Invalid {partner.value} signature")


def parse_partner_payload(partner: Partner, body: bytes) -> PartnerCheckIn:
    """
    Decode the webhook body into a PartnerCheckIn.

    Raises:
        InvalidPartnerPayload: On malformed JSON, unsupported event or missing ids
    """
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidPartnerPayload(f"Body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidPartnerPayload("Body must be a JSON object")

    if partner is Partner.GYMPASS:
        return _parse_gympass_payload(payload)
    return _parse_totalpass_payload(payload)


def _parse_gympass_payload(payload: dict) -> PartnerCheckIn:
    event_type = payload.get("event_type")
    event_data = payload.get("event_data") or {}
    user = event_data.get("user") or {}
    gym = event_data.get("gym") or {}

    if event_type not in GYMPASS_CHECKIN_EVENTS:
        raise InvalidPartnerPayload(f"Unsupported Gympass event type {event_type!r}")
    if not user.get("unique_token") or gym.get("id") in (None, ""):
        raise InvalidPartnerPayload("Gympass payload lacks user.unique_token or gym.id")

    return PartnerCheckIn(
        partner=Partner.GYMPASS,
        gym_identifier=gym["id"],
        user_token=str(user["unique_token"]),
        name=(user.get("name") or "").strip(),
        email=(user.get("email") or "").strip(),
    )


def _parse_totalpass_payload(payload: dict) -> PartnerCheckIn:
    user = payload.get("user") or {}
    token = payload.get("token")
    integration_code = payload.get("integrationCode")

    if not token or not integration_code:
        raise InvalidPartnerPayload("TotalPass payload lacks token or integrationCode")

    return PartnerCheckIn(
        partner=Partner.TOTALPASS,
        gym_identifier=integration_code,
        user_token=str(token),
        name=(user.get("name") or "").strip(),
        email=(user.get("email") or "").strip(),
    )


def resolve_organization(partner: Partner, gym_identifier: Any) -> Organization:
    """
    Find the organization registered under the partner's gym identifier.

    Gympass identifiers are integers or digit strings; anything else
    (booleans, floats, other text) cannot match.

    Raises:
        OrganizationNotFound: If no organization carries the code
    """
    code: Any = gym_identifier
    if partner is Partner.GYMPASS:
        # bool is an int subclass
        if isinstance(gym_identifier, int) and not isinstance(gym_identifier, bool):
            code = gym_identifier
        elif isinstance(gym_identifier, str) and gym_identifier.strip().isdecimal():
            code = int(gym_identifier.strip())
        else:
            raise OrganizationNotFound(partner.value, gym_identifier)
    else:
        code = str(gym_identifier)

    try:
        return Organization.objects.get(**{partner.integration_code_field: code})
    except Organization.DoesNotExist:
        raise OrganizationNotFound(partner.value, gym_identifier) from None


def placeholder_name(partner: Partner, user_token: str) -> str:
    """Name given to a partner student whose payload carried none."""
    return f"{partner.placeholder_marker} {user_token[:PLACEHOLDER_TOKEN_CHARS]}"


def is_placeholder_name(partner: Partner, name: str) -> bool:
    """
    Whether ``name`` looks like a synthesized placeholder.

    Substring match, so it also recognizes placeholders stored before
    Student.is_synthetic_name existed.
    """
    return partner.placeholder_marker in name


def resolve_student(
    partner: Partner,
    organization: Organization,
    user_token: str,
    name: str = "",
    email: str = "",
) -> tuple[Student, bool]:
    """
    Find or create the student behind a partner token.

    Existing students only take the partner's name when it is a real,
    different name, so names typed in by staff are never replaced by
    placeholders. Email is taken whenever it is present and different.

    Returns:
        (student, created)
    """
    token_field = partner.token_field
    student = Student.objects.filter(
        organization=organization,
        **{token_field: user_token},
    ).first()

    if student is None:
        student = Student.objects.create(
            organization=organization,
            name=name or placeholder_name(partner, user_token),
            is_synthetic_name=not name or is_placeholder_name(partner, name),
            email=email,
            **{token_field: user_token},
        )
        logger.info(
            "partner_student_created",
            partner=partner.value,
            student_id=student.id,
            synthetic_name=student.is_synthetic_name,
        )
        return student, True

    update_fields: list[str] = []
    if name and name != student.name and not is_placeholder_name(partner, name):
        student.name = name
        student.is_synthetic_name = False
        update_fields += ["name", "is_synthetic_name"]
    if email and email != student.email:
        student.email = email
        update_fields.append("email")

    if update_fields:
        student.save(update_fields=[*update_fields, "updated_at"])
        logger.info(
            "partner_student_updated",
            partner=partner.value,
            student_id=student.id,
            fields=update_fields,
        )
    else:
        logger.debug("partner_student_unchanged", partner=partner.value, student_id=student.id)

    return student, False


def process_partner_checkin(
    body: bytes,
    headers: Mapping[str, str],
    config: PartnerConfig,
) -> PartnerCheckInOutcome:
    """
    Handle one partner check-in webhook end to end.

    Raises:
        UnknownPartner, PartnerSecretNotConfigured, SignatureInvalid,
        InvalidPartnerPayload, OrganizationNotFound
    """
    partner = detect_partner(headers)
    verify_partner_signature(partner, config, body, headers)
    checkin = parse_partner_payload(partner, body)

    organization = resolve_organization(partner, checkin.gym_identifier)
    student, created = resolve_student(
        partner,
        organization,
        checkin.user_token,
        name=checkin.name,
        email=checkin.email,
    )
    result = record_check_in(student, organization, source=partner.value)

    return PartnerCheckInOutcome(
        partner=partner,
        organization=organization,
        student=student,
        student_created=created,
        check_in=result,
    )
