"""
Partner identifiers and the columns each partner maps onto.
"""

from enum import StrEnum


class Partner(StrEnum):
    """Fitness-benefit aggregators that send check-in webhooks."""

    GYMPASS = "Gympass"
    TOTALPASS = "TotalPass"

    @property
    def integration_code_field(self) -> str:
        """Organization column holding the partner's gym identifier."""
        return f"{self.name.lower()}_integration_code"

    @property
    def token_field(self) -> str:
        """Student column holding the partner's opaque user token."""
        return f"{self.name.lower()}_user_token"

    @property
    def placeholder_marker(self) -> str:
        """Text embedded in names synthesized for students without a name."""
        return f"{self.value} Beneficiário"


# Request headers
GYMPASS_SIGNATURE_HEADER = "X-Gympass-Signature"
PARTNER_PLATFORM_HEADER = "X-Partner-Platform"

# Gympass event types that represent a check-in
GYMPASS_CHECKIN_EVENTS = frozenset({"check-in", "check-in-booking-occurred"})
