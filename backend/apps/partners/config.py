"""
Partner webhook configuration.

Built once per request from settings and passed into the handlers, so the
handlers never read process environment themselves.
"""

from dataclasses import dataclass

from apps.partners.constants import Partner
from apps.partners.exceptions import PartnerSecretNotConfigured


@dataclass(frozen=True)
class PartnerConfig:
    """Shared webhook secrets, one per partner (not per tenant)."""

    gympass_webhook_secret: str = ""
    totalpass_webhook_secret: str = ""

    @classmethod
    def from_settings(cls) -> "PartnerConfig":
        from config.settings.base import settings

        return cls(
            gympass_webhook_secret=settings.GYMPASS_WEBHOOK_SECRET,
            totalpass_webhook_secret=settings.TOTALPASS_WEBHOOK_SECRET,
        )

    def secret_for(self, partner: Partner) -> str:
        """
        Return the shared secret for ``partner``.

        Raises:
            PartnerSecretNotConfigured: If the secret is empty
        """
        secret = {
            Partner.GYMPASS: self.gympass_webhook_secret,
            Partner.TOTALPASS: self.totalpass_webhook_secret,
        }[partner]
        if not secret:
            raise PartnerSecretNotConfigured(f"{partner.name}_WEBHOOK_SECRET is not configured")
        return secret
