"""
Twilio configuration.

Built once per invocation from settings and passed into the senders.
"""

from dataclasses import dataclass

from apps.messaging.exceptions import MessagingNotConfigured


@dataclass(frozen=True)
class TwilioConfig:
    """Credentials and WhatsApp sender number for the Twilio REST API."""

    account_sid: str = ""
    auth_token: str = ""
    whatsapp_from: str = ""

    @classmethod
    def from_settings(cls) -> "TwilioConfig":
        from config.settings.base import settings

        return cls(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            whatsapp_from=settings.TWILIO_WHATSAPP_FROM,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.whatsapp_from)

    def require_configured(self) -> "TwilioConfig":
        """
        Raises:
            MessagingNotConfigured: If any Twilio setting is empty
        """
        if not self.is_configured:
            raise MessagingNotConfigured("Twilio environment variables are not configured")
        return self
