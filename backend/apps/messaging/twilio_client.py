"""
Twilio WhatsApp client.

Posts form-encoded messages to the Twilio REST API with basic auth.
"""

from dataclasses import dataclass

import httpx

from apps.core.logging import get_logger, mask_phone
from apps.messaging.config import TwilioConfig
from apps.messaging.exceptions import MessagingError

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"

# Request timeout in seconds
TWILIO_TIMEOUT = 15

WHATSAPP_PREFIX = "whatsapp:"


@dataclass
class SentMessage:
    """Twilio's acknowledgement of a queued message."""

    sid: str
    status: str


def whatsapp_address(phone_number: str) -> str:
    """Format a phone number as a Twilio WhatsApp address."""
    return f"{WHATSAPP_PREFIX}{strip_whatsapp_prefix(phone_number)}"


def strip_whatsapp_prefix(address: str) -> str:
    """Turn ``whatsapp:+55...`` back into ``+55...``."""
    address = address.strip()
    if address.startswith(WHATSAPP_PREFIX):
        return address[len(WHATSAPP_PREFIX) :]
    return address


def send_whatsapp_message(config: TwilioConfig, to: str, body: str) -> SentMessage:
    """
    Send a WhatsApp message through Twilio.

    Args:
        config: Twilio credentials and sender
        to: Recipient phone number in E.164 format
        body: Message text

    Raises:
        MessagingError: If Twilio is not configured, unreachable, or rejects the message
    """
    config.require_configured()
    url = f"{TWILIO_API_BASE}/Accounts/{config.account_sid}/Messages.json"
    data = {
        "To": whatsapp_address(to),
        "From": whatsapp_address(config.whatsapp_from),
        "Body": body,
    }

    try:
        with httpx.Client(timeout=TWILIO_TIMEOUT) as client:
            response = client.post(
                url,
                data=data,
                auth=(config.account_sid, config.auth_token),
            )
    except httpx.HTTPError as e:
        logger.error("whatsapp_send_transport_error", to=mask_phone(to), error=str(e))
        raise MessagingError(f"Twilio request failed: {e}") from e

    if not response.is_success:
        logger.error(
            "whatsapp_send_rejected",
            to=mask_phone(to),
            status_code=response.status_code,
            response=response.text[:500],
        )
        raise MessagingError(f"Twilio rejected the message ({response.status_code}): {response.text[:200]}")

    payload = response.json()
    logger.info("whatsapp_message_sent", to=mask_phone(to), message_sid=payload.get("sid"))
    return SentMessage(sid=payload.get("sid", ""), status=payload.get("status", ""))
