"""
Tests for the Twilio WhatsApp client.

httpx is mocked; no request leaves the process.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from apps.messaging.config import TwilioConfig
from apps.messaging.exceptions import MessagingError, MessagingNotConfigured
from apps.messaging.twilio_client import (
    TWILIO_API_BASE,
    send_whatsapp_message,
    strip_whatsapp_prefix,
    whatsapp_address,
)

CONFIG = TwilioConfig(account_sid="AC123", auth_token="token", whatsapp_from="+5511900000000")


@pytest.fixture
def mock_http():
    with patch("apps.messaging.twilio_client.httpx.Client") as mock_client_cls:
        client = MagicMock()
        mock_client_cls.return_value.__enter__.return_value = client
        yield client


class TestWhatsappAddress:
    def test_adds_prefix(self) -> None:
        assert whatsapp_address("+5511987654321") == "whatsapp:+5511987654321"

    def test_prefix_not_doubled(self) -> None:
        assert whatsapp_address("whatsapp:+5511987654321") == "whatsapp:+5511987654321"

    def test_strip_prefix(self) -> None:
        assert strip_whatsapp_prefix(" whatsapp:+5511987654321 ") == "+5511987654321"
        assert strip_whatsapp_prefix("+5511987654321") == "+5511987654321"


class TestSendWhatsappMessage:
    """Tests for send_whatsapp_message."""

    def test_posts_form_encoded_message(self, mock_http) -> None:
        mock_http.post.return_value = MagicMock(
            is_success=True, json=lambda: {"sid": "SM1", "status": "queued"}
        )

        sent = send_whatsapp_message(CONFIG, "+5511987654321", "Olá")

        assert sent.sid == "SM1"
        assert sent.status == "queued"
        mock_http.post.assert_called_once_with(
            f"{TWILIO_API_BASE}/Accounts/AC123/Messages.json",
            data={
                "To": "whatsapp:+5511987654321",
                "From": "whatsapp:+5511900000000",
                "Body": "Olá",
            },
            auth=("AC123", "token"),
        )

    def test_rejected_message_raises(self, mock_http) -> None:
        mock_http.post.return_value = MagicMock(is_success=False, status_code=400, text="invalid To")

        with pytest.raises(MessagingError, match="400"):
            send_whatsapp_message(CONFIG, "+5511987654321", "Olá")

    def test_transport_error_raises(self, mock_http) -> None:
        mock_http.post.side_effect = httpx.ConnectError("unreachable")

        with pytest.raises(MessagingError):
            send_whatsapp_message(CONFIG, "+5511987654321", "Olá")

    def test_unconfigured_raises_before_request(self, mock_http) -> None:
        with pytest.raises(MessagingNotConfigured):
            send_whatsapp_message(TwilioConfig(), "+5511987654321", "Olá")

        mock_http.post.assert_not_called()


class TestTwilioConfig:
    def test_from_settings_uses_test_credentials(self) -> None:
        config = TwilioConfig.from_settings()

        assert config.account_sid == "AC_test_sid"
        assert config.is_configured is True

    def test_partial_config_is_not_configured(self) -> None:
        assert TwilioConfig(account_sid="AC1", auth_token="t").is_configured is False
