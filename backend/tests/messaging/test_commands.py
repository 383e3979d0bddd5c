"""
Tests for the send_expiry_reminders management command.
"""

from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import CommandError, call_command

from apps.messaging.exceptions import MessagingNotConfigured
from apps.messaging.services import ReminderSummary


class TestSendExpiryRemindersCommand:
    @patch("apps.messaging.management.commands.send_expiry_reminders.send_expiry_reminders")
    def test_prints_summary(self, mock_send) -> None:
        mock_send.return_value = ReminderSummary(sent=3, failed=1, skipped=2)
        out = StringIO()

        call_command("send_expiry_reminders", stdout=out)

        assert "3 reminders sent, 1 failed, 2 skipped" in out.getvalue()

    @patch(
        "apps.messaging.management.commands.send_expiry_reminders.send_expiry_reminders",
        side_effect=MessagingNotConfigured("Twilio environment variables are not configured"),
    )
    def test_unconfigured_fails(self, mock_send) -> None:
        with pytest.raises(CommandError, match="not configured"):
            call_command("send_expiry_reminders")
