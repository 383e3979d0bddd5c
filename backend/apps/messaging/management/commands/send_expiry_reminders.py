"""
Management command to send WhatsApp reminders for expiring enrollments.

Run daily via cron or scheduled task.
Example: ./manage.py send_expiry_reminders
"""

from django.core.management.base import BaseCommand, CommandError

from apps.messaging.config import TwilioConfig
from apps.messaging.exceptions import MessagingNotConfigured
from apps.messaging.services import send_expiry_reminders


class Command(BaseCommand):
    help = "Send WhatsApp reminders for enrollments expiring in 10, 6, 3 and 1 days"

    def handle(self, *args, **options):
        try:
            summary = send_expiry_reminders(TwilioConfig.from_settings())
        except MessagingNotConfigured as e:
            raise CommandError(str(e)) from e

        self.stdout.write(
            self.style.SUCCESS(
                f"{summary.sent} reminders sent, {summary.failed} failed, {summary.skipped} skipped"
            )
        )
