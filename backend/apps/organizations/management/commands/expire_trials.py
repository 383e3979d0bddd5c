"""
Management command to mark organizations with an ended trial as overdue.

Run daily via cron or scheduled task.
Example: ./manage.py expire_trials
"""

from django.core.management.base import BaseCommand

from apps.organizations.services import expire_trials


class Command(BaseCommand):
    help = "Set subscription_status to overdue for organizations whose trial has expired"

    def handle(self, *args, **options):
        updated = expire_trials()
        self.stdout.write(
            self.style.SUCCESS(f"{updated} organizations updated to 'overdue'")
        )
