"""Partners app configuration."""

from django.apps import AppConfig


class PartnersConfig(AppConfig):
    """Configuration for partner check-in integrations (Gympass/Wellhub, TotalPass)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.partners"
