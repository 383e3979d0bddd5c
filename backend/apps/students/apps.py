"""Students app configuration."""

from django.apps import AppConfig


class StudentsConfig(AppConfig):
    """Configuration for students app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.students"
