"""
Test settings.

SQLite in-memory database and fixed secrets so the suite runs without
external services.
"""

from .base import *  # noqa: F403
from .base import settings

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOG_JSON = False
LOG_LEVEL = "WARNING"

settings.AUTH_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes"
settings.STRIPE_SECRET_KEY = "sk_test_123"
settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
settings.GYMPASS_WEBHOOK_SECRET = "gympass-test-secret"
settings.TOTALPASS_WEBHOOK_SECRET = "totalpass-test-secret"
settings.TWILIO_ACCOUNT_SID = "AC_test_sid"
settings.TWILIO_AUTH_TOKEN = "twilio-test-token"
settings.TWILIO_WHATSAPP_FROM = "+5511999990000"
