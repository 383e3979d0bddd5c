"""
Local development settings.

Extends base settings with development-friendly defaults.
"""

from .base import *  # noqa: F403
from .base import settings  # noqa: F401

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Pretty console output instead of JSON
LOG_JSON = False
LOG_LEVEL = "DEBUG"
