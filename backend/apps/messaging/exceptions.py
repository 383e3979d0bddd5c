"""
Exceptions for outbound messaging.
"""


class MessagingError(Exception):
    """Raised when a WhatsApp message could not be delivered to Twilio."""

    pass


class MessagingNotConfigured(MessagingError):
    """Twilio credentials or sender are missing."""

    pass
