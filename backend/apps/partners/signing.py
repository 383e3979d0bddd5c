"""
Partner webhook signature verification.

Gympass/Wellhub signs the raw request body with HMAC-SHA1 and sends the
upper-case hex digest in X-Gympass-Signature, optionally prefixed with "0x".
"""

import hashlib
import hmac

from apps.core.logging import get_logger

logger = get_logger(__name__)

HEX_PREFIX = "0x"


def compute_gympass_signature(secret: str, body: bytes) -> str:
    """Return the upper-case hex HMAC-SHA1 of ``body`` keyed with ``secret``."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest().upper()


def constant_time_equals(expected: str, received: str) -> bool:
    """
    Compare two strings without short-circuiting on the first difference.

    Strings of different length are rejected immediately; the length of a
    hex digest is public anyway.
    """
    if len(expected) != len(received):
        return False
    result = 0
    for a, b in zip(expected, received):
        result |= ord(a) ^ ord(b)
    return result == 0


def verify_gympass_signature(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Verify a Gympass webhook signature.

    Args:
        secret: Gympass shared webhook secret
        body: Raw request body, exactly as received
        signature_header: Value of X-Gympass-Signature, possibly "0x"-prefixed

    Returns:
        True if the header matches the body's HMAC
    """
    if not signature_header:
        logger.warning("gympass_signature_missing")
        return False

    received = signature_header
    if received.startswith(HEX_PREFIX):
        received = received[len(HEX_PREFIX):]

    return constant_time_equals(compute_gympass_signature(secret, body), received)


def verify_totalpass_signature(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Accept every TotalPass webhook.

    TotalPass has not documented a signing scheme, so nothing is verified
    here and no algorithm is assumed.
    """
    # TODO: implement once TotalPass publishes its webhook signature algorithm
    logger.warning("totalpass_signature_not_verified")
    return True
