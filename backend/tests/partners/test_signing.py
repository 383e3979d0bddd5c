"""
Tests for partner webhook signature verification.
"""

import hashlib
import hmac

import pytest

from apps.partners.signing import (
    compute_gympass_signature,
    constant_time_equals,
    verify_gympass_signature,
    verify_totalpass_signature,
)

SECRET = "gympass-test-secret"
BODY = b'{"event_type":"check-in","event_data":{"user":{"unique_token":"abc"},"gym":{"id":1}}}'


def sign(body: bytes = BODY, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha1).hexdigest().upper()


class TestComputeGympassSignature:
    """Tests for compute_gympass_signature."""

    def test_matches_hmac_sha1_upper_hex(self) -> None:
        assert compute_gympass_signature(SECRET, BODY) == sign()

    def test_is_forty_upper_case_hex_chars(self) -> None:
        signature = compute_gympass_signature(SECRET, BODY)

        assert len(signature) == 40
        assert signature == signature.upper()


class TestConstantTimeEquals:
    """Tests for constant_time_equals."""

    def test_equal_strings(self) -> None:
        assert constant_time_equals("ABC123", "ABC123") is True

    def test_different_strings_same_length(self) -> None:
        assert constant_time_equals("ABC123", "ABC124") is False

    def test_different_lengths(self) -> None:
        assert constant_time_equals("ABC", "ABCD") is False

    def test_empty_strings(self) -> None:
        assert constant_time_equals("", "") is True


class TestVerifyGympassSignature:
    """Tests for verify_gympass_signature."""

    def test_valid_signature(self) -> None:
        assert verify_gympass_signature(SECRET, BODY, sign()) is True

    def test_valid_signature_with_hex_prefix(self) -> None:
        assert verify_gympass_signature(SECRET, BODY, "0x" + sign()) is True

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header_rejected(self, header) -> None:
        assert verify_gympass_signature(SECRET, BODY, header) is False

    def test_wrong_secret_rejected(self) -> None:
        assert verify_gympass_signature(SECRET, BODY, sign(secret="other-secret")) is False

    def test_modified_body_rejected(self) -> None:
        """Should fail when a single byte of the body changes."""
        tampered = BODY.replace(b"abc", b"abd")

        assert verify_gympass_signature(SECRET, tampered, sign()) is False

    def test_truncated_signature_rejected(self) -> None:
        assert verify_gympass_signature(SECRET, BODY, sign()[:-1]) is False


class TestVerifyTotalpassSignature:
    """Tests for the TotalPass placeholder verifier."""

    def test_accepts_any_request(self) -> None:
        assert verify_totalpass_signature("secret", b"{}", None) is True
