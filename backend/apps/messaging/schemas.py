"""
Messaging API schemas.
"""

from ninja import Schema
from pydantic import Field


class NotifyRequest(Schema):
    """Free-form WhatsApp message to a phone number."""

    to: str = Field(..., min_length=8, max_length=32, description="E.164 phone number")
    message: str = Field(..., min_length=1, max_length=1600)


class NotifyResponse(Schema):
    success: bool
    message: str
