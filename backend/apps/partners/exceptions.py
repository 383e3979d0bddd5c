"""
Exceptions for partner check-in integration.
"""


class PartnerWebhookError(Exception):
    """Base exception for partner webhook processing."""

    pass


class UnknownPartner(PartnerWebhookError):
    """Request could not be attributed to Gympass or TotalPass."""

    pass


class SignatureInvalid(PartnerWebhookError):
    """Webhook signature missing or not matching the shared secret."""

    pass


class PartnerSecretNotConfigured(PartnerWebhookError):
    """No shared secret configured for the partner."""

    pass


class InvalidPartnerPayload(PartnerWebhookError):
    """Payload is not JSON, has an unsupported event type or lacks identifiers."""

    pass


class OrganizationNotFound(PartnerWebhookError):
    """No organization matches the partner's gym identifier."""

    def __init__(self, partner: str, gym_identifier: object):
        super().__init__(f"No organization for {partner} code {gym_identifier!r}")
        self.partner = partner
        self.gym_identifier = gym_identifier
