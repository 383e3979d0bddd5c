"""
Exceptions for billing operations.
"""


class BillingError(Exception):
    """Base exception for billing errors."""

    pass


class PayoutAccountNotActive(BillingError):
    """The organization's Stripe connected account is missing or not enabled."""

    def __init__(self, status: str = ""):
        detail = f" ({status})" if status else ""
        super().__init__(
            f"A conta Stripe desta organização não está ativa{detail}. "
            "Finalize o cadastro em Configurações > Integrações."
        )
        self.status = status


class PriceNotFound(BillingError):
    """The Stripe price has no unit amount to charge."""

    pass
