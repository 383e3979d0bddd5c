"""
Platform fee calculations.

Two deliberately separate computations live here:

* ``calculate_application_fee`` / ``build_fee_split`` produce the values
  sent to Stripe when a payment link is created. They know nothing about
  Stripe's own processing cost.
* ``estimate_fees`` produces the approximate breakdown shown in the
  dashboard before a link is generated. The processor cost depends on the
  payment method the payer picks later, so the estimate assumes the most
  expensive one (card). It is never sent to Stripe.
"""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

# Platform commission on every sale
PLATFORM_FEE_RATE = Decimal("0.05")

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class FeeSplit:
    """Application-fee parameters for a Stripe payment link."""

    recurring: bool
    application_fee_amount: int | None = None
    application_fee_percent: float | None = None

    def as_payment_link_params(self) -> dict:
        """Keyword arguments to merge into ``PaymentLink.create``."""
        if self.recurring:
            return {"subscription_data": {"application_fee_percent": self.application_fee_percent}}
        return {"payment_intent_data": {"application_fee_amount": self.application_fee_amount}}


def calculate_application_fee(unit_amount: int) -> int:
    """
    Platform fee for a one-time charge, in minor units (centavos).

    Rounded down so the connected merchant is never overcharged.
    """
    fee = (Decimal(unit_amount) * PLATFORM_FEE_RATE).to_integral_value(rounding=ROUND_FLOOR)
    return int(fee)


def application_fee_percent() -> float:
    """Platform fee for subscriptions, as the percentage Stripe applies per invoice."""
    return float(PLATFORM_FEE_RATE * 100)


def build_fee_split(unit_amount: int, recurring: bool) -> FeeSplit:
    """
    Fee parameters for a payment link.

    One-time sales carry a fixed fee computed here; subscriptions carry a
    percentage that Stripe evaluates on each billing cycle.
    """
    if recurring:
        return FeeSplit(recurring=True, application_fee_percent=application_fee_percent())
    return FeeSplit(recurring=False, application_fee_amount=calculate_application_fee(unit_amount))


@dataclass(frozen=True)
class ProcessorFeeSchedule:
    """Stripe's cost for one payment method: percentage plus flat amount (BRL)."""

    method: str
    percent: Decimal
    fixed: Decimal

    def fee_for(self, price: Decimal) -> Decimal:
        return price * self.percent + self.fixed


CARD_FEES = ProcessorFeeSchedule("card", Decimal("0.0399"), Decimal("0.39"))
PIX_FEES = ProcessorFeeSchedule("pix", Decimal("0.0119"), Decimal("0"))
BOLETO_FEES = ProcessorFeeSchedule("boleto", Decimal("0"), Decimal("3.45"))

PROCESSOR_FEE_SCHEDULES = (CARD_FEES, PIX_FEES, BOLETO_FEES)

# Estimates assume the priciest method for typical ticket sizes
ESTIMATE_SCHEDULE = CARD_FEES


@dataclass(frozen=True)
class FeeEstimate:
    """Approximate breakdown of a sale, in BRL, for display only."""

    price: Decimal
    platform_fee: Decimal
    estimated_processor_fee: Decimal
    estimated_net: Decimal
    method: str


def estimate_fees(price: Decimal | int | str) -> FeeEstimate:
    """
    Estimate what the organization keeps from a sale of ``price`` BRL.

    Not used for the actual Stripe request; see ``build_fee_split``.
    """
    price = Decimal(str(price))
    platform_fee = price * PLATFORM_FEE_RATE
    processor_fee = ESTIMATE_SCHEDULE.fee_for(price)
    net = price - platform_fee - processor_fee
    return FeeEstimate(
        price=price.quantize(CENTS, rounding=ROUND_HALF_UP),
        platform_fee=platform_fee.quantize(CENTS, rounding=ROUND_HALF_UP),
        estimated_processor_fee=processor_fee.quantize(CENTS, rounding=ROUND_HALF_UP),
        estimated_net=net.quantize(CENTS, rounding=ROUND_HALF_UP),
        method=ESTIMATE_SCHEDULE.method,
    )


def to_minor_units(amount: Decimal | str | float) -> int:
    """Convert a BRL amount to centavos, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
