"""
Tests for organizations models.
"""

import pytest
from django.db import IntegrityError

from apps.organizations.models import Organization
from tests.organizations.factories import OrganizationFactory


@pytest.mark.django_db
class TestOrganization:
    """Tests for Organization model."""

    def test_new_organization_starts_in_trial(self) -> None:
        """Should default to the trial subscription status."""
        org = OrganizationFactory.create()

        assert org.subscription_status == Organization.SubscriptionStatus.TRIAL

    def test_payout_account_active_when_enabled(self) -> None:
        """Should report active payouts only for enabled accounts with an id."""
        org = OrganizationFactory.create(payouts_enabled=True)

        assert org.has_active_payout_account is True

    @pytest.mark.parametrize(
        ("account_id", "status"),
        [
            ("", ""),
            ("acct_1", Organization.StripeAccountStatus.PENDING),
            ("acct_1", Organization.StripeAccountStatus.RESTRICTED),
            ("", Organization.StripeAccountStatus.ENABLED),
        ],
    )
    def test_payout_account_inactive(self, account_id: str, status: str) -> None:
        """Should report inactive payouts for missing or non-enabled accounts."""
        org = OrganizationFactory.create(stripe_account_id=account_id, stripe_account_status=status)

        assert org.has_active_payout_account is False

    def test_gympass_code_is_unique(self) -> None:
        """Should reject two organizations with the same Gympass code."""
        OrganizationFactory.create(gympass_integration_code=4242)

        with pytest.raises(IntegrityError):
            OrganizationFactory.create(gympass_integration_code=4242)

    def test_organizations_without_partner_codes_coexist(self) -> None:
        """Should allow any number of organizations without partner codes."""
        OrganizationFactory.create(gympass_integration_code=None, totalpass_integration_code=None)
        OrganizationFactory.create(gympass_integration_code=None, totalpass_integration_code=None)

        assert Organization.objects.filter(gympass_integration_code__isnull=True).count() == 2
