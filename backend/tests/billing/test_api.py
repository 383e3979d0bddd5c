"""
Tests for billing API endpoints.

Covers all billing endpoints through the HTTP client with Stripe mocked.
"""

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import stripe

from apps.billing.models import Product
from tests.billing.factories import ProductFactory
from tests.organizations.factories import OrganizationFactory
from tests.students.factories import ModalityFactory, StudentFactory

BASE_URL = "/api/v1/billing"


@pytest.fixture
def mock_stripe():
    with patch("apps.billing.services.get_stripe") as mock_get_stripe:
        client = MagicMock()
        mock_get_stripe.return_value = client
        yield client


def post_json(api_client, url: str, body: dict, headers: dict):
    return api_client.post(url, data=json.dumps(body), content_type="application/json", **headers)


@pytest.mark.django_db
class TestPaymentLinkEndpoint:
    """Tests for POST /billing/payment-links."""

    url = f"{BASE_URL}/payment-links"

    def test_returns_payment_link_url(self, api_client, auth_headers, profile, mock_stripe) -> None:
        org = profile.organization
        mock_stripe.Price.retrieve.return_value = {"id": "price_1", "unit_amount": 8990}
        mock_stripe.PaymentLink.create.return_value = MagicMock(id="plink_1", url="https://buy.stripe.com/x")

        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": org.id, "recurring": False},
            auth_headers(profile),
        )

        assert response.status_code == 200
        assert response.json() == {"paymentLinkUrl": "https://buy.stripe.com/x"}
        kwargs = mock_stripe.PaymentLink.create.call_args.kwargs
        assert kwargs["stripe_account"] == org.stripe_account_id
        assert kwargs["payment_intent_data"] == {"application_fee_amount": 449}

    def test_inactive_payout_account_returns_400_without_stripe_call(
        self, api_client, auth_headers, mock_stripe
    ) -> None:
        from tests.accounts.factories import ProfileFactory

        org = OrganizationFactory.create(stripe_account_id="acct_1", stripe_account_status="pending")
        owner = ProfileFactory.create(organization=org)

        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": org.id},
            auth_headers(owner),
        )

        assert response.status_code == 400
        assert "não está ativa" in response.json()["error"]
        mock_stripe.Price.retrieve.assert_not_called()
        mock_stripe.PaymentLink.create.assert_not_called()

    def test_other_organization_returns_404(self, api_client, auth_headers, profile, mock_stripe) -> None:
        other = OrganizationFactory.create(payouts_enabled=True)

        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": other.id},
            auth_headers(profile),
        )

        assert response.status_code == 404
        mock_stripe.PaymentLink.create.assert_not_called()

    def test_price_without_amount_returns_400(self, api_client, auth_headers, profile, mock_stripe) -> None:
        mock_stripe.Price.retrieve.return_value = {"id": "price_1", "unit_amount": None}

        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": profile.organization.id},
            auth_headers(profile),
        )

        assert response.status_code == 400

    def test_stripe_failure_returns_500(self, api_client, auth_headers, profile, mock_stripe) -> None:
        mock_stripe.Price.retrieve.side_effect = stripe.APIConnectionError("down")

        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": profile.organization.id},
            auth_headers(profile),
        )

        assert response.status_code == 500
        assert "error" in response.json()

    def test_missing_token_returns_401(self, api_client, organization) -> None:
        response = post_json(
            api_client,
            self.url,
            {"stripePriceId": "price_1", "organizationId": organization.id},
            {},
        )

        assert response.status_code == 401

    def test_invalid_body_returns_422(self, api_client, auth_headers, profile) -> None:
        response = post_json(api_client, self.url, {"recurring": True}, auth_headers(profile))

        assert response.status_code == 422


@pytest.mark.django_db
class TestFeeEstimateEndpoint:
    """Tests for GET /billing/fee-estimate."""

    def test_card_estimate(self, api_client, auth_headers, profile) -> None:
        response = api_client.get(f"{BASE_URL}/fee-estimate", {"price": "100.00"}, **auth_headers(profile))

        assert response.status_code == 200
        body = response.json()
        assert Decimal(str(body["platform_fee"])) == Decimal("5.00")
        assert Decimal(str(body["estimated_processor_fee"])) == Decimal("4.38")
        assert Decimal(str(body["estimated_net"])) == Decimal("90.62")
        assert body["method"] == "card"

    def test_negative_price_rejected(self, api_client, auth_headers, profile) -> None:
        response = api_client.get(f"{BASE_URL}/fee-estimate", {"price": "-1"}, **auth_headers(profile))

        assert response.status_code == 422


@pytest.mark.django_db
class TestConnectEndpoint:
    """Tests for POST /billing/connect."""

    def test_returns_onboarding_url(self, api_client, auth_headers, mock_stripe) -> None:
        from tests.accounts.factories import ProfileFactory

        owner = ProfileFactory.create(organization=OrganizationFactory.create())
        mock_stripe.Account.create.return_value = MagicMock(id="acct_new")
        mock_stripe.AccountLink.create.return_value = MagicMock(url="https://connect.stripe.com/setup/x")

        response = post_json(api_client, f"{BASE_URL}/connect", {}, auth_headers(owner))

        assert response.status_code == 200
        body = response.json()
        assert body["onboarding_url"] == "https://connect.stripe.com/setup/x"
        assert body["stripe_account_id"] == "acct_new"
        assert body["status"] == "pending"
        assert mock_stripe.Account.create.call_args.kwargs["email"] == owner.email

    def test_profile_without_organization_returns_403(self, api_client, auth_headers, mock_stripe) -> None:
        from tests.accounts.factories import ProfileFactory

        loner = ProfileFactory.create(organization=None)

        response = post_json(api_client, f"{BASE_URL}/connect", {}, auth_headers(loner))

        assert response.status_code == 403
        mock_stripe.Account.create.assert_not_called()


@pytest.mark.django_db
class TestProductEndpoints:
    """Tests for the product catalog endpoints."""

    url = f"{BASE_URL}/products"

    def test_list_hides_archived(self, api_client, auth_headers, profile) -> None:
        visible = ProductFactory.create(organization=profile.organization)
        ProductFactory.create(organization=profile.organization, is_archived=True)
        ProductFactory.create()  # other tenant

        response = api_client.get(self.url, **auth_headers(profile))

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["products"]] == [visible.id]

    def test_list_include_archived(self, api_client, auth_headers, profile) -> None:
        ProductFactory.create(organization=profile.organization)
        ProductFactory.create(organization=profile.organization, is_archived=True)

        response = api_client.get(self.url, {"include_archived": "true"}, **auth_headers(profile))

        assert len(response.json()["products"]) == 2

    def test_create_product(self, api_client, auth_headers, profile, mock_stripe) -> None:
        mock_stripe.Product.create.return_value = MagicMock(id="prod_1")
        mock_stripe.Price.create.return_value = MagicMock(id="price_1")

        response = post_json(
            api_client,
            self.url,
            {"name": "Plano Mensal", "price": "89.90", "recurring_interval": "month"},
            auth_headers(profile),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["stripe_price_id"] == "price_1"
        assert body["recurring_interval"] == "month"
        assert Product.objects.filter(organization=profile.organization).count() == 1

    def test_create_product_with_foreign_modality_returns_404(
        self, api_client, auth_headers, profile, mock_stripe
    ) -> None:
        foreign = ModalityFactory.create()

        response = post_json(
            api_client,
            self.url,
            {"name": "Plano", "price": "50.00", "modality_id": foreign.id},
            auth_headers(profile),
        )

        assert response.status_code == 404
        mock_stripe.Product.create.assert_not_called()

    def test_create_product_stripe_failure_stores_nothing(
        self, api_client, auth_headers, profile, mock_stripe
    ) -> None:
        mock_stripe.Product.create.side_effect = stripe.APIConnectionError("down")

        response = post_json(api_client, self.url, {"name": "Plano", "price": "50.00"}, auth_headers(profile))

        assert response.status_code == 500
        assert not Product.objects.exists()

    def test_update_product(self, api_client, auth_headers, profile, mock_stripe) -> None:
        product = ProductFactory.create(organization=profile.organization)

        response = api_client.patch(
            f"{self.url}/{product.id}",
            data=json.dumps({"name": "Plano Anual"}),
            content_type="application/json",
            **auth_headers(profile),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Plano Anual"
        mock_stripe.Product.modify.assert_called_once_with(
            product.stripe_product_id,
            stripe_account=profile.organization.stripe_account_id,
            name="Plano Anual",
        )

    def test_archive_product(self, api_client, auth_headers, profile, mock_stripe) -> None:
        product = ProductFactory.create(organization=profile.organization)

        response = api_client.delete(f"{self.url}/{product.id}", **auth_headers(profile))

        product.refresh_from_db()
        assert response.status_code == 200
        assert product.is_archived is True

    def test_other_tenants_product_returns_404(self, api_client, auth_headers, profile, mock_stripe) -> None:
        foreign = ProductFactory.create()

        response = api_client.delete(f"{self.url}/{foreign.id}", **auth_headers(profile))

        assert response.status_code == 404
        mock_stripe.Product.modify.assert_not_called()


@pytest.mark.django_db
class TestStudentCheckoutEndpoint:
    """Tests for POST /billing/student-checkout."""

    url = f"{BASE_URL}/student-checkout"

    def test_returns_checkout_url(self, api_client, auth_headers, profile, mock_stripe) -> None:
        student = StudentFactory.create(organization=profile.organization)
        modality = ModalityFactory.create(organization=profile.organization)
        mock_stripe.checkout.Session.create.return_value = MagicMock(
            id="cs_1", url="https://checkout.stripe.com/c/1"
        )

        response = post_json(
            api_client,
            self.url,
            {"student_id": student.id, "modality_id": modality.id},
            auth_headers(profile),
        )

        assert response.status_code == 200
        assert response.json() == {"checkout_url": "https://checkout.stripe.com/c/1"}

    def test_foreign_student_returns_404(self, api_client, auth_headers, profile, mock_stripe) -> None:
        student = StudentFactory.create()
        modality = ModalityFactory.create(organization=profile.organization)

        response = post_json(
            api_client,
            self.url,
            {"student_id": student.id, "modality_id": modality.id},
            auth_headers(profile),
        )

        assert response.status_code == 404
        mock_stripe.checkout.Session.create.assert_not_called()

    def test_modality_without_price_returns_400(self, api_client, auth_headers, profile, mock_stripe) -> None:
        student = StudentFactory.create(organization=profile.organization)
        modality = ModalityFactory.create(organization=profile.organization, price=None)

        response = post_json(
            api_client,
            self.url,
            {"student_id": student.id, "modality_id": modality.id},
            auth_headers(profile),
        )

        assert response.status_code == 400
        mock_stripe.checkout.Session.create.assert_not_called()
