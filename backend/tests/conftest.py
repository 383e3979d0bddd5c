"""
Shared pytest fixtures for all tests.

This module provides common fixtures used across multiple test modules.
Individual test modules can override these fixtures if needed.

Factories
---------
Import factories directly from their modules:

    from tests.organizations.factories import OrganizationFactory
    from tests.accounts.factories import ProfileFactory
    from tests.students.factories import StudentFactory, ModalityFactory, EnrollmentFactory
    from tests.billing.factories import ProductFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        org = OrganizationFactory.create(payouts_enabled=True)
        student = StudentFactory.create(organization=org)
"""

import time
from collections.abc import Callable
from typing import Any

import jwt
import pytest
from django.test import Client, RequestFactory

from config.settings.base import settings


def make_session_jwt(sub: str, expires_in: int = 3600, **claims: Any) -> str:
    """
    Issue a session JWT the way the auth provider does.

    Example:
        token = make_session_jwt(str(profile.auth_user_id))
    """
    now = int(time.time())
    payload = {
        "sub": sub,
        "aud": settings.AUTH_JWT_AUDIENCE,
        "iat": now,
        "exp": now + expires_in,
        **claims,
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def request_factory() -> RequestFactory:
    """Django request factory for unit testing views."""
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """
    Factory fixture building Authorization headers for a profile.

    Example:
        def test_endpoint(api_client, auth_headers, profile):
            response = api_client.get("/api/v1/billing/products", **auth_headers(profile))
    """

    def _headers(profile: Any) -> dict[str, str]:
        token = make_session_jwt(str(profile.auth_user_id))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    return _headers


@pytest.fixture
def organization(db):
    """Organization with an enabled Stripe connected account."""
    from tests.organizations.factories import OrganizationFactory

    return OrganizationFactory.create(payouts_enabled=True)


@pytest.fixture
def profile(organization):
    """Admin profile of ``organization``."""
    from tests.accounts.factories import ProfileFactory

    return ProfileFactory.create(organization=organization)
