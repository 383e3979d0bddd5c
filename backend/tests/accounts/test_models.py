"""
Tests for accounts models.
"""

import uuid

import pytest
from django.db import IntegrityError

from apps.accounts.models import Profile
from tests.accounts.factories import ProfileFactory
from tests.organizations.factories import OrganizationFactory


@pytest.mark.django_db
class TestProfileModel:
    """Tests for Profile model."""

    def test_create_profile(self) -> None:
        profile = ProfileFactory.create()

        assert profile.pk is not None
        assert profile.organization is not None
        assert profile.role == Profile.Role.ADMIN

    def test_auth_user_id_unique(self) -> None:
        """Only one profile per auth provider user."""
        user_id = uuid.uuid4()
        ProfileFactory.create(auth_user_id=user_id)

        with pytest.raises(IntegrityError):
            ProfileFactory.create(auth_user_id=user_id)

    def test_str_prefers_full_name(self) -> None:
        profile = ProfileFactory.create(full_name="Maria Souza", email="maria@example.com")

        assert str(profile) == "Maria Souza (admin)"

    def test_str_falls_back_to_email(self) -> None:
        profile = ProfileFactory.create(full_name="", email="maria@example.com", role=Profile.Role.STAFF)

        assert str(profile) == "maria@example.com (staff)"

    @pytest.mark.parametrize(
        ("role", "expected"),
        [
            (Profile.Role.ADMIN, True),
            (Profile.Role.SUPER_ADMIN, True),
            (Profile.Role.STAFF, False),
        ],
    )
    def test_is_admin(self, role: str, expected: bool) -> None:
        assert ProfileFactory.build(role=role).is_admin is expected

    def test_profiles_removed_with_organization(self) -> None:
        org = OrganizationFactory.create()
        ProfileFactory.create(organization=org)

        org.delete()

        assert not Profile.objects.exists()
