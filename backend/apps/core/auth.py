"""
Authentication context for request lifecycle.

Provides a typed container for the authenticated dashboard user that
SessionJWTAuth returns and endpoints consume as ``request.auth``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ninja.errors import HttpError

if TYPE_CHECKING:
    from apps.accounts.models import Profile
    from apps.organizations.models import Organization


@dataclass
class AuthContext:
    """
    Authentication context attached to API requests.

    Attributes:
        profile: The authenticated Profile
        organization: The Organization the profile belongs to, or None
    """

    profile: "Profile"
    organization: "Organization | None" = None

    def require_organization(self) -> "Organization":
        """
        Get the caller's organization or raise 403.

        Raises:
            HttpError 403: If the profile is not attached to an organization
        """
        if self.organization is None:
            raise HttpError(403, "Profile is not linked to an organization")
        return self.organization

    def require_same_organization(self, organization_id: int) -> "Organization":
        """
        Check the caller acts within ``organization_id``.

        Raises:
            HttpError 403: If the profile has no organization
            HttpError 404: If the id names another tenant (not disclosed as 403)
        """
        org = self.require_organization()
        if org.id != organization_id:
            raise HttpError(404, "Organization not found")
        return org
