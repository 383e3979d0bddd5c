"""
Core security - authentication classes for API.
"""

import jwt
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.security import HttpBearer

from apps.core.auth import AuthContext
from apps.core.logging import bind_contextvars, get_logger
from config.settings.base import settings

logger = get_logger(__name__)

JWT_ALGORITHMS = ["HS256"]


class SessionJWTAuth(HttpBearer):
    """
    Bearer authentication with the auth provider's session JWT.

    The token is verified with AUTH_JWT_SECRET; its ``sub`` claim must match
    a local Profile. Returning None makes Django Ninja answer 401.
    """

    def authenticate(self, request: HttpRequest, token: str) -> AuthContext | None:
        if not token or not settings.AUTH_JWT_SECRET:
            return None

        try:
            claims = jwt.decode(
                token,
                settings.AUTH_JWT_SECRET,
                algorithms=JWT_ALGORITHMS,
                audience=settings.AUTH_JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            logger.info("session_jwt_expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("session_jwt_invalid", error=str(e))
            return None

        from apps.accounts.models import Profile

        try:
            profile = Profile.objects.select_related("organization").get(
                auth_user_id=claims.get("sub")
            )
        except (Profile.DoesNotExist, ValidationError):
            logger.warning("session_jwt_unknown_profile", sub=claims.get("sub"))
            return None

        if profile.organization_id:
            bind_contextvars(**{"organization.id": str(profile.organization_id)})

        return AuthContext(profile=profile, organization=profile.organization)
