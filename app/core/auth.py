"""
Authentication utilities for the application.
"""
import logging
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security.utils import get_authorization_scheme_param

from app.api.deps import get_auth_service
from app.models.db_models import Identity
from app.services.auth_service import AuthService
from app.utils.error_handling import AuthError

# Configure logging
logger = logging.getLogger(__name__)

# Bearer token security scheme
class BearerAuth:
    async def __call__(self, request: Request) -> HTTPAuthorizationCredentials:
        authorization = request.headers.get("Authorization")
        scheme, token = get_authorization_scheme_param(authorization)

        if not authorization or not token:
            raise AuthError("Missing auth token.")

        if scheme.lower() != "bearer":
            raise AuthError("Invalid authentication scheme. Expected 'Bearer'")

        return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token.strip())

# Initialize the security scheme
security = BearerAuth()

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    """
    Validate the bearer token and return the caller's identity.

    Args:
        credentials: HTTP Authorization credentials
        auth_service: Supabase-backed token verifier

    Returns:
        Identity of the authenticated user
    """
    return auth_service.get_identity(credentials.credentials)
