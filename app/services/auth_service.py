"""
Authentication service using Supabase.
"""
import logging
from typing import Optional

import httpx
from supabase import Client
from supabase_auth.errors import AuthApiError

from app.models.db_models import Identity
from app.utils.error_handling import AppError, AuthError

# Configure logging
logger = logging.getLogger(__name__)


class AuthService:
    """Resolves Supabase access tokens to identities."""

    def __init__(self, client: Optional[Client]):
        """Initialize the authentication service."""
        self.supabase = client

    def get_identity(self, token: str) -> Identity:
        """
        Validate an access token with Supabase Auth.

        Args:
            token: Bearer token sent by the browser

        Returns:
            Identity of the token's owner

        Raises:
            AuthError: If the token is rejected
        """
        if not self.supabase:
            logger.error("Authentication service is not available")
            raise AppError("Authentication failed.", status_code=500)

        try:
            response = self.supabase.auth.get_user(token)
        except AuthApiError as e:
            logger.info(f"Token rejected by Supabase: {str(e)}")
            raise AuthError("Invalid auth token.") from e
        except httpx.HTTPError as e:
            logger.error(f"Authentication error: {str(e)}")
            raise AppError("Authentication failed.", status_code=500) from e

        if not response or not response.user:
            raise AuthError("Invalid auth token.")

        return Identity(id=response.user.id, email=response.user.email)
