"""
Error handling utilities.
"""
import logging
import traceback
from typing import Dict, Any, Optional

# Configure logging
logger = logging.getLogger(__name__)

class AppError(Exception):
    """Base class for application errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the error.

        Args:
            message: Error message returned to the client
            status_code: HTTP status code (defaults to the class status)
            details: Additional error details, logged but never returned
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthError(AppError):
    """Missing or invalid identity token."""
    status_code = 401


class ValidationError(AppError):
    """Missing or malformed request fields."""
    status_code = 400


class PlanLimitExceeded(AppError):
    """The user's plan ceiling has been reached."""
    status_code = 403

    def __init__(self, ceiling: int):
        self.ceiling = ceiling
        super().__init__(
            f"Plan limit reached. Upgrade to add more than {ceiling} blogs.",
            details={"ceiling": ceiling},
        )


class NotFound(AppError):
    """Row absent or not owned by the caller."""
    status_code = 404


class NotConfigured(AppError):
    """A required integration is not configured."""
    status_code = 500


class AlreadySubscribed(AppError):
    """The user already has the premium plan."""
    status_code = 400


class StoreError(AppError):
    """Unexpected failure talking to the database."""
    status_code = 500


class BillingProviderError(AppError):
    """Unexpected failure talking to Stripe."""
    status_code = 500


class SignatureError(AppError):
    """Webhook payload failed signature verification."""
    status_code = 400


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an error with context.

    Args:
        error: The exception to log
        context: Additional context for the error
    """
    error_type = type(error).__name__
    error_message = str(error)
    error_traceback = traceback.format_exc()

    log_data = {
        "error_type": error_type,
        "error_message": error_message,
        "traceback": error_traceback,
    }

    if isinstance(error, AppError) and error.details:
        log_data["error_details"] = error.details

    if context:
        log_data.update(context)

    logger.error(f"Error: {error_type} - {error_message}", extra=log_data)

def format_error_response(error: Exception) -> Dict[str, Any]:
    """
    Format an error for API response.

    Args:
        error: The exception to format

    Returns:
        Dictionary with the client-facing error message
    """
    if isinstance(error, AppError):
        return {"error": error.message}
    return {"error": "Internal server error."}
