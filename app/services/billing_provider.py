"""
Stripe billing provider.

Wraps the three Stripe calls the backend needs (customer creation, checkout
session creation, webhook verification) and turns Stripe exceptions into
application errors.
"""
import logging
from typing import Any, Dict, Optional

import stripe

from app.utils.error_handling import BillingProviderError, SignatureError

# Configure logging
logger = logging.getLogger(__name__)


class StripeProvider:
    """Thin Stripe client used by checkout and webhook processing."""

    def __init__(self, secret_key: str, webhook_secret: Optional[str] = None):
        """
        Initialize Stripe provider.

        Args:
            secret_key: Stripe secret key
            webhook_secret: Stripe webhook signing secret
        """
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        stripe.api_key = secret_key

    def create_customer(self, email: Optional[str] = None, metadata: Optional[Dict[str, str]] = None) -> str:
        """Create a Stripe customer and return its id."""
        customer_data: Dict[str, Any] = {"metadata": metadata or {}}
        if email:
            customer_data["email"] = email

        try:
            customer = stripe.Customer.create(**customer_data)
        except stripe.StripeError as e:
            raise BillingProviderError(
                "Failed to create checkout session.",
                details={"stage": "customer", "cause": str(e)},
            ) from e
        return customer.id

    def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """Create a subscription checkout session and return its hosted URL."""
        try:
            session = stripe.checkout.Session.create(
                mode="subscription",
                payment_method_types=["card"],
                customer=customer_id,
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata or {},
            )
        except stripe.StripeError as e:
            raise BillingProviderError(
                "Failed to create checkout session.",
                details={"stage": "checkout", "customer_id": customer_id, "cause": str(e)},
            ) from e
        return session.url

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify a webhook delivery and return the parsed event.

        Raises:
            SignatureError: If the signature header is missing or does not
                match the payload, or the payload is not valid JSON
        """
        if not signature:
            raise SignatureError("Webhook Error: missing Stripe-Signature header.")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as e:
            raise SignatureError(f"Webhook Error: invalid payload ({e}).") from e
        except stripe.SignatureVerificationError as e:
            raise SignatureError(f"Webhook Error: {e}") from e
        return event
