"""
Stripe webhook processing.

Keeps each profile's plan in step with its Stripe subscription:

- checkout.session.completed: profile becomes premium and records the
  Stripe customer and subscription ids
- customer.subscription.deleted: profile drops back to free and forgets the
  subscription id (the customer id is kept for the next checkout)

Every other event type is acknowledged and ignored.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from app.models.db_models import DEFAULT_PLAN, PlanTier
from app.services.billing_provider import StripeProvider
from app.services.checkout_service import USER_METADATA_KEY
from app.services.profile_store import ProfileStore
from app.utils.error_handling import NotConfigured

# Configure logging
logger = logging.getLogger(__name__)

def _field(obj: Any, key: str) -> Any:
    """Read a key from a Stripe object or plain dict, None when absent."""
    if obj is None:
        return None
    try:
        return obj[key]
    except (KeyError, TypeError):
        return None


CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"


@dataclass
class WebhookOutcome:
    """Result of processing one webhook delivery."""
    event_id: Optional[str]
    event_type: str
    handled: bool
    profile_ids: List[str] = field(default_factory=list)


class WebhookService:
    """Verifies Stripe events and applies their plan transitions."""

    def __init__(self, profile_store: ProfileStore, provider: Optional[StripeProvider]):
        self.profiles = profile_store
        self.provider = provider
        self.transitions: Dict[str, Callable[[Dict[str, Any]], List[str]]] = {
            CHECKOUT_COMPLETED: self._apply_checkout_completed,
            SUBSCRIPTION_DELETED: self._apply_subscription_deleted,
        }

    def process(self, payload: bytes, signature: Optional[str]) -> WebhookOutcome:
        """
        Verify and apply a webhook delivery.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            WebhookOutcome describing what was applied

        Raises:
            NotConfigured: If the webhook secret is missing
            SignatureError: If verification fails (nothing is mutated)
            StoreError: If the profile update fails
        """
        if self.provider is None or not self.provider.webhook_secret:
            raise NotConfigured("Stripe webhook not configured.", status_code=400)

        event = self.provider.construct_event(payload, signature)
        event_id = _field(event, "id")
        event_type = _field(event, "type") or ""
        data_object = _field(_field(event, "data"), "object") or {}

        transition = self.transitions.get(event_type)
        if transition is None:
            logger.info(f"Ignoring Stripe event {event_id} of type {event_type}")
            return WebhookOutcome(event_id=event_id, event_type=event_type, handled=False)

        profile_ids = transition(data_object)
        logger.info(f"Applied Stripe event {event_id} ({event_type}) to profiles: {profile_ids}")
        return WebhookOutcome(event_id=event_id, event_type=event_type, handled=True, profile_ids=profile_ids)

    def _apply_checkout_completed(self, session: Dict[str, Any]) -> List[str]:
        user_id = _field(_field(session, "metadata"), USER_METADATA_KEY)
        if not user_id:
            logger.warning(f"Checkout session {_field(session, 'id')} has no {USER_METADATA_KEY} metadata")
            return []

        profile = self.profiles.update(user_id, {
            "plan": PlanTier.PREMIUM.value,
            "stripe_customer_id": _field(session, "customer"),
            "stripe_subscription_id": _field(session, "subscription"),
        })
        if profile is None:
            logger.info(f"Checkout session {_field(session, 'id')} references unknown user ID: {user_id}")
            return []
        return [profile.id]

    def _apply_subscription_deleted(self, subscription: Dict[str, Any]) -> List[str]:
        customer_id = _field(subscription, "customer")
        if not customer_id:
            logger.warning(f"Subscription {_field(subscription, 'id')} deletion has no customer reference")
            return []

        profiles = self.profiles.update_by_customer(customer_id, {
            "plan": DEFAULT_PLAN.value,
            "stripe_subscription_id": None,
        })
        return [profile.id for profile in profiles]
