"""
Stripe Checkout for the premium plan.
"""
import logging
from typing import Optional

from app.models.db_models import Identity, PlanTier
from app.services.billing_provider import StripeProvider
from app.services.profile_service import ProfileService
from app.services.profile_store import ProfileStore
from app.utils.error_handling import AlreadySubscribed, NotConfigured

# Configure logging
logger = logging.getLogger(__name__)

# Metadata key linking Stripe objects back to the Supabase user
USER_METADATA_KEY = "supabaseUserId"


class CheckoutService:
    """Starts premium subscription checkouts."""

    def __init__(
        self,
        profile_service: ProfileService,
        profile_store: ProfileStore,
        provider: Optional[StripeProvider],
        price_id: Optional[str],
        frontend_url: str,
    ):
        self.profiles = profile_service
        self.profile_store = profile_store
        self.provider = provider
        self.price_id = price_id
        self.frontend_url = frontend_url.rstrip("/")

    def start_checkout(self, identity: Identity) -> str:
        """
        Create a Stripe Checkout session for the premium plan.

        The Stripe customer id is saved on the profile the first time and
        reused afterwards, so a user only ever gets one Stripe customer.

        Args:
            identity: Authenticated caller

        Returns:
            Hosted checkout URL to redirect the browser to

        Raises:
            NotConfigured: If Stripe credentials or the price id are missing
            AlreadySubscribed: If the profile is already premium
            BillingProviderError: If a Stripe call fails
        """
        if self.provider is None or not self.price_id:
            raise NotConfigured("Stripe not configured.")

        profile = self.profiles.ensure_profile(identity)
        if profile.plan == PlanTier.PREMIUM:
            raise AlreadySubscribed("You already have the premium plan.")

        metadata = {USER_METADATA_KEY: identity.id}

        customer_id = profile.stripe_customer_id
        if not customer_id:
            customer_id = self.provider.create_customer(email=identity.email, metadata=metadata)
            logger.info(f"Created Stripe customer {customer_id} for user ID: {identity.id}")
            self.profile_store.update(identity.id, {"stripe_customer_id": customer_id})

        checkout_url = self.provider.create_checkout_session(
            customer_id=customer_id,
            price_id=self.price_id,
            success_url=f"{self.frontend_url}/billing-success",
            cancel_url=f"{self.frontend_url}/billing-cancel",
            metadata=metadata,
        )
        logger.info(f"Checkout session started for user ID: {identity.id}")
        return checkout_url
