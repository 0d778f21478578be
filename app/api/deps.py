"""
FastAPI dependency providers for services.
"""
from typing import Optional

from fastapi import Depends
from supabase import Client

from app.services.auth_service import AuthService
from app.services.billing_provider import StripeProvider
from app.services.checkout_service import CheckoutService
from app.services.post_service import PostService
from app.services.post_store import PostStore
from app.services.profile_service import ProfileService
from app.services.profile_store import ProfileStore
from app.services.webhook_service import WebhookService
from app.utils.connection_manager import connection_manager
from app.utils.error_handling import StoreError
from config.config import settings


def get_supabase() -> Client:
    client = connection_manager.get_supabase_client()
    if client is None:
        raise StoreError("Database not configured.")
    return client


def get_auth_service() -> AuthService:
    return AuthService(connection_manager.get_supabase_client())


def get_profile_store(client: Client = Depends(get_supabase)) -> ProfileStore:
    return ProfileStore(client)


def get_post_store(client: Client = Depends(get_supabase)) -> PostStore:
    return PostStore(client)


def get_billing_provider() -> Optional[StripeProvider]:
    """Stripe provider, or None when no secret key is configured."""
    if not settings.STRIPE_SECRET_KEY:
        return None
    return StripeProvider(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)


def get_profile_service(
    profile_store: ProfileStore = Depends(get_profile_store),
    post_store: PostStore = Depends(get_post_store),
) -> ProfileService:
    return ProfileService(profile_store, post_store)


def get_post_service(
    profile_service: ProfileService = Depends(get_profile_service),
    post_store: PostStore = Depends(get_post_store),
) -> PostService:
    return PostService(profile_service, post_store)


def get_checkout_service(
    profile_service: ProfileService = Depends(get_profile_service),
    profile_store: ProfileStore = Depends(get_profile_store),
    provider: Optional[StripeProvider] = Depends(get_billing_provider),
) -> CheckoutService:
    return CheckoutService(
        profile_service,
        profile_store,
        provider,
        price_id=settings.STRIPE_PRICE_ID,
        frontend_url=settings.FRONTEND_URL,
    )


def get_webhook_service(
    profile_store: ProfileStore = Depends(get_profile_store),
    provider: Optional[StripeProvider] = Depends(get_billing_provider),
) -> WebhookService:
    return WebhookService(profile_store, provider)
