"""
API routes for Stripe billing.
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_checkout_service
from app.api.schemas import BillingStatusResponse, CheckoutResponse
from app.core.auth import get_current_user
from app.models.db_models import Identity
from app.services.checkout_service import CheckoutService
from config.config import settings

router = APIRouter()

@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout(
    current_user: Identity = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """
    Start a Stripe Checkout session for the premium plan.

    Returns:
        {"checkoutUrl": "https://checkout.stripe.com/..."}

    Errors:
        400: Already on the premium plan
        500: Stripe not configured, or a Stripe API error
    """
    checkout_url = checkout_service.start_checkout(current_user)
    return {"checkoutUrl": checkout_url}

@router.get("/status", response_model=BillingStatusResponse)
def billing_status():
    """Report whether checkout and webhooks are configured."""
    return {
        "stripeConfigured": settings.stripe_configured,
        "webhookConfigured": settings.webhook_configured,
    }
