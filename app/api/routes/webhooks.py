"""
Stripe webhook endpoint.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_webhook_service
from app.api.schemas import WebhookResponse
from app.services.webhook_service import WebhookService
from app.utils.error_handling import SignatureError

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/webhook", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    webhook_service: WebhookService = Depends(get_webhook_service),
):
    """
    Handle Stripe webhook events.

    The raw body is read untouched, since the signature is computed over
    the exact bytes Stripe sent.

    Errors:
        400: Webhook not configured, or signature verification failed
        500: Profile update failed (Stripe will redeliver)
    """
    payload = await request.body()

    try:
        outcome = await run_in_threadpool(webhook_service.process, payload, stripe_signature)
    except SignatureError as e:
        logger.warning(f"Stripe webhook signature verification failed: {e.message}")
        raise

    logger.info(f"Stripe webhook {outcome.event_id} acknowledged (handled={outcome.handled})")
    return {"received": True}
