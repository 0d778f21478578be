from typing import Optional, Union
from pydantic import BaseModel


class BlogPayload(BaseModel):
    """Body of POST /blogs and PUT /blogs/{id}. Emptiness is checked by the service."""
    title: Optional[str] = None
    content: Optional[str] = None


class BlogResponse(BaseModel):
    id: Union[int, str]
    user_id: str
    title: str
    content: str
    created_at: Optional[str] = None


class ProfileResponse(BaseModel):
    plan: str
    blogCount: int
    maxBlogs: int


class CheckoutResponse(BaseModel):
    checkoutUrl: str


class BillingStatusResponse(BaseModel):
    stripeConfigured: bool
    webhookConfigured: bool


class WebhookResponse(BaseModel):
    received: bool


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
