"""
Main API router.
"""
from fastapi import APIRouter

from app.api.routes import billing, blogs, profile, webhooks

api_router = APIRouter()

api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(blogs.router, prefix="/blogs", tags=["blogs"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(webhooks.router, prefix="/stripe", tags=["stripe"])
