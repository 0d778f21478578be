"""
API routes for the caller's profile and plan usage.
"""
from fastapi import APIRouter, Depends

from app.api.deps import get_profile_service
from app.api.schemas import ProfileResponse
from app.core.auth import get_current_user
from app.models.db_models import Identity
from app.services.profile_service import ProfileService

router = APIRouter()

@router.get("", response_model=ProfileResponse)
def get_profile(
    current_user: Identity = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """
    Get the current user's plan, blog count and blog ceiling.

    The profile is created on the free plan if this is the user's first request.
    """
    return profile_service.profile_summary(current_user)
