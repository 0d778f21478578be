"""
API routes for blog management.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends

from app.api.deps import get_post_service
from app.api.schemas import BlogPayload, BlogResponse, ErrorResponse, MessageResponse
from app.core.auth import get_current_user
from app.models.db_models import Identity
from app.services.post_service import PostService

router = APIRouter(responses={401: {"model": ErrorResponse}})

@router.get("", response_model=List[BlogResponse])
def list_blogs(
    current_user: Identity = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """List the current user's blogs, oldest first."""
    return post_service.list_posts(current_user)

@router.post(
    "",
    response_model=BlogResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
def create_blog(
    payload: Optional[BlogPayload] = None,
    current_user: Identity = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """
    Create a blog.

    Args:
        payload: Title and content of the new blog
        current_user: Current authenticated user

    Returns:
        The created blog, or 403 when the plan's blog limit is reached
    """
    payload = payload or BlogPayload()
    return post_service.create_post(current_user, payload.title, payload.content)

@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_blog(
    blog_id: str,
    payload: Optional[BlogPayload] = None,
    current_user: Identity = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """Replace the title and content of one of the current user's blogs."""
    payload = payload or BlogPayload()
    return post_service.update_post(current_user, blog_id, payload.title, payload.content)

@router.delete("/{blog_id}", response_model=MessageResponse, responses={404: {"model": ErrorResponse}})
def delete_blog(
    blog_id: str,
    current_user: Identity = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
):
    """Delete one of the current user's blogs."""
    post_service.delete_post(current_user, blog_id)
    return {"message": "Blog deleted successfully."}
