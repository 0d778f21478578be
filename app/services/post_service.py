"""
Blog post service: plan-gated creation plus owner-scoped CRUD.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from app.models.db_models import Identity, Profile
from app.services.plan_policy import ceiling_for
from app.services.post_store import PostId, PostStore
from app.services.profile_service import ProfileService
from app.utils.error_handling import NotFound, PlanLimitExceeded, ValidationError

# Configure logging
logger = logging.getLogger(__name__)


def _require_fields(title: Optional[str], content: Optional[str]) -> None:
    if not title or not content:
        raise ValidationError("Title and content are required.")


class PostService:
    """Blog operations for an authenticated user."""

    def __init__(self, profile_service: ProfileService, post_store: PostStore):
        self.profiles = profile_service
        self.posts = post_store

    def _usage(self, identity: Identity) -> Tuple[Profile, int, int]:
        """Provision the profile and return it with the blog count and the plan ceiling."""
        profile = self.profiles.ensure_profile(identity)
        return profile, self.posts.count_for_owner(identity.id), ceiling_for(profile.plan)

    def can_accept_post(self, identity: Identity) -> bool:
        _, count, ceiling = self._usage(identity)
        return count < ceiling

    def list_posts(self, identity: Identity) -> List[Dict[str, Any]]:
        self.profiles.ensure_profile(identity)
        return self.posts.list_for_owner(identity.id)

    def create_post(self, identity: Identity, title: Optional[str], content: Optional[str]) -> Dict[str, Any]:
        """
        Create a blog if the user's plan still has room for it.

        Args:
            identity: Authenticated caller
            title: Blog title
            content: Blog body

        Returns:
            The inserted row

        Raises:
            ValidationError: If title or content is empty
            PlanLimitExceeded: If the user already has as many blogs as the plan allows
        """
        _require_fields(title, content)

        profile, count, ceiling = self._usage(identity)
        if count >= ceiling:
            logger.info(f"Plan limit hit: user={identity.id}, plan={profile.plan.value}, usage={count}/{ceiling}")
            raise PlanLimitExceeded(ceiling)

        post = self.posts.insert(identity.id, title, content)
        logger.info(f"Blog {post.get('id')} created for user ID: {identity.id}")
        return post

    def update_post(self, identity: Identity, post_id: PostId, title: Optional[str], content: Optional[str]) -> Dict[str, Any]:
        _require_fields(title, content)

        post = self.posts.update(post_id, identity.id, title, content)
        if post is None:
            raise NotFound("Blog not found.")
        return post

    def delete_post(self, identity: Identity, post_id: PostId) -> Dict[str, Any]:
        post = self.posts.delete(post_id, identity.id)
        if post is None:
            raise NotFound("Blog not found.")
        logger.info(f"Blog {post_id} deleted for user ID: {identity.id}")
        return post
