"""
Profile provisioning and plan summaries.
"""
import logging
from typing import Any, Dict

from app.models.db_models import Identity, Profile
from app.services.plan_policy import ceiling_for
from app.services.post_store import PostStore
from app.services.profile_store import ProfileStore

# Configure logging
logger = logging.getLogger(__name__)


class ProfileService:
    """Makes sure every authenticated user has exactly one profile row."""

    def __init__(self, profile_store: ProfileStore, post_store: PostStore):
        self.profiles = profile_store
        self.posts = post_store

    def ensure_profile(self, identity: Identity) -> Profile:
        """
        Return the caller's profile, creating a free one on first sight.

        Args:
            identity: Authenticated caller

        Returns:
            The stored profile

        Raises:
            StoreError: If the lookup or insert fails
        """
        profile = self.profiles.get(identity.id)
        if profile is not None:
            return profile

        logger.info(f"Profile not found, creating default profile for user ID: {identity.id}")
        return self.profiles.create_default(identity.id)

    def profile_summary(self, identity: Identity) -> Dict[str, Any]:
        profile = self.ensure_profile(identity)
        blog_count = self.posts.count_for_owner(identity.id)
        return {
            "plan": profile.plan.value,
            "blogCount": blog_count,
            "maxBlogs": ceiling_for(profile.plan),
        }
