"""
Post store backed by the Supabase `blogs` table.
"""
from typing import Any, Dict, List, Optional, Union

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.utils.error_handling import StoreError

POSTS_TABLE = "blogs"

PostId = Union[int, str]

# Postgres invalid_text_representation, raised when an id is not a bigint
INVALID_ID_CODE = "22P02"


def _is_invalid_id(error: APIError) -> bool:
    return getattr(error, "code", None) == INVALID_ID_CODE


class PostStore:
    """Owner-scoped access to `blogs`. Every query filters on `user_id`."""

    def __init__(self, client: Client):
        self.client = client

    def count_for_owner(self, owner_id: str) -> int:
        try:
            response = (
                self.client.table(POSTS_TABLE)
                .select("id", count="exact")
                .eq("user_id", owner_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to count blogs.", details={"user_id": owner_id, "cause": str(e)}) from e
        return response.count or 0

    def list_for_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        try:
            response = (
                self.client.table(POSTS_TABLE)
                .select("*")
                .eq("user_id", owner_id)
                .order("id")
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to fetch blogs.", details={"user_id": owner_id, "cause": str(e)}) from e
        return response.data or []

    def insert(self, owner_id: str, title: str, content: str) -> Dict[str, Any]:
        row = {"title": title, "content": content, "user_id": owner_id}
        try:
            response = self.client.table(POSTS_TABLE).insert(row).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to add blog.", details={"user_id": owner_id, "cause": str(e)}) from e

        if not response.data:
            raise StoreError("Failed to add blog.", details={"user_id": owner_id})
        return response.data[0]

    def update(self, post_id: PostId, owner_id: str, title: str, content: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table(POSTS_TABLE)
                .update({"title": title, "content": content})
                .eq("id", post_id)
                .eq("user_id", owner_id)
                .execute()
            )
        except APIError as e:
            if _is_invalid_id(e):
                return None
            raise StoreError("Failed to update blog.", details={"post_id": post_id, "cause": str(e)}) from e
        except httpx.HTTPError as e:
            raise StoreError("Failed to update blog.", details={"post_id": post_id, "cause": str(e)}) from e
        return response.data[0] if response.data else None

    def delete(self, post_id: PostId, owner_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table(POSTS_TABLE)
                .delete()
                .eq("id", post_id)
                .eq("user_id", owner_id)
                .execute()
            )
        except APIError as e:
            if _is_invalid_id(e):
                return None
            raise StoreError("Failed to delete blog.", details={"post_id": post_id, "cause": str(e)}) from e
        except httpx.HTTPError as e:
            raise StoreError("Failed to delete blog.", details={"post_id": post_id, "cause": str(e)}) from e
        return response.data[0] if response.data else None
