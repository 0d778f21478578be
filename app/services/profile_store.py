"""
Profile store backed by the Supabase `profiles` table.
"""
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.models.db_models import DEFAULT_PLAN, Profile
from app.utils.error_handling import StoreError

PROFILES_TABLE = "profiles"


class ProfileStore:
    """Single-row reads and writes on `profiles`."""

    def __init__(self, client: Client):
        self.client = client

    def get(self, profile_id: str) -> Optional[Profile]:
        try:
            response = (
                self.client.table(PROFILES_TABLE)
                .select("*")
                .eq("id", profile_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to fetch profile.", details={"profile_id": profile_id, "cause": str(e)}) from e

        if not response.data:
            return None
        return Profile(**response.data[0])

    def create_default(self, profile_id: str) -> Profile:
        """
        Insert a default-tier profile unless one already exists, then
        return whatever row is stored for the id.
        """
        row = {"id": profile_id, "plan": DEFAULT_PLAN.value}
        try:
            (
                self.client.table(PROFILES_TABLE)
                .upsert(row, on_conflict="id", ignore_duplicates=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to create profile.", details={"profile_id": profile_id, "cause": str(e)}) from e

        profile = self.get(profile_id)
        if profile is None:
            raise StoreError("Failed to create profile.", details={"profile_id": profile_id})
        return profile

    def update(self, profile_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        """Update the profile with this id; None when no row matched."""
        try:
            response = (
                self.client.table(PROFILES_TABLE)
                .update(fields)
                .eq("id", profile_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to update profile.", details={"profile_id": profile_id, "cause": str(e)}) from e

        if not response.data:
            return None
        return Profile(**response.data[0])

    def update_by_customer(self, customer_id: str, fields: Dict[str, Any]) -> List[Profile]:
        """Update every profile linked to a Stripe customer."""
        try:
            response = (
                self.client.table(PROFILES_TABLE)
                .update(fields)
                .eq("stripe_customer_id", customer_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError("Failed to update profile.", details={"customer_id": customer_id, "cause": str(e)}) from e

        return [Profile(**row) for row in response.data or []]
