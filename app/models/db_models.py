import logging
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)


class PlanTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, value: Optional[Union[str, "PlanTier"]]) -> "PlanTier":
        """
        Resolve a stored tier string to a PlanTier.

        Unknown values resolve to FREE, with a warning so that bad rows
        show up in the logs instead of silently losing their tier.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown plan tier {value!r}, treating as '{cls.FREE.value}'")
            return cls.FREE


DEFAULT_PLAN = PlanTier.FREE


class Identity(BaseModel):
    """Authenticated caller, as issued by Supabase Auth."""
    id: str
    email: Optional[str] = None


class Profile(BaseModel):
    id: str
    plan: PlanTier = DEFAULT_PLAN
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None

    @field_validator("plan", mode="before")
    @classmethod
    def _coerce_plan(cls, value):
        return PlanTier.parse(value)

