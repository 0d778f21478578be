"""
Plan definitions and post ceilings.
"""
from typing import Dict, Optional, Union

from app.models.db_models import DEFAULT_PLAN, PlanTier

PLAN_LIMITS: Dict[PlanTier, int] = {
    PlanTier.FREE: 4,
    PlanTier.PREMIUM: 20,
}


def ceiling_for(tier: Optional[Union[str, PlanTier]]) -> int:
    """
    Get the maximum number of blogs allowed on a plan.

    Args:
        tier: Plan tier or stored tier string

    Returns:
        Post ceiling, or the free tier ceiling if the tier is not recognised
    """
    return PLAN_LIMITS.get(PlanTier.parse(tier), PLAN_LIMITS[DEFAULT_PLAN])

