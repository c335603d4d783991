"""Subscription plan registry used by billing and listing quotas."""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from propsync.types import PlanId

__all__ = [
    "SubscriptionPlan",
    "SUBSCRIPTION_PLANS",
    "get_plan_by_id",
    "plans_for_user_type",
]


@dataclass(frozen=True)
class SubscriptionPlan:
    """A purchasable listing plan. Duration is in months."""

    id: PlanId
    name: str
    duration: int
    price: int
    properties_allowed: int
    user_type: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


SUBSCRIPTION_PLANS: dict[PlanId, SubscriptionPlan] = {
    plan.id: plan
    for plan in (
        SubscriptionPlan(
            id="ind_1m",
            name="Individual 1 Month",
            duration=1,
            price=100,
            properties_allowed=1,
            user_type="individual",
        ),
        SubscriptionPlan(
            id="ind_6m",
            name="Individual 6 Months",
            duration=6,
            price=400,
            properties_allowed=1,
            user_type="individual",
        ),
        SubscriptionPlan(
            id="ind_12m",
            name="Individual 12 Months",
            duration=12,
            price=700,
            properties_allowed=1,
            user_type="individual",
        ),
        SubscriptionPlan(
            id="dev_12m",
            name="Developer 12 Months",
            duration=12,
            price=20000,
            properties_allowed=20,
            user_type="developer",
        ),
    )
}


def get_plan_by_id(plan_id: PlanId) -> Optional[SubscriptionPlan]:
    """Return the plan for ``plan_id``, or None if there is no such plan."""
    if not isinstance(plan_id, str):
        return None
    return SUBSCRIPTION_PLANS.get(plan_id)


def plans_for_user_type(user_type: str) -> list[SubscriptionPlan]:
    """Plans offered to one subscriber category, shortest first."""
    return sorted(
        (p for p in SUBSCRIPTION_PLANS.values() if p.user_type == user_type),
        key=lambda p: (p.duration, p.price),
    )
