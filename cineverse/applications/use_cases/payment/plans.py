from typing import List

from cineverse.applications.interfaces.dtos.payment import PlanList
from cineverse.domain.models.commerce import SubscriptionPlan
from cineverse.domain.ports.repositories.commerce_repository import PlanRepository

DEFAULT_PLANS: List[SubscriptionPlan] = [
    SubscriptionPlan(
        name="Basic",
        price=199,
        duration_days=30,
        features=["HD streaming", "Watch on 1 device", "Limited ads"],
        max_resolution="720p",
        can_download=False,
        ads_enabled=True,
    ),
    SubscriptionPlan(
        name="Premium",
        price=499,
        duration_days=30,
        features=["Full HD streaming", "Watch on 2 devices", "No ads", "Download movies"],
        max_resolution="1080p",
        can_download=True,
        ads_enabled=False,
    ),
    SubscriptionPlan(
        name="Ultra",
        price=999,
        duration_days=30,
        features=["4K Ultra HD streaming", "Watch on 4 devices", "No ads", "Unlimited downloads", "Early access"],
        max_resolution="4K",
        can_download=True,
        ads_enabled=False,
    ),
]


class ListPlansUseCase:
    def __init__(self, plan_repository: PlanRepository):
        self.plan_repository = plan_repository

    async def execute(self) -> PlanList:
        return PlanList(plans=await self.plan_repository.get_active())


class SeedPlansUseCase:
    def __init__(self, plan_repository: PlanRepository):
        self.plan_repository = plan_repository

    async def execute(self, plans: List[SubscriptionPlan] = DEFAULT_PLANS) -> List[SubscriptionPlan]:
        return [await self.plan_repository.upsert_by_name(plan) for plan in plans]
