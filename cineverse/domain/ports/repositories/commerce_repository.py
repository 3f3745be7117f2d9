from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from cineverse.domain.models.commerce import MoviePurchase, SubscriptionPlan, Transaction, UserSubscription


class PlanRepository(ABC):
    @abstractmethod
    async def get_active(self) -> List[SubscriptionPlan]:
        """Active plans ordered by price."""
        pass

    @abstractmethod
    async def get_by_id(self, plan_id: int) -> Optional[SubscriptionPlan]:
        pass

    @abstractmethod
    async def upsert_by_name(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        pass


class SubscriptionRepository(ABC):
    @abstractmethod
    async def create(self, subscription: UserSubscription) -> UserSubscription:
        pass

    @abstractmethod
    async def get_current(self, user_id: int, now: datetime) -> Optional[UserSubscription]:
        """Latest active subscription whose end date is after ``now``."""
        pass

    @abstractmethod
    async def get_active(self, user_id: int) -> Optional[UserSubscription]:
        pass

    @abstractmethod
    async def cancel_active(self, user_id: int) -> int:
        pass

    @abstractmethod
    async def update(self, subscription: UserSubscription) -> UserSubscription:
        pass


class PurchaseRepository(ABC):
    @abstractmethod
    async def create(self, purchase: MoviePurchase) -> MoviePurchase:
        pass

    @abstractmethod
    async def get_active(self, user_id: int, now: datetime) -> List[MoviePurchase]:
        pass

    @abstractmethod
    async def get_active_for_movie(self, user_id: int, movie_id: int, now: datetime) -> Optional[MoviePurchase]:
        pass


class TransactionRepository(ABC):
    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    async def get_page(self, user_id: int, offset: int, limit: int) -> Tuple[List[Transaction], int]:
        """Newest first, plus the total count for the user."""
        pass
