from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cineverse.domain.clock import utcnow


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PurchaseStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class TransactionType(str, Enum):
    SUBSCRIPTION = "subscription"
    MOVIE_PURCHASE = "movie_purchase"


class AccessType(str, Enum):
    SUBSCRIPTION = "subscription"
    PURCHASE = "purchase"


class SubscriptionPlan(BaseModel):
    name: str
    price: float
    duration_days: int
    features: List[str] = Field(default_factory=list)
    max_resolution: str = "480p"
    can_download: bool = False
    ads_enabled: bool = True
    status: str = "active"
    id: Optional[int] = None


class UserSubscription(BaseModel):
    user_id: int
    plan_id: int
    plan_name: str
    start_date: datetime
    end_date: datetime
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    auto_renew: bool = False
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    id: Optional[int] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.status is SubscriptionStatus.ACTIVE and self.end_date > (now or utcnow())


class MoviePurchase(BaseModel):
    user_id: int
    movie_id: int
    movie_title: str
    price: float
    purchase_date: datetime
    expiry_date: datetime
    payment_id: str
    order_id: str
    status: PurchaseStatus = PurchaseStatus.ACTIVE
    id: Optional[int] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.status is PurchaseStatus.ACTIVE and self.expiry_date > (now or utcnow())


class Transaction(BaseModel):
    user_id: int
    type: TransactionType
    amount: float
    payment_id: str
    order_id: str
    currency: str = "INR"
    payment_method: str = "card"
    status: str = "success"
    item_id: Optional[str] = None
    item_name: Optional[str] = None
    gateway: str = "razorpay"
    transaction_date: datetime = Field(default_factory=utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[int] = None


class PaymentOrder(BaseModel):
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None

