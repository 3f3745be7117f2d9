from typing import List, Optional

from pydantic import BaseModel, Field

from cineverse.domain.models.commerce import (
    AccessType,
    MoviePurchase,
    SubscriptionPlan,
    Transaction,
    UserSubscription,
)


class PlanList(BaseModel):
    plans: List[SubscriptionPlan]


class CreateSubscriptionOrderRequest(BaseModel):
    plan_id: int


class CreateMovieOrderRequest(BaseModel):
    movie_id: int
    movie_title: str = Field(min_length=1)
    price: float = Field(gt=0)


class OrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key_id: Optional[str] = None
    plan: Optional[SubscriptionPlan] = None
    movie_id: Optional[int] = None
    movie_title: Optional[str] = None


class PaymentConfirmation(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class VerifySubscriptionRequest(PaymentConfirmation):
    plan_id: int


class VerifyMoviePaymentRequest(PaymentConfirmation):
    movie_id: int
    movie_title: str = Field(min_length=1)
    price: float = Field(gt=0)


class SubscriptionActivated(BaseModel):
    message: str
    subscription: UserSubscription


class MoviePurchased(BaseModel):
    message: str
    purchase: MoviePurchase


class CurrentSubscription(BaseModel):
    subscription: Optional[UserSubscription] = None
    has_active_subscription: bool
    days_remaining: int = 0


class PurchaseList(BaseModel):
    purchases: List[MoviePurchase]


class MovieAccessResponse(BaseModel):
    has_access: bool
    access_type: Optional[AccessType] = None
    subscription: Optional[UserSubscription] = None
    purchase: Optional[MoviePurchase] = None


class TransactionPage(BaseModel):
    transactions: List[Transaction]
    total: int
    page: int
    pages: int
