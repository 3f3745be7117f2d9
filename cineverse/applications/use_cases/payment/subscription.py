import math
from datetime import timedelta

from cineverse.applications.interfaces.dtos.payment import (
    CreateSubscriptionOrderRequest,
    CurrentSubscription,
    OrderResponse,
    SubscriptionActivated,
    VerifySubscriptionRequest,
)
from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import NotFoundError, PaymentServiceUnavailableError, ValidationError
from cineverse.domain.models.commerce import (
    SubscriptionStatus,
    Transaction,
    TransactionType,
    UserSubscription,
)
from cineverse.domain.ports.repositories.commerce_repository import (
    PlanRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from cineverse.domain.ports.services.payment_gateway import PaymentGateway
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class CreateSubscriptionOrderUseCase:
    def __init__(self, plan_repository: PlanRepository, payment_gateway: PaymentGateway, currency: str = "INR"):
        self.plan_repository = plan_repository
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def execute(self, user_id: int, request: CreateSubscriptionOrderRequest) -> OrderResponse:
        if not self.payment_gateway.is_configured():
            raise PaymentServiceUnavailableError(
                "Payment service temporarily unavailable. Please try again later.",
                detail="Payment gateway not configured",
            )

        plan = await self.plan_repository.get_by_id(request.plan_id)
        if not plan:
            raise NotFoundError("Plan not found")

        receipt = f"sub_{str(user_id)[-8:]}_{str(int(utcnow().timestamp() * 1000))[-8:]}"
        order = await self.payment_gateway.create_order(
            amount=to_minor_units(plan.price),
            currency=self.currency,
            receipt=receipt,
            notes={"user_id": str(user_id), "plan_id": str(plan.id), "plan_name": plan.name, "type": "subscription"},
        )
        logger.info(f"Subscription order {order.id} created for user {user_id}, plan {plan.name}")

        return OrderResponse(
            order_id=order.id,
            amount=order.amount,
            currency=order.currency,
            key_id=self.payment_gateway.key_id,
            plan=plan,
        )


class VerifySubscriptionPaymentUseCase:
    def __init__(
        self,
        plan_repository: PlanRepository,
        subscription_repository: SubscriptionRepository,
        transaction_repository: TransactionRepository,
        payment_gateway: PaymentGateway,
    ):
        self.plan_repository = plan_repository
        self.subscription_repository = subscription_repository
        self.transaction_repository = transaction_repository
        self.payment_gateway = payment_gateway

    async def execute(self, user_id: int, request: VerifySubscriptionRequest) -> SubscriptionActivated:
        if not self.payment_gateway.verify_signature(
            request.razorpay_order_id, request.razorpay_payment_id, request.razorpay_signature
        ):
            logger.warning(f"Rejected subscription payment {request.razorpay_payment_id}: bad signature")
            raise ValidationError("Invalid payment signature")

        plan = await self.plan_repository.get_by_id(request.plan_id)
        if not plan:
            raise NotFoundError("Plan not found")

        cancelled = await self.subscription_repository.cancel_active(user_id)
        if cancelled:
            logger.info(f"Cancelled {cancelled} previous subscription(s) for user {user_id}")

        start = utcnow()
        subscription = await self.subscription_repository.create(
            UserSubscription(
                user_id=user_id,
                plan_id=plan.id,
                plan_name=plan.name,
                start_date=start,
                end_date=start + timedelta(days=plan.duration_days),
                payment_id=request.razorpay_payment_id,
                order_id=request.razorpay_order_id,
            )
        )
        await self.transaction_repository.create(
            Transaction(
                user_id=user_id,
                type=TransactionType.SUBSCRIPTION,
                amount=plan.price,
                payment_id=request.razorpay_payment_id,
                order_id=request.razorpay_order_id,
                item_id=str(plan.id),
                item_name=plan.name,
                transaction_date=start,
            )
        )
        logger.info(f"Subscription {plan.name} activated for user {user_id} until {subscription.end_date}")

        return SubscriptionActivated(message="Subscription activated successfully", subscription=subscription)


class GetCurrentSubscriptionUseCase:
    def __init__(self, subscription_repository: SubscriptionRepository):
        self.subscription_repository = subscription_repository

    async def execute(self, user_id: int) -> CurrentSubscription:
        now = utcnow()
        subscription = await self.subscription_repository.get_current(user_id, now)
        if not subscription:
            return CurrentSubscription(subscription=None, has_active_subscription=False)

        remaining = (subscription.end_date - now).total_seconds()
        return CurrentSubscription(
            subscription=subscription,
            has_active_subscription=True,
            days_remaining=max(0, math.ceil(remaining / SECONDS_PER_DAY)),
        )


class CancelSubscriptionUseCase:
    def __init__(self, subscription_repository: SubscriptionRepository):
        self.subscription_repository = subscription_repository

    async def execute(self, user_id: int) -> UserSubscription:
        subscription = await self.subscription_repository.get_active(user_id)
        if not subscription:
            raise NotFoundError("No active subscription found")

        subscription.status = SubscriptionStatus.CANCELLED
        subscription.auto_renew = False
        return await self.subscription_repository.update(subscription)
