from datetime import timedelta

from cineverse.applications.interfaces.dtos.payment import (
    CreateMovieOrderRequest,
    MovieAccessResponse,
    MoviePurchased,
    OrderResponse,
    PurchaseList,
    VerifyMoviePaymentRequest,
)
from cineverse.applications.use_cases.payment.subscription import to_minor_units
from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import PaymentServiceUnavailableError, ValidationError
from cineverse.domain.models.activity import ActivityEvent, ActivityType
from cineverse.domain.models.commerce import AccessType, MoviePurchase, Transaction, TransactionType
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.commerce_repository import (
    PurchaseRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from cineverse.domain.ports.services.payment_gateway import PaymentGateway
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)

MOVIE_ACCESS_HOURS = 48


class CreateMovieOrderUseCase:
    def __init__(self, payment_gateway: PaymentGateway, currency: str = "INR"):
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def execute(self, user_id: int, request: CreateMovieOrderRequest) -> OrderResponse:
        if not self.payment_gateway.is_configured():
            raise PaymentServiceUnavailableError(
                "Payment service temporarily unavailable. Please try again later.",
                detail="Payment gateway not configured",
            )

        timestamp = str(int(utcnow().timestamp() * 1000))[-6:]
        receipt = f"mov_{str(user_id)[-6:]}_{str(request.movie_id)[-6:]}_{timestamp}"
        order = await self.payment_gateway.create_order(
            amount=to_minor_units(request.price),
            currency=self.currency,
            receipt=receipt,
            notes={
                "user_id": str(user_id),
                "movie_id": str(request.movie_id),
                "movie_title": request.movie_title,
                "type": "movie_purchase",
            },
        )
        logger.info(f"Movie order {order.id} created for user {user_id}, movie {request.movie_id}")

        return OrderResponse(
            order_id=order.id,
            amount=order.amount,
            currency=order.currency,
            key_id=self.payment_gateway.key_id,
            movie_id=request.movie_id,
            movie_title=request.movie_title,
        )


class VerifyMoviePaymentUseCase:
    def __init__(
        self,
        purchase_repository: PurchaseRepository,
        transaction_repository: TransactionRepository,
        activity_repository: ActivityRepository,
        payment_gateway: PaymentGateway,
        access_hours: int = MOVIE_ACCESS_HOURS,
    ):
        self.purchase_repository = purchase_repository
        self.transaction_repository = transaction_repository
        self.activity_repository = activity_repository
        self.payment_gateway = payment_gateway
        self.access_hours = access_hours

    async def execute(self, user_id: int, request: VerifyMoviePaymentRequest) -> MoviePurchased:
        if not self.payment_gateway.verify_signature(
            request.razorpay_order_id, request.razorpay_payment_id, request.razorpay_signature
        ):
            logger.warning(f"Rejected movie payment {request.razorpay_payment_id}: bad signature")
            raise ValidationError("Invalid payment signature")

        purchased_at = utcnow()
        purchase = await self.purchase_repository.create(
            MoviePurchase(
                user_id=user_id,
                movie_id=request.movie_id,
                movie_title=request.movie_title,
                price=request.price,
                purchase_date=purchased_at,
                expiry_date=purchased_at + timedelta(hours=self.access_hours),
                payment_id=request.razorpay_payment_id,
                order_id=request.razorpay_order_id,
            )
        )
        await self.transaction_repository.create(
            Transaction(
                user_id=user_id,
                type=TransactionType.MOVIE_PURCHASE,
                amount=request.price,
                payment_id=request.razorpay_payment_id,
                order_id=request.razorpay_order_id,
                item_id=str(request.movie_id),
                item_name=request.movie_title,
                transaction_date=purchased_at,
            )
        )
        await self.activity_repository.record_event(
            ActivityEvent(
                user_id=user_id,
                movie_id=request.movie_id,
                activity_type=ActivityType.PURCHASE,
                timestamp=purchased_at,
                metadata={"price": request.price, "order_id": request.razorpay_order_id},
            )
        )
        logger.info(f"User {user_id} purchased movie {request.movie_id} until {purchase.expiry_date}")

        return MoviePurchased(message="Movie purchase successful", purchase=purchase)


class ListPurchasesUseCase:
    def __init__(self, purchase_repository: PurchaseRepository):
        self.purchase_repository = purchase_repository

    async def execute(self, user_id: int) -> PurchaseList:
        return PurchaseList(purchases=await self.purchase_repository.get_active(user_id, utcnow()))


class CheckMovieAccessUseCase:
    """A live subscription grants access to every movie; otherwise an unexpired purchase of that movie."""

    def __init__(self, subscription_repository: SubscriptionRepository, purchase_repository: PurchaseRepository):
        self.subscription_repository = subscription_repository
        self.purchase_repository = purchase_repository

    async def execute(self, user_id: int, movie_id: int) -> MovieAccessResponse:
        now = utcnow()
        subscription = await self.subscription_repository.get_current(user_id, now)
        if subscription and subscription.is_active(now):
            return MovieAccessResponse(
                has_access=True, access_type=AccessType.SUBSCRIPTION, subscription=subscription
            )

        purchase = await self.purchase_repository.get_active_for_movie(user_id, movie_id, now)
        if purchase and purchase.is_active(now):
            return MovieAccessResponse(has_access=True, access_type=AccessType.PURCHASE, purchase=purchase)

        return MovieAccessResponse(has_access=False)
