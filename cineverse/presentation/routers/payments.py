from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cineverse.applications.interfaces.dtos.filter_page import PageQuery
from cineverse.applications.interfaces.dtos.payment import (
    CreateMovieOrderRequest,
    CreateSubscriptionOrderRequest,
    CurrentSubscription,
    MovieAccessResponse,
    MoviePurchased,
    OrderResponse,
    PlanList,
    PurchaseList,
    SubscriptionActivated,
    TransactionPage,
    VerifyMoviePaymentRequest,
    VerifySubscriptionRequest,
)
from cineverse.applications.use_cases.payment.movie_purchase import (
    CheckMovieAccessUseCase,
    CreateMovieOrderUseCase,
    ListPurchasesUseCase,
    VerifyMoviePaymentUseCase,
)
from cineverse.applications.use_cases.payment.plans import ListPlansUseCase
from cineverse.applications.use_cases.payment.subscription import (
    CancelSubscriptionUseCase,
    CreateSubscriptionOrderUseCase,
    GetCurrentSubscriptionUseCase,
    VerifySubscriptionPaymentUseCase,
)
from cineverse.applications.use_cases.payment.transactions import ListTransactionsUseCase
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.commerce_repository import (
    PlanRepository,
    PurchaseRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from cineverse.domain.ports.services.payment_gateway import PaymentGateway
from cineverse.infrastructure.config.dependencies import (
    get_activity_repository,
    get_current_user,
    get_payment_gateway,
    get_payment_settings,
    get_plan_repository,
    get_purchase_repository,
    get_subscription_repository,
    get_transaction_repository,
)
from cineverse.infrastructure.config.settings import PaymentSettings

router = APIRouter(prefix="/payments", tags=["payments"])

CurrentUserDep = Annotated[User, Depends(get_current_user)]
PaymentGatewayDep = Annotated[PaymentGateway, Depends(get_payment_gateway)]
PaymentSettingsDep = Annotated[PaymentSettings, Depends(get_payment_settings)]
PlanRepositoryDep = Annotated[PlanRepository, Depends(get_plan_repository)]
SubscriptionRepositoryDep = Annotated[SubscriptionRepository, Depends(get_subscription_repository)]
PurchaseRepositoryDep = Annotated[PurchaseRepository, Depends(get_purchase_repository)]
TransactionRepositoryDep = Annotated[TransactionRepository, Depends(get_transaction_repository)]
ActivityRepositoryDep = Annotated[ActivityRepository, Depends(get_activity_repository)]


@router.get("/plans", response_model=PlanList)
async def list_plans(plan_repository: PlanRepositoryDep):
    use_case = ListPlansUseCase(plan_repository)
    return await use_case.execute()


@router.post("/subscription/create-order", response_model=OrderResponse)
async def create_subscription_order(
    request: CreateSubscriptionOrderRequest,
    current_user: CurrentUserDep,
    plan_repository: PlanRepositoryDep,
    payment_gateway: PaymentGatewayDep,
    settings: PaymentSettingsDep,
):
    use_case = CreateSubscriptionOrderUseCase(plan_repository, payment_gateway, settings.currency)
    return await use_case.execute(current_user.id, request)


@router.post("/subscription/verify", response_model=SubscriptionActivated)
async def verify_subscription_payment(
    request: VerifySubscriptionRequest,
    current_user: CurrentUserDep,
    plan_repository: PlanRepositoryDep,
    subscription_repository: SubscriptionRepositoryDep,
    transaction_repository: TransactionRepositoryDep,
    payment_gateway: PaymentGatewayDep,
):
    use_case = VerifySubscriptionPaymentUseCase(
        plan_repository, subscription_repository, transaction_repository, payment_gateway
    )
    return await use_case.execute(current_user.id, request)


@router.get("/subscription/current", response_model=CurrentSubscription)
async def current_subscription(current_user: CurrentUserDep, subscription_repository: SubscriptionRepositoryDep):
    use_case = GetCurrentSubscriptionUseCase(subscription_repository)
    return await use_case.execute(current_user.id)


@router.post("/subscription/cancel", response_model=SubscriptionActivated)
async def cancel_subscription(current_user: CurrentUserDep, subscription_repository: SubscriptionRepositoryDep):
    use_case = CancelSubscriptionUseCase(subscription_repository)
    subscription = await use_case.execute(current_user.id)
    return {"message": "Subscription cancelled successfully", "subscription": subscription}


@router.post("/movie/create-order", response_model=OrderResponse)
async def create_movie_order(
    request: CreateMovieOrderRequest,
    current_user: CurrentUserDep,
    payment_gateway: PaymentGatewayDep,
    settings: PaymentSettingsDep,
):
    use_case = CreateMovieOrderUseCase(payment_gateway, settings.currency)
    return await use_case.execute(current_user.id, request)


@router.post("/movie/verify", response_model=MoviePurchased)
async def verify_movie_payment(
    request: VerifyMoviePaymentRequest,
    current_user: CurrentUserDep,
    purchase_repository: PurchaseRepositoryDep,
    transaction_repository: TransactionRepositoryDep,
    activity_repository: ActivityRepositoryDep,
    payment_gateway: PaymentGatewayDep,
    settings: PaymentSettingsDep,
):
    use_case = VerifyMoviePaymentUseCase(
        purchase_repository,
        transaction_repository,
        activity_repository,
        payment_gateway,
        access_hours=settings.movie_access_hours,
    )
    return await use_case.execute(current_user.id, request)


@router.get("/movie/purchased", response_model=PurchaseList)
async def purchased_movies(current_user: CurrentUserDep, purchase_repository: PurchaseRepositoryDep):
    use_case = ListPurchasesUseCase(purchase_repository)
    return await use_case.execute(current_user.id)


@router.get("/movie/access/{movie_id}", response_model=MovieAccessResponse)
async def movie_access(
    movie_id: int,
    current_user: CurrentUserDep,
    subscription_repository: SubscriptionRepositoryDep,
    purchase_repository: PurchaseRepositoryDep,
):
    use_case = CheckMovieAccessUseCase(subscription_repository, purchase_repository)
    return await use_case.execute(current_user.id, movie_id)


@router.get("/transactions", response_model=TransactionPage)
async def list_transactions(
    query: Annotated[PageQuery, Query()],
    current_user: CurrentUserDep,
    transaction_repository: TransactionRepositoryDep,
):
    use_case = ListTransactionsUseCase(transaction_repository)
    return await use_case.execute(current_user.id, query)
