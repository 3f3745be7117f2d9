from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.models.commerce import (
    MoviePurchase,
    PurchaseStatus,
    SubscriptionPlan,
    SubscriptionStatus,
    Transaction,
    UserSubscription,
)
from cineverse.domain.ports.repositories.commerce_repository import (
    PlanRepository,
    PurchaseRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from cineverse.infrastructure.persistence.models import MoviePurchase as SQLMoviePurchase
from cineverse.infrastructure.persistence.models import SubscriptionPlan as SQLSubscriptionPlan
from cineverse.infrastructure.persistence.models import Transaction as SQLTransaction
from cineverse.infrastructure.persistence.models import UserSubscription as SQLUserSubscription


class SQLAlchemyPlanRepository(PlanRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLSubscriptionPlan) -> SubscriptionPlan:
        return SubscriptionPlan(
            id=row.id,
            name=row.name,
            price=row.price,
            duration_days=row.duration_days,
            features=list(row.features or []),
            max_resolution=row.max_resolution,
            can_download=row.can_download,
            ads_enabled=row.ads_enabled,
            status=row.status,
        )

    async def get_active(self) -> List[SubscriptionPlan]:
        rows = await self.session.scalars(
            select(SQLSubscriptionPlan)
            .where(SQLSubscriptionPlan.status == "active")
            .order_by(SQLSubscriptionPlan.price, SQLSubscriptionPlan.id)
        )
        return [self._to_domain(row) for row in rows.all()]

    async def get_by_id(self, plan_id: int) -> Optional[SubscriptionPlan]:
        row = await self.session.get(SQLSubscriptionPlan, plan_id)
        return self._to_domain(row) if row else None

    async def upsert_by_name(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        row = await self.session.scalar(select(SQLSubscriptionPlan).where(SQLSubscriptionPlan.name == plan.name))
        if row is None:
            row = SQLSubscriptionPlan(name=plan.name, price=plan.price, duration_days=plan.duration_days)
            self.session.add(row)
        row.price = plan.price
        row.duration_days = plan.duration_days
        row.features = list(plan.features)
        row.max_resolution = plan.max_resolution
        row.can_download = plan.can_download
        row.ads_enabled = plan.ads_enabled
        row.status = plan.status
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)


class SQLAlchemySubscriptionRepository(SubscriptionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLUserSubscription) -> UserSubscription:
        return UserSubscription(
            id=row.id,
            user_id=row.user_id,
            plan_id=row.plan_id,
            plan_name=row.plan_name,
            start_date=ensure_utc(row.start_date),
            end_date=ensure_utc(row.end_date),
            status=row.status,
            auto_renew=row.auto_renew,
            payment_id=row.payment_id,
            order_id=row.order_id,
        )

    async def create(self, subscription: UserSubscription) -> UserSubscription:
        row = SQLUserSubscription(
            user_id=subscription.user_id,
            plan_id=subscription.plan_id,
            plan_name=subscription.plan_name,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            status=subscription.status.value,
            auto_renew=subscription.auto_renew,
            payment_id=subscription.payment_id,
            order_id=subscription.order_id,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_current(self, user_id: int, now: datetime) -> Optional[UserSubscription]:
        row = await self.session.scalar(
            select(SQLUserSubscription)
            .where(
                SQLUserSubscription.user_id == user_id,
                SQLUserSubscription.status == SubscriptionStatus.ACTIVE.value,
                SQLUserSubscription.end_date > now,
            )
            .order_by(SQLUserSubscription.end_date.desc())
            .limit(1)
        )
        return self._to_domain(row) if row else None

    async def get_active(self, user_id: int) -> Optional[UserSubscription]:
        row = await self.session.scalar(
            select(SQLUserSubscription)
            .where(
                SQLUserSubscription.user_id == user_id,
                SQLUserSubscription.status == SubscriptionStatus.ACTIVE.value,
            )
            .order_by(SQLUserSubscription.end_date.desc())
            .limit(1)
        )
        return self._to_domain(row) if row else None

    async def cancel_active(self, user_id: int) -> int:
        result = await self.session.execute(
            update(SQLUserSubscription)
            .where(
                SQLUserSubscription.user_id == user_id,
                SQLUserSubscription.status == SubscriptionStatus.ACTIVE.value,
            )
            .values(status=SubscriptionStatus.CANCELLED.value)
        )
        await self.session.commit()
        return result.rowcount or 0

    async def update(self, subscription: UserSubscription) -> UserSubscription:
        row = await self.session.get(SQLUserSubscription, subscription.id)
        if row is None:
            raise NotFoundError("Subscription not found")
        row.status = subscription.status.value
        row.auto_renew = subscription.auto_renew
        row.end_date = subscription.end_date
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)


class SQLAlchemyPurchaseRepository(PurchaseRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLMoviePurchase) -> MoviePurchase:
        return MoviePurchase(
            id=row.id,
            user_id=row.user_id,
            movie_id=row.movie_id,
            movie_title=row.movie_title,
            price=row.price,
            purchase_date=ensure_utc(row.purchase_date),
            expiry_date=ensure_utc(row.expiry_date),
            payment_id=row.payment_id,
            order_id=row.order_id,
            status=row.status,
        )

    async def create(self, purchase: MoviePurchase) -> MoviePurchase:
        row = SQLMoviePurchase(
            user_id=purchase.user_id,
            movie_id=purchase.movie_id,
            movie_title=purchase.movie_title,
            price=purchase.price,
            purchase_date=purchase.purchase_date,
            expiry_date=purchase.expiry_date,
            payment_id=purchase.payment_id,
            order_id=purchase.order_id,
            status=purchase.status.value,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_active(self, user_id: int, now: datetime) -> List[MoviePurchase]:
        rows = await self.session.scalars(
            select(SQLMoviePurchase)
            .where(
                SQLMoviePurchase.user_id == user_id,
                SQLMoviePurchase.status == PurchaseStatus.ACTIVE.value,
                SQLMoviePurchase.expiry_date > now,
            )
            .order_by(SQLMoviePurchase.purchase_date.desc(), SQLMoviePurchase.id.desc())
        )
        return [self._to_domain(row) for row in rows.all()]

    async def get_active_for_movie(self, user_id: int, movie_id: int, now: datetime) -> Optional[MoviePurchase]:
        row = await self.session.scalar(
            select(SQLMoviePurchase)
            .where(
                SQLMoviePurchase.user_id == user_id,
                SQLMoviePurchase.movie_id == movie_id,
                SQLMoviePurchase.status == PurchaseStatus.ACTIVE.value,
                SQLMoviePurchase.expiry_date > now,
            )
            .order_by(SQLMoviePurchase.expiry_date.desc())
            .limit(1)
        )
        return self._to_domain(row) if row else None


class SQLAlchemyTransactionRepository(TransactionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLTransaction) -> Transaction:
        return Transaction(
            id=row.id,
            user_id=row.user_id,
            type=row.type,
            amount=row.amount,
            currency=row.currency,
            payment_id=row.payment_id,
            order_id=row.order_id,
            payment_method=row.payment_method,
            status=row.status,
            item_id=row.item_id,
            item_name=row.item_name,
            gateway=row.gateway,
            transaction_date=ensure_utc(row.transaction_date),
            metadata=row.details or {},
        )

    async def create(self, transaction: Transaction) -> Transaction:
        row = SQLTransaction(
            user_id=transaction.user_id,
            type=transaction.type.value,
            amount=transaction.amount,
            payment_id=transaction.payment_id,
            order_id=transaction.order_id,
            transaction_date=transaction.transaction_date,
            currency=transaction.currency,
            payment_method=transaction.payment_method,
            status=transaction.status,
            item_id=transaction.item_id,
            item_name=transaction.item_name,
            gateway=transaction.gateway,
            details=dict(transaction.metadata),
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_page(self, user_id: int, offset: int, limit: int) -> Tuple[List[Transaction], int]:
        total = await self.session.scalar(
            select(func.count()).select_from(SQLTransaction).where(SQLTransaction.user_id == user_id)
        )
        rows = await self.session.scalars(
            select(SQLTransaction)
            .where(SQLTransaction.user_id == user_id)
            .order_by(SQLTransaction.transaction_date.desc(), SQLTransaction.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()], total or 0
