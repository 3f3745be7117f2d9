from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.applications.services.movie_aggregation_service import MovieAggregationService
from cineverse.applications.services.movie_browse_service import MovieBrowseService
from cineverse.applications.services.personalized_recommendation_service import PersonalizedRecommendationService
from cineverse.applications.services.verification_service import VerificationService
from cineverse.domain.exceptions import PermissionDeniedError
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.commerce_repository import (
    PlanRepository,
    PurchaseRepository,
    SubscriptionRepository,
    TransactionRepository,
)
from cineverse.domain.ports.repositories.library_repository import ViewingHistoryRepository, WatchlistRepository
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.domain.ports.repositories.social_repository import CommentRepository, EngagementRepository
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.domain.ports.repositories.verification_code_store import VerificationCodeStore
from cineverse.domain.ports.services.auth_service import AuthService
from cineverse.domain.ports.services.email_sender import EmailSender
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.domain.ports.services.payment_gateway import PaymentGateway
from cineverse.infrastructure.adapters.repositories.sqlalchemy_activity_repository import (
    SQLAlchemyActivityRepository,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_commerce_repository import (
    SQLAlchemyPlanRepository,
    SQLAlchemyPurchaseRepository,
    SQLAlchemySubscriptionRepository,
    SQLAlchemyTransactionRepository,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_library_repository import (
    SQLAlchemyViewingHistoryRepository,
    SQLAlchemyWatchlistRepository,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_movie_repository import SQLAlchemyMovieRepository
from cineverse.infrastructure.adapters.repositories.sqlalchemy_search_history_repository import (
    SQLAlchemySearchHistoryRepository,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_social_repository import (
    SQLAlchemyCommentRepository,
    SQLAlchemyEngagementRepository,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_user_repository import SQLAlchemyUserRepository
from cineverse.infrastructure.adapters.repositories.in_memory_verification_code_store import (
    InMemoryVerificationCodeStore,
)
from cineverse.infrastructure.adapters.repositories.sqlalchemy_verification_code_store import (
    SQLAlchemyVerificationCodeStore,
)
from cineverse.infrastructure.adapters.services.jwt_auth_service import JWTAuthService
from cineverse.infrastructure.adapters.services.razorpay_payment_gateway import RazorpayPaymentGateway
from cineverse.infrastructure.adapters.services.smtp_email_sender import SmtpEmailSender
from cineverse.infrastructure.adapters.services.tmdb_metadata_client import TMDBMetadataClient
from cineverse.infrastructure.config.settings import EmailSettings, PaymentSettings, Settings, TMDBSettings
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter
from cineverse.infrastructure.persistence.database import get_session

ADMIN_ROLE = "admin"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def get_logger() -> LoggerPort:
    return StdLoggerAdapter("cineverse")


def get_settings() -> Settings:
    return Settings()


def get_tmdb_settings() -> TMDBSettings:
    return TMDBSettings()


def get_payment_settings() -> PaymentSettings:
    return PaymentSettings()


def get_email_settings() -> EmailSettings:
    return EmailSettings()


class _ClientStore:
    metadata_client: Optional[TMDBMetadataClient] = None
    payment_gateway: Optional[RazorpayPaymentGateway] = None
    verification_code_store: Optional[InMemoryVerificationCodeStore] = None


def get_metadata_client() -> MetadataClient:
    if _ClientStore.metadata_client is None:
        _ClientStore.metadata_client = TMDBMetadataClient(TMDBSettings(), logger=StdLoggerAdapter("cineverse.tmdb"))
    return _ClientStore.metadata_client


def get_payment_gateway() -> PaymentGateway:
    if _ClientStore.payment_gateway is None:
        _ClientStore.payment_gateway = RazorpayPaymentGateway(
            PaymentSettings(), logger=StdLoggerAdapter("cineverse.payments")
        )
    return _ClientStore.payment_gateway


async def close_clients() -> None:
    if _ClientStore.metadata_client is not None:
        await _ClientStore.metadata_client.aclose()
        _ClientStore.metadata_client = None
    if _ClientStore.payment_gateway is not None:
        await _ClientStore.payment_gateway.aclose()
        _ClientStore.payment_gateway = None


def get_email_sender(settings: Annotated[EmailSettings, Depends(get_email_settings)]) -> EmailSender:
    return SmtpEmailSender(settings, logger=StdLoggerAdapter("cineverse.email"))


def get_auth_service(settings: Annotated[Settings, Depends(get_settings)]) -> AuthService:
    return JWTAuthService(settings)


def get_user_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> UserRepository:
    return SQLAlchemyUserRepository(session)


def get_activity_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> ActivityRepository:
    return SQLAlchemyActivityRepository(session)


def get_movie_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> MovieRepository:
    return SQLAlchemyMovieRepository(session)


def get_search_history_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> SearchHistoryRepository:
    return SQLAlchemySearchHistoryRepository(session)


def get_watchlist_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> WatchlistRepository:
    return SQLAlchemyWatchlistRepository(session)


def get_viewing_history_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ViewingHistoryRepository:
    return SQLAlchemyViewingHistoryRepository(session)


def get_plan_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> PlanRepository:
    return SQLAlchemyPlanRepository(session)


def get_subscription_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> SubscriptionRepository:
    return SQLAlchemySubscriptionRepository(session)


def get_purchase_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> PurchaseRepository:
    return SQLAlchemyPurchaseRepository(session)


def get_transaction_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> TransactionRepository:
    return SQLAlchemyTransactionRepository(session)


def get_comment_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> CommentRepository:
    return SQLAlchemyCommentRepository(session)


def get_engagement_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> EngagementRepository:
    return SQLAlchemyEngagementRepository(session)


def get_verification_code_store(
    settings: Annotated[Settings, Depends(get_settings)], session: Annotated[AsyncSession, Depends(get_session)]
) -> VerificationCodeStore:
    if settings.VERIFICATION_CODE_STORE == "memory":
        # shared by every request in this process
        if _ClientStore.verification_code_store is None:
            _ClientStore.verification_code_store = InMemoryVerificationCodeStore()
        return _ClientStore.verification_code_store
    return SQLAlchemyVerificationCodeStore(session)


def get_verification_service(
    code_store: Annotated[VerificationCodeStore, Depends(get_verification_code_store)],
    email_sender: Annotated[EmailSender, Depends(get_email_sender)],
    logger: Annotated[LoggerPort, Depends(get_logger)],
) -> VerificationService:
    return VerificationService(code_store, email_sender, logger)


def get_personalized_recommendation_service(
    metadata_client: Annotated[MetadataClient, Depends(get_metadata_client)],
    activity_repository: Annotated[ActivityRepository, Depends(get_activity_repository)],
    logger: Annotated[LoggerPort, Depends(get_logger)],
) -> PersonalizedRecommendationService:
    return PersonalizedRecommendationService(metadata_client, activity_repository, logger)


def get_movie_aggregation_service(
    metadata_client: Annotated[MetadataClient, Depends(get_metadata_client)],
    search_history_repository: Annotated[SearchHistoryRepository, Depends(get_search_history_repository)],
    logger: Annotated[LoggerPort, Depends(get_logger)],
) -> MovieAggregationService:
    return MovieAggregationService(metadata_client, search_history_repository, logger)


def get_movie_browse_service(
    metadata_client: Annotated[MetadataClient, Depends(get_metadata_client)],
) -> MovieBrowseService:
    return MovieBrowseService(metadata_client)


class Principal(BaseModel):
    email: str
    role: str
    user: Optional[User] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    token: Annotated[str, Depends(oauth2_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> Principal:
    payload = auth_service.decode_token(token)
    if payload is None:
        raise _credentials_exception()

    email, role = payload["sub"], payload.get("role", "user")
    if role == ADMIN_ROLE:
        return Principal(email=email, role=role)

    user = await user_repository.get_by_email(email)
    if not user:
        raise _credentials_exception()
    return Principal(email=email, role=role, user=user)


async def get_current_user(principal: Annotated[Principal, Depends(get_current_principal)]) -> User:
    if principal.user is None:
        raise PermissionDeniedError("A user account is required for this action")
    return principal.user


async def get_optional_user(
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> Optional[User]:
    if not token:
        return None
    payload = auth_service.decode_token(token)
    if payload is None or payload.get("role") == ADMIN_ROLE:
        return None
    return await user_repository.get_by_email(payload["sub"])


async def require_admin(principal: Annotated[Principal, Depends(get_current_principal)]) -> Principal:
    if not principal.is_admin:
        raise PermissionDeniedError("Admin access required")
    return principal
