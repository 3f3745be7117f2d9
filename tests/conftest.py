import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-entropy-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import json  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from cineverse.app import app  # noqa: E402
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository  # noqa: E402
from cineverse.domain.ports.repositories.movie_repository import MovieRepository  # noqa: E402
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository  # noqa: E402
from cineverse.domain.ports.repositories.user_repository import UserRepository  # noqa: E402
from cineverse.domain.ports.services.auth_service import AuthService  # noqa: E402
from cineverse.domain.ports.services.email_sender import EmailSender  # noqa: E402
from cineverse.domain.ports.services.logger import LoggerPort  # noqa: E402
from cineverse.domain.ports.services.metadata_client import MetadataClient  # noqa: E402
from cineverse.infrastructure.adapters.repositories.sqlalchemy_user_repository import (  # noqa: E402
    SQLAlchemyUserRepository,
)
from cineverse.infrastructure.adapters.services.jwt_auth_service import JWTAuthService  # noqa: E402
from cineverse.infrastructure.adapters.services.razorpay_payment_gateway import RazorpayPaymentGateway  # noqa: E402
from cineverse.infrastructure.config.dependencies import (  # noqa: E402
    get_email_sender,
    get_metadata_client,
    get_payment_gateway,
)
from cineverse.infrastructure.config.settings import PaymentSettings, Settings  # noqa: E402
from cineverse.infrastructure.persistence.database import get_session  # noqa: E402
from cineverse.infrastructure.persistence.models import table_registry  # noqa: E402

from .factories import movie_factory, user_factory  # noqa: E402

RAZORPAY_KEY_ID = "rzp_test_key"
RAZORPAY_KEY_SECRET = "rzp_test_secret"


def razorpay_transport(order_id: str = "order_test_123") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path.endswith("/orders"):
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "id": order_id,
                    "amount": body["amount"],
                    "currency": body["currency"],
                    "receipt": body["receipt"],
                },
            )
        return httpx.Response(404, json={"error": {"description": "not found"}})

    return httpx.MockTransport(handler)


class BaseIntegrationTest:
    """Base class for API tests against an in-memory SQLite database"""

    @pytest_asyncio.fixture
    async def sqlite_engine(self):
        engine = create_async_engine(
            "sqlite+aiosqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
        )
        async with engine.begin() as conn:
            await conn.run_sync(table_registry.metadata.create_all)

        yield engine

        async with engine.begin() as conn:
            await conn.run_sync(table_registry.metadata.drop_all)
        await engine.dispose()

    @pytest_asyncio.fixture
    async def test_session(self, sqlite_engine):
        async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
            yield session

    @pytest.fixture
    def metadata_client(self):
        client = AsyncMock(spec=MetadataClient)
        client.get_popular.return_value = movie_factory.create_page(start_id=100)
        client.get_trending.return_value = movie_factory.create_page(start_id=200)
        client.get_top_rated.return_value = movie_factory.create_page(start_id=300)
        return client

    @pytest.fixture
    def email_sender(self):
        return AsyncMock(spec=EmailSender)

    @pytest_asyncio.fixture
    async def payment_gateway(self):
        settings = PaymentSettings(key_id=RAZORPAY_KEY_ID, key_secret=RAZORPAY_KEY_SECRET)
        gateway = RazorpayPaymentGateway(settings, transport=razorpay_transport())
        yield gateway
        await gateway.aclose()

    @pytest_asyncio.fixture
    async def client(self, test_session, metadata_client, email_sender, payment_gateway):
        """Create test HTTP client with database and outbound service overrides"""

        async def override_get_session():
            yield test_session

        app.dependency_overrides[get_session] = override_get_session
        app.dependency_overrides[get_metadata_client] = lambda: metadata_client
        app.dependency_overrides[get_email_sender] = lambda: email_sender
        app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

        app.dependency_overrides.clear()

    @pytest.fixture
    def auth_service(self):
        return JWTAuthService(Settings())

    @pytest_asyncio.fixture
    async def user(self, test_session, auth_service):
        repository = SQLAlchemyUserRepository(test_session)
        return await repository.create(
            user_factory.create_domain_user(
                email="viewer@example.com",
                password_hash=auth_service.hash_password("viewer-password"),
                is_verified=True,
            )
        )

    @pytest.fixture
    def token(self, user, auth_service):
        return auth_service.create_access_token(user.email, "user")

    @pytest.fixture
    def auth_headers(self, token):
        return {"Authorization": f"Bearer {token}"}

    @pytest.fixture
    def admin_headers(self, auth_service):
        return {"Authorization": f"Bearer {auth_service.create_access_token('admin@example.com', 'admin')}"}

    @staticmethod
    def sent_code(email_sender) -> str:
        """The most recent code handed to the email sender double"""
        return email_sender.send_verification_code.await_args.args[1]


# Shared fixtures for use case testing
@pytest.fixture
def mock_user_repository():
    """Mock user repository for use case testing"""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_auth_service():
    """Mock auth service for use case testing"""
    return MagicMock(spec=AuthService)


@pytest.fixture
def mock_activity_repository():
    return AsyncMock(spec=ActivityRepository)


@pytest.fixture
def mock_movie_repository():
    return AsyncMock(spec=MovieRepository)


@pytest.fixture
def mock_search_history_repository():
    return AsyncMock(spec=SearchHistoryRepository)


@pytest.fixture
def mock_metadata_client():
    return AsyncMock(spec=MetadataClient)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=LoggerPort)
