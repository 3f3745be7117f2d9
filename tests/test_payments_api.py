import pytest
import pytest_asyncio
from fastapi import status

from cineverse.app import app
from cineverse.applications.use_cases.payment.plans import SeedPlansUseCase
from cineverse.infrastructure.adapters.repositories.sqlalchemy_commerce_repository import SQLAlchemyPlanRepository
from cineverse.infrastructure.adapters.services.razorpay_payment_gateway import (
    RazorpayPaymentGateway,
    compute_signature,
)
from cineverse.infrastructure.config.dependencies import get_payment_gateway
from cineverse.infrastructure.config.settings import PaymentSettings

from .conftest import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, BaseIntegrationTest, razorpay_transport


def _confirmation(order_id: str, payment_id: str, secret: str = RAZORPAY_KEY_SECRET) -> dict:
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": compute_signature(secret, order_id, payment_id),
    }


class TestPaymentsAPI(BaseIntegrationTest):
    """Integration tests for plans, subscriptions and movie purchases"""

    @pytest_asyncio.fixture
    async def plans(self, test_session):
        use_case = SeedPlansUseCase(SQLAlchemyPlanRepository(test_session))
        return {plan.name: plan for plan in await use_case.execute()}

    async def _subscribe(self, client, auth_headers, plan_id, payment_id="pay_sub_1"):
        return await client.post(
            "/payments/subscription/verify",
            json={"plan_id": plan_id, **_confirmation("order_test_123", payment_id)},
            headers=auth_headers,
        )

    @pytest.mark.asyncio
    async def test_list_plans(self, client, plans):
        response = await client.get("/payments/plans")

        assert response.status_code == status.HTTP_200_OK
        names = [plan["name"] for plan in response.json()["plans"]]
        assert names == ["Basic", "Premium", "Ultra"]

    @pytest.mark.asyncio
    async def test_seeding_twice_keeps_one_row_per_plan(self, client, plans, test_session):
        await SeedPlansUseCase(SQLAlchemyPlanRepository(test_session)).execute()

        response = await client.get("/payments/plans")

        assert len(response.json()["plans"]) == 3

    @pytest.mark.asyncio
    async def test_create_subscription_order(self, client, plans, auth_headers):
        response = await client.post(
            "/payments/subscription/create-order", json={"plan_id": plans["Premium"].id}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["order_id"] == "order_test_123"
        assert data["amount"] == 49900
        assert data["currency"] == "INR"
        assert data["key_id"] == RAZORPAY_KEY_ID
        assert data["plan"]["name"] == "Premium"

    @pytest.mark.asyncio
    async def test_create_order_for_unknown_plan(self, client, plans, auth_headers):
        response = await client.post(
            "/payments/subscription/create-order", json={"plan_id": 9999}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_create_order_requires_authentication(self, client, plans):
        response = await client.post("/payments/subscription/create-order", json={"plan_id": plans["Basic"].id})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_unconfigured_gateway_returns_503(self, client, plans, auth_headers):
        gateway = RazorpayPaymentGateway(PaymentSettings(key_id=None, key_secret=None), transport=razorpay_transport())
        app.dependency_overrides[get_payment_gateway] = lambda: gateway
        try:
            response = await client.post(
                "/payments/subscription/create-order", json={"plan_id": plans["Basic"].id}, headers=auth_headers
            )
        finally:
            await gateway.aclose()

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert RAZORPAY_KEY_SECRET not in response.text

    @pytest.mark.asyncio
    async def test_verify_subscription_activates_plan(self, client, plans, auth_headers):
        response = await self._subscribe(client, auth_headers, plans["Ultra"].id)

        assert response.status_code == status.HTTP_200_OK
        subscription = response.json()["subscription"]
        assert subscription["plan_name"] == "Ultra"
        assert subscription["status"] == "active"

        current = (await client.get("/payments/subscription/current", headers=auth_headers)).json()
        assert current["has_active_subscription"] is True
        assert current["days_remaining"] == 30

    @pytest.mark.asyncio
    async def test_bad_signature_is_rejected(self, client, plans, auth_headers):
        payload = {"plan_id": plans["Basic"].id, **_confirmation("order_test_123", "pay_1", secret="wrong-secret")}

        response = await client.post("/payments/subscription/verify", json=payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid payment signature"
        current = (await client.get("/payments/subscription/current", headers=auth_headers)).json()
        assert current["has_active_subscription"] is False

    @pytest.mark.asyncio
    async def test_new_subscription_replaces_previous(self, client, plans, auth_headers):
        await self._subscribe(client, auth_headers, plans["Basic"].id, payment_id="pay_1")
        await self._subscribe(client, auth_headers, plans["Premium"].id, payment_id="pay_2")

        current = (await client.get("/payments/subscription/current", headers=auth_headers)).json()

        assert current["subscription"]["plan_name"] == "Premium"

    @pytest.mark.asyncio
    async def test_cancel_subscription(self, client, plans, auth_headers):
        await self._subscribe(client, auth_headers, plans["Basic"].id)

        response = await client.post("/payments/subscription/cancel", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["subscription"]["status"] == "cancelled"
        current = (await client.get("/payments/subscription/current", headers=auth_headers)).json()
        assert current["has_active_subscription"] is False

    @pytest.mark.asyncio
    async def test_cancel_without_subscription(self, client, auth_headers):
        response = await client.post("/payments/subscription/cancel", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_movie_purchase_grants_access(self, client, auth_headers):
        movie = {"movie_id": 27205, "movie_title": "Inception", "price": 149}

        order = await client.post("/payments/movie/create-order", json=movie, headers=auth_headers)
        before = await client.get("/payments/movie/access/27205", headers=auth_headers)
        verified = await client.post(
            "/payments/movie/verify",
            json={**movie, **_confirmation(order.json()["order_id"], "pay_movie_1")},
            headers=auth_headers,
        )
        after = await client.get("/payments/movie/access/27205", headers=auth_headers)
        other = await client.get("/payments/movie/access/603", headers=auth_headers)

        assert order.json()["amount"] == 14900
        assert before.json()["has_access"] is False
        assert verified.status_code == status.HTTP_200_OK
        assert after.json()["has_access"] is True
        assert after.json()["access_type"] == "purchase"
        assert other.json()["has_access"] is False

        purchased = (await client.get("/payments/movie/purchased", headers=auth_headers)).json()
        assert [purchase["movie_id"] for purchase in purchased["purchases"]] == [27205]

    @pytest.mark.asyncio
    async def test_subscription_grants_access_to_any_movie(self, client, plans, auth_headers):
        await self._subscribe(client, auth_headers, plans["Basic"].id)

        response = await client.get("/payments/movie/access/603", headers=auth_headers)

        assert response.json()["has_access"] is True
        assert response.json()["access_type"] == "subscription"

    @pytest.mark.asyncio
    async def test_transactions_are_paged_newest_first(self, client, plans, auth_headers):
        await self._subscribe(client, auth_headers, plans["Basic"].id, payment_id="pay_1")
        await client.post(
            "/payments/movie/verify",
            json={
                "movie_id": 603,
                "movie_title": "The Matrix",
                "price": 99,
                **_confirmation("order_test_123", "pay_2"),
            },
            headers=auth_headers,
        )

        first = (await client.get("/payments/transactions", params={"limit": 1}, headers=auth_headers)).json()
        second = (
            await client.get("/payments/transactions", params={"limit": 1, "page": 2}, headers=auth_headers)
        ).json()

        assert first["total"] == 2
        assert first["pages"] == 2
        assert first["transactions"][0]["type"] == "movie_purchase"
        assert second["transactions"][0]["type"] == "subscription"
