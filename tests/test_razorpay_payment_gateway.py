import base64
import json

import httpx
import pytest
import pytest_asyncio

from cineverse.domain.exceptions import PaymentGatewayError, PaymentServiceUnavailableError
from cineverse.infrastructure.adapters.services.razorpay_payment_gateway import (
    RazorpayPaymentGateway,
    compute_signature,
)
from cineverse.infrastructure.config.settings import PaymentSettings

from .conftest import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, razorpay_transport


@pytest_asyncio.fixture
async def make_gateway():
    gateways = []

    def factory(transport, key_id=RAZORPAY_KEY_ID, key_secret=RAZORPAY_KEY_SECRET):
        gateway = RazorpayPaymentGateway(PaymentSettings(key_id=key_id, key_secret=key_secret), transport=transport)
        gateways.append(gateway)
        return gateway

    yield factory

    for gateway in gateways:
        await gateway.aclose()


def test_signature_matches_hmac_of_order_and_payment():
    signature = compute_signature("secret", "order_1", "pay_1")

    assert len(signature) == 64
    assert signature == compute_signature("secret", "order_1", "pay_1")
    assert signature != compute_signature("secret", "order_1", "pay_2")


@pytest.mark.asyncio
async def test_verify_signature(make_gateway):
    gateway = make_gateway(razorpay_transport())
    good = compute_signature(RAZORPAY_KEY_SECRET, "order_1", "pay_1")

    assert gateway.verify_signature("order_1", "pay_1", good)
    assert not gateway.verify_signature("order_1", "pay_1", "0" * 64)
    assert not gateway.verify_signature("order_1", "pay_1", "")


@pytest.mark.asyncio
async def test_create_order_posts_with_basic_auth(make_gateway):
    seen = []
    inner = razorpay_transport("order_abc")

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return await inner.handle_async_request(request)

    gateway = make_gateway(httpx.MockTransport(handler))

    order = await gateway.create_order(49900, "INR", "sub_1_" + "x" * 60, notes={"plan_id": "1"})

    assert order.id == "order_abc"
    assert order.amount == 49900
    body = json.loads(seen[0].content)
    assert len(body["receipt"]) == 40
    assert body["notes"] == {"plan_id": "1"}
    expected_auth = base64.b64encode(f"{RAZORPAY_KEY_ID}:{RAZORPAY_KEY_SECRET}".encode()).decode()
    assert seen[0].headers["Authorization"] == f"Basic {expected_auth}"


@pytest.mark.asyncio
async def test_unconfigured_gateway_refuses_orders(make_gateway):
    gateway = make_gateway(razorpay_transport(), key_id=None, key_secret=None)

    assert not gateway.is_configured()
    with pytest.raises(PaymentServiceUnavailableError, match="not configured"):
        await gateway.create_order(100, "INR", "receipt")


@pytest.mark.asyncio
async def test_rejected_order_raises_gateway_error(make_gateway):
    gateway = make_gateway(httpx.MockTransport(lambda request: httpx.Response(400, json={"error": {}})))

    with pytest.raises(PaymentGatewayError, match="Failed to create payment order") as exc_info:
        await gateway.create_order(100, "INR", "receipt")

    assert RAZORPAY_KEY_SECRET not in (exc_info.value.detail or "")


@pytest.mark.asyncio
async def test_unreachable_gateway_raises_unavailable(make_gateway):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    gateway = make_gateway(httpx.MockTransport(handler))

    with pytest.raises(PaymentServiceUnavailableError, match="Payment service unavailable"):
        await gateway.create_order(100, "INR", "receipt")
