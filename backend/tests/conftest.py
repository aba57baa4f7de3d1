import os
import sys
from pathlib import Path
from typing import Any

import pytest
import sentry_sdk
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Disable outbound Sentry calls during tests
sentry_sdk.init = lambda *args, **kwargs: None  # type: ignore[assignment]
os.environ["SENTRY_DSN"] = ""
os.environ["PAYMENTS_MODE"] = "mock"
os.environ["PAYMENT_PROVIDER"] = "mock"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ.pop("CATALOG_FILE", None)

from backend.checkout.api.routes.checkout import gateway_source  # noqa: E402
from backend.checkout.catalog import get_catalog  # noqa: E402
from backend.checkout.main import app  # noqa: E402
from backend.checkout.payments import get_order_gateway  # noqa: E402
from backend.checkout.payments.base import GatewayOrderResult  # noqa: E402
from backend.checkout.verification import get_payment_verifier  # noqa: E402

TEST_SECRET = "rzp_test_secret"


class RecordingGateway:
    """Gateway double that records each create_order call."""

    name = "recording"

    def __init__(self, result: GatewayOrderResult | None = None) -> None:
        self.result = result or GatewayOrderResult(success=True, id="order_TEST123")
        self.calls: list[dict[str, Any]] = []

    def create_order(
        self,
        *,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> GatewayOrderResult:
        self.calls.append(
            {
                "amount_minor": amount_minor,
                "currency": currency,
                "receipt": receipt,
                "notes": notes,
            }
        )
        return self.result


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def gateway_factory() -> type[RecordingGateway]:
    return RecordingGateway


@pytest.fixture
def client(gateway: RecordingGateway):
    app.dependency_overrides[gateway_source] = lambda: lambda: gateway
    try:
        yield TestClient(app, base_url="http://api.testserver")
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_cached_singletons():
    get_catalog.cache_clear()
    get_order_gateway.cache_clear()
    get_payment_verifier.cache_clear()
    yield
    get_catalog.cache_clear()
    get_order_gateway.cache_clear()
    get_payment_verifier.cache_clear()
