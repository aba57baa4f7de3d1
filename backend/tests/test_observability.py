"""Tests for observability features: metrics, health checks, and request tracing."""

from __future__ import annotations

from backend.checkout.health import health_checker
from backend.checkout.logging_config import add_request_id, add_service_context, redact_secrets
from backend.checkout.metrics import normalize_endpoint
from backend.checkout.settings import settings
from backend.checkout.utils import get_request_id, request_id_ctx


class TestPrometheusMetrics:
    def test_metrics_endpoint_returns_prometheus_format(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "# HELP" in response.text
        assert "zero26_checkout_info" in response.text

    def test_checkout_metrics_tracked(self, client):
        client.post("/v1/quote", json={"items": {"STUDENT_CONF": 1}})
        client.post("/v1/quote", json={"items": {}})
        client.post("/v1/create-order", json={"items": {"STUDENT_CONF": 1}})
        client.post("/v1/verify-payment", json={"orderId": "o", "paymentId": "p", "signature": "x"})

        content = client.get("/metrics").text
        assert 'checkout_quotes_total{policy="lenient",result="ok"}' in content
        assert 'checkout_quotes_total{policy="lenient",result="rejected"}' in content
        assert 'checkout_orders_total{result="created"}' in content
        assert 'checkout_payment_verifications_total{result="rejected"}' in content
        assert "http_requests_total" in content

    def test_endpoint_normalization(self):
        assert normalize_endpoint("/v1/quote") == "/v1/quote"
        assert normalize_endpoint("/v1/orders/12345") == "/v1/orders/{id}"
        assert normalize_endpoint("/v1/orders/order_Ab12Cd34Ef56Gh78Ij90") == "/v1/orders/{id}"


class TestHealth:
    def test_health_in_mock_mode(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["gateway"] == {"status": "mock", "verification": "ok"}
        assert body["checks"]["catalog"]["ticket_types"] == 4

    def test_live_mode_without_keys_is_degraded(self, monkeypatch):
        monkeypatch.setattr(settings, "PAYMENTS_MODE", "live")
        monkeypatch.setattr(settings, "PAYMENT_PROVIDER", "razorpay")
        monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", "")
        status = health_checker.check_all()
        assert status["status"] == "degraded"
        assert status["checks"]["gateway"]["status"] == "error"

    def test_unreadable_catalog_is_degraded(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "CATALOG_FILE", tmp_path / "missing.json")
        status = health_checker.check_all()
        assert status["status"] == "degraded"
        assert status["checks"]["catalog"]["status"] == "error"


class TestRequestTracing:
    def test_request_id_generated_when_absent(self, client):
        response = client.post("/v1/quote", json={"items": {"STUDENT_CONF": 1}})
        assert len(response.headers["X-Request-ID"]) == 36

    def test_request_id_context_cleared_outside_requests(self):
        assert get_request_id() == ""


class TestLogProcessors:
    def test_signatures_and_secrets_are_masked(self):
        event = redact_secrets(
            None,
            "info",
            {"event": "payment_signature_rejected", "signature": "abc123", "key_secret": "s3cret", "order_id": "order_1"},
        )
        assert event["signature"] == "[redacted]"
        assert event["key_secret"] == "[redacted]"
        assert event["order_id"] == "order_1"

    def test_request_id_attached_inside_request_context(self):
        token = request_id_ctx.set("req-42")
        try:
            event = add_request_id(None, "info", {"event": "quote_rejected"})
        finally:
            request_id_ctx.reset(token)
        assert event["request_id"] == "req-42"
        assert "request_id" not in add_request_id(None, "info", {"event": "quote_rejected"})

    def test_service_context(self):
        event = add_service_context(None, "info", {"event": "order_issued"})
        assert event["service"] == "zero26-checkout"
        assert event["payments_mode"] == "mock"
