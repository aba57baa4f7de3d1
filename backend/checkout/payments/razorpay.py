from __future__ import annotations

import time
from typing import Any

import httpx

from ..logging_config import get_logger
from ..metrics import gateway_request_duration_seconds
from .base import GatewayOrderResult, OrderGateway

logger = get_logger(__name__)

DEFAULT_ERROR = "Could not create order"


def _error_description(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"{DEFAULT_ERROR} (HTTP {response.status_code})"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("description"):
            return str(error["description"])
    return f"{DEFAULT_ERROR} (HTTP {response.status_code})"


class RazorpayOrderGateway(OrderGateway):
    """Creates orders through the Razorpay Orders REST API."""

    name = "razorpay"

    def __init__(
        self,
        *,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        connect_timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not key_id or not key_secret:
            raise ValueError("Razorpay key id and key secret are required")
        self.key_id = key_id
        self.client = httpx.Client(
            base_url=base_url.rstrip("/"),
            auth=(key_id, key_secret),
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def create_order(
        self,
        *,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> GatewayOrderResult:
        payload: dict[str, Any] = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        started = time.perf_counter()
        try:
            response = self.client.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            logger.warning("gateway_unreachable", receipt=receipt, error=type(exc).__name__)
            return GatewayOrderResult(success=False, error=DEFAULT_ERROR)
        finally:
            gateway_request_duration_seconds.labels(provider=self.name).observe(
                time.perf_counter() - started
            )

        if response.is_error:
            description = _error_description(response)
            logger.warning(
                "gateway_order_rejected",
                receipt=receipt,
                status=response.status_code,
                error=description,
            )
            return GatewayOrderResult(success=False, error=description)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("id"):
            logger.warning("gateway_order_malformed", receipt=receipt, status=response.status_code)
            return GatewayOrderResult(success=False, error=DEFAULT_ERROR)

        return GatewayOrderResult(success=True, id=str(data["id"]), raw=data)
