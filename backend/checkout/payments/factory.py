from __future__ import annotations

from functools import lru_cache

from ..settings import settings
from .base import OrderGateway
from .mock import MockOrderGateway
from .razorpay import RazorpayOrderGateway


@lru_cache(maxsize=1)
def get_order_gateway() -> OrderGateway:
    mode = (settings.PAYMENTS_MODE or "mock").lower()
    provider_name = (settings.PAYMENT_PROVIDER or "mock").lower()

    if mode == "mock" or provider_name == "mock":
        return MockOrderGateway()

    if provider_name == "razorpay":
        if not settings.gateway_configured:
            raise RuntimeError(
                "RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set when PAYMENTS_MODE=live."
            )
        return RazorpayOrderGateway(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_API_BASE,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
            connect_timeout=settings.GATEWAY_CONNECT_TIMEOUT_SECONDS,
        )

    raise RuntimeError(
        f"Unsupported PAYMENT_PROVIDER '{settings.PAYMENT_PROVIDER}'. Set PAYMENTS_MODE=mock for the demo."
    )
