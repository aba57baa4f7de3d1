from __future__ import annotations

from typing import Any
from uuid import uuid4

from .base import GatewayOrderResult, OrderGateway


class MockOrderGateway(OrderGateway):
    """Toy gateway that accepts every order."""

    name = "mock"

    def create_order(
        self,
        *,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> GatewayOrderResult:
        order_id = f"order_mock{uuid4().hex[:14]}"
        payload: dict[str, Any] = {
            "id": order_id,
            "entity": "order",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
            "notes": notes or {},
        }
        return GatewayOrderResult(success=True, id=order_id, raw=payload)
