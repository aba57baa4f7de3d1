from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel


class GatewayOrderResult(BaseModel):
    success: bool
    id: str | None = None
    error: str | None = None
    raw: dict[str, Any] | None = None


class OrderGateway(Protocol):
    name: str

    def create_order(
        self,
        *,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str] | None = None,
    ) -> GatewayOrderResult: ...
