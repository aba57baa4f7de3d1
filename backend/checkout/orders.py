"""Order issuer: turns a strict quote into a gateway order."""

from __future__ import annotations

import json
import secrets
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .catalog import Catalog
from .errors import CheckoutError, RemoteGatewayError
from .logging_config import get_logger
from .metrics import coupon_redemptions_total, orders_total
from .payments.base import OrderGateway
from .pricing import Quote, strict_quote

logger = get_logger(__name__)

# The gateway bills in paise; quotes are whole rupees.
MINOR_UNITS_PER_UNIT = 100


@dataclass(frozen=True, slots=True)
class IssuedOrder:
    order_id: str
    receipt: str
    amount: int
    currency: str
    quote: Quote

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.amount)


def to_minor_units(amount: int) -> int:
    return amount * MINOR_UNITS_PER_UNIT


def generate_receipt(prefix: str) -> str:
    """Millisecond timestamp plus 4 random bytes. Best-effort unique only."""
    return f"{prefix}_{time.time_ns() // 1_000_000}_{secrets.token_hex(4)}"


def _contact(buyer: Mapping[str, Any] | None, field: str) -> str:
    if not buyer:
        return ""
    value = buyer.get(field)
    return str(value) if value else ""


def build_notes(
    items: Mapping[str, Any], quote: Quote, buyer: Mapping[str, Any] | None = None
) -> dict[str, str]:
    return {
        "items": json.dumps(dict(items), separators=(",", ":"), ensure_ascii=False),
        "couponCode": quote.coupon.code,
        "subtotal": str(quote.subtotal),
        "discount": str(quote.discount),
        "buyerName": _contact(buyer, "name"),
        "buyerEmail": _contact(buyer, "email"),
        "buyerPhone": _contact(buyer, "phone"),
    }


def issue_order(
    items: Mapping[str, Any],
    coupon_code: Any = None,
    buyer: Mapping[str, Any] | None = None,
    *,
    gateway: OrderGateway,
    catalog: Catalog,
    currency: str,
    receipt_prefix: str,
) -> IssuedOrder:
    """Quote ``items`` strictly and create the matching gateway order.

    Nothing is recorded locally; a failure at any step leaves no order behind.
    """
    try:
        quote = strict_quote(items, coupon_code, catalog=catalog)
    except CheckoutError as exc:
        orders_total.labels(result="rejected").inc()
        logger.info("order_quote_rejected", code=exc.code.value, reason=exc.message)
        raise

    receipt = generate_receipt(receipt_prefix)
    result = gateway.create_order(
        amount_minor=to_minor_units(quote.total),
        currency=currency,
        receipt=receipt,
        notes=build_notes(items, quote, buyer),
    )
    if not result.success or not result.id:
        orders_total.labels(result="gateway_error").inc()
        logger.warning("order_gateway_failed", receipt=receipt, error=result.error)
        raise RemoteGatewayError(result.error or None)

    orders_total.labels(result="created").inc()
    if quote.coupon.code:
        coupon_redemptions_total.labels(code=quote.coupon.code).inc()
    logger.info(
        "order_issued",
        order_id=result.id,
        receipt=receipt,
        subtotal=quote.subtotal,
        discount=quote.discount,
        total=quote.total,
        coupon=quote.coupon.code or None,
    )
    return IssuedOrder(
        order_id=result.id,
        receipt=receipt,
        amount=quote.total,
        currency=currency,
        quote=quote,
    )


__all__ = [
    "IssuedOrder",
    "MINOR_UNITS_PER_UNIT",
    "build_notes",
    "generate_receipt",
    "issue_order",
    "to_minor_units",
]
