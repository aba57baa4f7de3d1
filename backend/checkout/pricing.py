"""Quote engine: cart subtotal, coupon resolution and totals.

One pricing routine serves both call sites. ``CouponPolicy`` decides what an
unknown coupon code does: checkout (``STRICT``) rejects it, while the live
price preview (``LENIENT``) prices the cart without a discount and explains
why. All amounts are whole currency units; conversion to the gateway's minor
unit happens in ``orders``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from .catalog import Catalog, Coupon
from .errors import EmptyCart, InvalidCoupon, InvalidQuantity, MissingItems, UnknownTicketType

MAX_QUANTITY = 50
CURRENCY_SYMBOL = "₹"
INVALID_COUPON_MESSAGE = "Invalid coupon code"


class CouponPolicy(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True, slots=True)
class AppliedCoupon:
    code: str = ""
    percent: int = 0
    cap: int = 0
    discount: int = 0
    message: str = ""


NO_COUPON = AppliedCoupon()


@dataclass(frozen=True, slots=True)
class Quote:
    subtotal: int
    coupon: AppliedCoupon

    @property
    def discount(self) -> int:
        return self.coupon.discount

    @property
    def total(self) -> int:
        return self.subtotal - self.coupon.discount

    def breakdown(self) -> dict[str, int]:
        return {"subtotal": self.subtotal, "discount": self.discount, "total": self.total}


def coerce_quantity(value: Any) -> int:
    """Coerce a client-supplied quantity to an int, truncating toward zero.

    Anything non-numeric or non-finite becomes 0 so the entry is skipped.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.trunc(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
        return math.trunc(number) if math.isfinite(number) else 0
    return 0


def calculate_subtotal(items: Mapping[str, Any], catalog: Catalog) -> int:
    if not isinstance(items, Mapping):
        raise MissingItems()

    subtotal = 0
    for ticket_type, raw_quantity in items.items():
        quantity = coerce_quantity(raw_quantity)
        if quantity < 0 or quantity > MAX_QUANTITY:
            raise InvalidQuantity(str(ticket_type), quantity)
        if quantity == 0:
            continue
        unit_price = catalog.unit_price(ticket_type) if isinstance(ticket_type, str) else None
        if unit_price is None:
            raise UnknownTicketType(str(ticket_type))
        subtotal += unit_price * quantity
    return subtotal


def normalize_coupon_code(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


def compute_discount(subtotal: int, coupon: Coupon) -> int:
    """Percentage of ``subtotal`` rounded half-up to a whole unit, then capped."""
    raw = (Decimal(subtotal) * Decimal(coupon.percent) / Decimal(100)).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    return min(int(raw), coupon.cap, subtotal)


def coupon_message(coupon: Coupon) -> str:
    return f"Applied {coupon.code}: {coupon.percent}% off (max {CURRENCY_SYMBOL}{coupon.cap})"


def apply_coupon(
    subtotal: int,
    coupon_code: Any,
    catalog: Catalog,
    policy: CouponPolicy = CouponPolicy.LENIENT,
) -> AppliedCoupon:
    if coupon_code and not isinstance(coupon_code, str):
        # A truthy code that is not text can never name a coupon.
        if policy is CouponPolicy.STRICT:
            raise InvalidCoupon(str(coupon_code))
        return AppliedCoupon(message=INVALID_COUPON_MESSAGE)

    code = normalize_coupon_code(coupon_code)
    if not code:
        return NO_COUPON

    coupon = catalog.coupon(code)
    if coupon is None:
        if policy is CouponPolicy.STRICT:
            raise InvalidCoupon(code)
        return AppliedCoupon(code=code, message=INVALID_COUPON_MESSAGE)

    return AppliedCoupon(
        code=code,
        percent=coupon.percent,
        cap=coupon.cap,
        discount=compute_discount(subtotal, coupon),
        message=coupon_message(coupon),
    )


def quote(
    items: Mapping[str, Any],
    coupon_code: Any = None,
    *,
    catalog: Catalog,
    policy: CouponPolicy = CouponPolicy.LENIENT,
) -> Quote:
    """Price ``items`` and resolve ``coupon_code`` under ``policy``.

    Raises:
        MissingItems: ``items`` is not a mapping.
        InvalidQuantity: a quantity is below 0 or above ``MAX_QUANTITY``.
        UnknownTicketType: a non-zero entry names no catalog ticket.
        EmptyCart: nothing chargeable was selected. Checked before the coupon.
        InvalidCoupon: unknown code under ``CouponPolicy.STRICT``.
    """
    subtotal = calculate_subtotal(items, catalog)
    if subtotal <= 0:
        raise EmptyCart()
    return Quote(subtotal=subtotal, coupon=apply_coupon(subtotal, coupon_code, catalog, policy))


def strict_quote(items: Mapping[str, Any], coupon_code: Any = None, *, catalog: Catalog) -> Quote:
    """Quote used for chargeable orders: unknown coupons are rejected."""
    return quote(items, coupon_code, catalog=catalog, policy=CouponPolicy.STRICT)


def lenient_quote(items: Mapping[str, Any], coupon_code: Any = None, *, catalog: Catalog) -> Quote:
    """Quote used for price previews: unknown coupons price at zero discount."""
    return quote(items, coupon_code, catalog=catalog, policy=CouponPolicy.LENIENT)


__all__ = [
    "AppliedCoupon",
    "CouponPolicy",
    "MAX_QUANTITY",
    "NO_COUPON",
    "Quote",
    "apply_coupon",
    "calculate_subtotal",
    "coerce_quantity",
    "compute_discount",
    "coupon_message",
    "lenient_quote",
    "normalize_coupon_code",
    "quote",
    "strict_quote",
]
