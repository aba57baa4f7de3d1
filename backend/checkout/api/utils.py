from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi.responses import JSONResponse

from ..pricing import Quote

METHOD_NOT_ALLOWED = "Method not allowed"


def reject(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def validation_message(path: str, errors: Sequence[Any]) -> str:
    """Map a request-body validation failure to the route's rejection message."""
    if path.endswith("/verify-payment"):
        return "Missing payment fields"
    if path.endswith(("/quote", "/create-order")):
        for error in errors:
            loc = error.get("loc", ()) if isinstance(error, dict) else ()
            if "buyer" in loc:
                return "Invalid buyer details"
        return "Missing items"
    return "Invalid request"


def coupon_summary(quote: Quote) -> dict[str, Any]:
    coupon = quote.coupon
    return {
        "code": coupon.code,
        "pct": coupon.percent,
        "cap": coupon.cap,
        "message": coupon.message,
    }
