"""Checkout error taxonomy.

Every error carries a stable code and a message that is safe to show to the
buyer as-is. Signature mismatches are not errors; see ``verification``.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    REQUEST_REJECTED = "REQUEST_REJECTED"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    UNKNOWN_TICKET_TYPE = "UNKNOWN_TICKET_TYPE"
    EMPTY_CART = "EMPTY_CART"
    MISSING_ITEMS = "MISSING_ITEMS"
    INVALID_COUPON = "INVALID_COUPON"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    GATEWAY_NOT_CONFIGURED = "GATEWAY_NOT_CONFIGURED"
    MALFORMED_CALLBACK = "MALFORMED_CALLBACK"


class CheckoutError(Exception):
    """Base error with code and user-safe message."""

    code = ErrorCode.REQUEST_REJECTED
    default_message = "Request rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class CartValidationError(CheckoutError):
    """Bad cart shape, out-of-range quantity, unknown ticket type or empty cart."""


class MissingItems(CartValidationError):
    code = ErrorCode.MISSING_ITEMS
    default_message = "Missing items"


class InvalidQuantity(CartValidationError):
    code = ErrorCode.INVALID_QUANTITY
    default_message = "Invalid quantity"

    def __init__(self, ticket_type: str, quantity: int) -> None:
        super().__init__()
        self.ticket_type = ticket_type
        self.quantity = quantity


class UnknownTicketType(CartValidationError):
    code = ErrorCode.UNKNOWN_TICKET_TYPE
    default_message = "Invalid ticket type"

    def __init__(self, ticket_type: str) -> None:
        super().__init__()
        self.ticket_type = ticket_type


class EmptyCart(CartValidationError):
    code = ErrorCode.EMPTY_CART
    default_message = "Please select at least one pass"


class InvalidCoupon(CheckoutError):
    code = ErrorCode.INVALID_COUPON
    default_message = "Invalid coupon code"

    def __init__(self, coupon_code: str) -> None:
        super().__init__()
        self.coupon_code = coupon_code


class RemoteGatewayError(CheckoutError):
    """Order creation failed at the gateway. Not retried here."""

    code = ErrorCode.GATEWAY_ERROR
    default_message = "Could not create order"


class GatewayNotConfigured(CheckoutError):
    code = ErrorCode.GATEWAY_NOT_CONFIGURED
    default_message = "Payment gateway is not configured"


class MalformedCallback(CheckoutError):
    code = ErrorCode.MALFORMED_CALLBACK
    default_message = "Missing payment fields"


__all__ = [
    "CartValidationError",
    "CheckoutError",
    "EmptyCart",
    "ErrorCode",
    "GatewayNotConfigured",
    "InvalidCoupon",
    "InvalidQuantity",
    "MalformedCallback",
    "MissingItems",
    "RemoteGatewayError",
    "UnknownTicketType",
]
