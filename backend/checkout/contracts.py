from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .validators import normalize_contact


# --- Requests ---
class Buyer(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> str:
        return normalize_contact(value, field="name")

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, value: Any) -> str:
        return normalize_contact(value, field="email")

    @field_validator("phone", mode="before")
    @classmethod
    def _phone(cls, value: Any) -> str:
        return normalize_contact(value, field="phone")


class QuoteRequest(BaseModel):
    # Shape is checked by the pricing engine so bad carts get its messages.
    items: Any = None
    couponCode: Any = None


class OrderRequest(QuoteRequest):
    buyer: Buyer | None = None


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    orderId: str | None = Field(
        default=None, validation_alias=AliasChoices("orderId", "razorpay_order_id")
    )
    paymentId: str | None = Field(
        default=None, validation_alias=AliasChoices("paymentId", "razorpay_payment_id")
    )
    signature: str | None = Field(
        default=None, validation_alias=AliasChoices("signature", "razorpay_signature")
    )


# --- Responses ---
class CouponSummary(BaseModel):
    code: str = ""
    pct: int = 0
    cap: int = 0
    message: str = ""


class QuoteResponse(BaseModel):
    subtotal: int
    discount: int
    total: int
    coupon: CouponSummary


class Breakdown(BaseModel):
    subtotal: int
    discount: int
    total: int


class OrderResponse(BaseModel):
    keyId: str
    orderId: str
    amount: int
    currency: str
    breakdown: Breakdown


class VerifyPaymentResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    error: str
