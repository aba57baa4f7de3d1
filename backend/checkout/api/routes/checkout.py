from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends

from ...catalog import Catalog, get_catalog
from ...contracts import (
    OrderRequest,
    OrderResponse,
    QuoteRequest,
    QuoteResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from ...errors import CheckoutError
from ...logging_config import get_logger
from ...metrics import quotes_total
from ...orders import issue_order
from ...payments import OrderGateway, get_order_gateway
from ...pricing import CouponPolicy, lenient_quote
from ...settings import settings
from ...verification import PaymentVerifier, VerificationResult, get_payment_verifier
from ..utils import coupon_summary, reject

router = APIRouter(tags=["checkout"])
logger = get_logger(__name__)


# Collaborators are injected as factories and built inside each handler's
# error guard.
def catalog_source() -> Callable[[], Catalog]:
    return get_catalog


def gateway_source() -> Callable[[], OrderGateway]:
    return get_order_gateway


def verifier_source() -> Callable[[], PaymentVerifier]:
    return get_payment_verifier


@router.post("/quote", response_model=QuoteResponse)
def quote_cart(
    payload: QuoteRequest,
    load_catalog: Callable[[], Catalog] = Depends(catalog_source),
):
    """Price a cart for live preview; unknown coupons are reported, not rejected."""
    try:
        result = lenient_quote(payload.items, payload.couponCode, catalog=load_catalog())
    except CheckoutError as exc:
        quotes_total.labels(policy=CouponPolicy.LENIENT.value, result="rejected").inc()
        logger.info("quote_rejected", code=exc.code.value, reason=exc.message)
        return reject(exc.message)
    except Exception:
        logger.exception("quote_failed")
        return reject("Quote failed")

    quotes_total.labels(policy=CouponPolicy.LENIENT.value, result="ok").inc()
    return QuoteResponse(**result.breakdown(), coupon=coupon_summary(result))


@router.post("/create-order", response_model=OrderResponse)
def create_order(
    payload: OrderRequest,
    load_catalog: Callable[[], Catalog] = Depends(catalog_source),
    load_gateway: Callable[[], OrderGateway] = Depends(gateway_source),
):
    buyer = payload.buyer.model_dump() if payload.buyer else None
    try:
        order = issue_order(
            payload.items,
            payload.couponCode,
            buyer,
            gateway=load_gateway(),
            catalog=load_catalog(),
            currency=settings.CURRENCY,
            receipt_prefix=settings.RECEIPT_PREFIX,
        )
    except CheckoutError as exc:
        return reject(exc.message)
    except Exception:
        logger.exception("create_order_failed")
        return reject("Could not create order")

    return OrderResponse(
        keyId=settings.RAZORPAY_KEY_ID,
        orderId=order.order_id,
        amount=order.amount,
        currency=order.currency,
        breakdown=order.quote.breakdown(),
    )


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
def verify_payment(
    payload: VerifyPaymentRequest,
    load_verifier: Callable[[], PaymentVerifier] = Depends(verifier_source),
):
    try:
        verifier = load_verifier()
        result = verifier.verify(payload.orderId, payload.paymentId, payload.signature)
    except CheckoutError as exc:
        return reject(exc.message)
    except Exception:
        logger.exception("verify_payment_failed")
        return reject("Verification failed")

    if result is not VerificationResult.ACCEPTED:
        return reject("Signature verification failed")
    return VerifyPaymentResponse(ok=True)
