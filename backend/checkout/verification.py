"""Payment callback verification.

The gateway signs ``order_id|payment_id`` with the key secret using
HMAC-SHA256 and hands the lowercase hex digest to the client after a
successful charge. A mismatch is a normal outcome (``REJECTED``), while a
callback with missing fields is a malformed request.
"""

from __future__ import annotations

import hashlib
import hmac
from enum import Enum
from functools import lru_cache

from .errors import GatewayNotConfigured, MalformedCallback
from .logging_config import get_logger
from .metrics import payment_verifications_total
from .settings import settings

logger = get_logger(__name__)


class VerificationResult(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class PaymentVerifier:
    def __init__(self, secret: str) -> None:
        self._secret = secret

    def verify(
        self, order_id: str | None, payment_id: str | None, signature: str | None
    ) -> VerificationResult:
        if not order_id or not payment_id or not signature:
            payment_verifications_total.labels(result="malformed").inc()
            raise MalformedCallback()
        if not self._secret:
            raise GatewayNotConfigured()

        expected = compute_signature(self._secret, order_id, payment_id)
        if hmac.compare_digest(expected.encode(), signature.encode()):
            payment_verifications_total.labels(result="accepted").inc()
            logger.info("payment_verified", order_id=order_id, payment_id=payment_id)
            return VerificationResult.ACCEPTED

        payment_verifications_total.labels(result="rejected").inc()
        logger.warning("payment_signature_rejected", order_id=order_id, payment_id=payment_id)
        return VerificationResult.REJECTED


@lru_cache(maxsize=1)
def get_payment_verifier() -> PaymentVerifier:
    return PaymentVerifier(settings.RAZORPAY_KEY_SECRET)


__all__ = [
    "PaymentVerifier",
    "VerificationResult",
    "compute_signature",
    "get_payment_verifier",
]
