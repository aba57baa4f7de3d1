from __future__ import annotations

import hashlib
import hmac

import pytest
from backend.checkout.errors import GatewayNotConfigured, MalformedCallback
from backend.checkout.verification import (
    PaymentVerifier,
    VerificationResult,
    compute_signature,
    get_payment_verifier,
)

SECRET = "s3cr3t"
ORDER_ID = "order_NXk9QmA1b2C3d4"
PAYMENT_ID = "pay_NXkA7zY6x5W4v3"


def _flip_bit(signature: str, index: int, bit: int) -> str:
    flipped = chr(ord(signature[index]) ^ (1 << bit))
    return signature[:index] + flipped + signature[index + 1 :]


def test_compute_signature_matches_hmac_sha256():
    expected = hmac.new(
        SECRET.encode(), f"{ORDER_ID}|{PAYMENT_ID}".encode(), hashlib.sha256
    ).hexdigest()
    assert compute_signature(SECRET, ORDER_ID, PAYMENT_ID) == expected
    assert expected == expected.lower()


def test_valid_signature_is_accepted():
    verifier = PaymentVerifier(SECRET)
    signature = compute_signature(SECRET, ORDER_ID, PAYMENT_ID)
    assert verifier.verify(ORDER_ID, PAYMENT_ID, signature) is VerificationResult.ACCEPTED


@pytest.mark.parametrize("index", [0, 17, 63])
@pytest.mark.parametrize("bit", [0, 3, 6])
def test_single_bit_flip_is_rejected(index, bit):
    verifier = PaymentVerifier(SECRET)
    signature = compute_signature(SECRET, ORDER_ID, PAYMENT_ID)
    tampered = _flip_bit(signature, index, bit)
    assert verifier.verify(ORDER_ID, PAYMENT_ID, tampered) is VerificationResult.REJECTED


def test_comparison_is_case_sensitive():
    verifier = PaymentVerifier(SECRET)
    signature = compute_signature(SECRET, ORDER_ID, PAYMENT_ID)
    assert any(c.isalpha() for c in signature)
    assert verifier.verify(ORDER_ID, PAYMENT_ID, signature.upper()) is VerificationResult.REJECTED


def test_signature_for_other_payment_is_rejected():
    verifier = PaymentVerifier(SECRET)
    signature = compute_signature(SECRET, ORDER_ID, "pay_other")
    assert verifier.verify(ORDER_ID, PAYMENT_ID, signature) is VerificationResult.REJECTED


def test_wrong_secret_is_rejected():
    signature = compute_signature("another-secret", ORDER_ID, PAYMENT_ID)
    result = PaymentVerifier(SECRET).verify(ORDER_ID, PAYMENT_ID, signature)
    assert result is VerificationResult.REJECTED


def test_non_ascii_signature_is_rejected_not_raised():
    verifier = PaymentVerifier(SECRET)
    assert verifier.verify(ORDER_ID, PAYMENT_ID, "ü" * 64) is VerificationResult.REJECTED


@pytest.mark.parametrize(
    ("order_id", "payment_id", "signature"),
    [
        ("", PAYMENT_ID, "abc"),
        (ORDER_ID, "", "abc"),
        (ORDER_ID, PAYMENT_ID, ""),
        (None, PAYMENT_ID, "abc"),
        (ORDER_ID, None, "abc"),
        (ORDER_ID, PAYMENT_ID, None),
    ],
)
def test_missing_field_is_malformed(monkeypatch, order_id, payment_id, signature):
    calls = []
    monkeypatch.setattr(
        "backend.checkout.verification.compute_signature",
        lambda *args: calls.append(args) or "",
    )
    with pytest.raises(MalformedCallback, match="Missing payment fields"):
        PaymentVerifier(SECRET).verify(order_id, payment_id, signature)
    assert calls == []


def test_blank_secret_is_not_configured():
    with pytest.raises(GatewayNotConfigured):
        PaymentVerifier("").verify(ORDER_ID, PAYMENT_ID, "abc")


def test_verifier_uses_configured_secret():
    verifier = get_payment_verifier()
    signature = compute_signature("rzp_test_secret", ORDER_ID, PAYMENT_ID)
    assert verifier.verify(ORDER_ID, PAYMENT_ID, signature) is VerificationResult.ACCEPTED
