from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import razorpay
from razorpay.errors import (
    BadRequestError,
    GatewayError,
    ServerError,
    SignatureVerificationError,
)

from config import settings


@dataclass
class ChargeRequest:
    amount: int  # minor units
    currency: str
    receipt: str


@dataclass
class ChargeResult:
    success: bool
    payment_id: Optional[str] = None
    error: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(Protocol):
    key_id: str

    def charge(self, request: ChargeRequest) -> ChargeResult:
        ...

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        ...

    def fetch_order(self, gateway_order_id: str) -> Optional[Dict[str, Any]]:
        ...


def create_razorpay_client() -> razorpay.Client:
    return razorpay.Client(auth=(settings.razorpay_key_id, settings.razorpay_key_secret))


class RazorpayGateway:
    def __init__(self, client: razorpay.Client | None = None, key_id: str | None = None):
        self._client = client or create_razorpay_client()
        self.key_id = key_id or settings.razorpay_key_id

    def charge(self, request: ChargeRequest) -> ChargeResult:
        try:
            data = self._client.order.create(
                {
                    "amount": request.amount,
                    "currency": request.currency,
                    "receipt": request.receipt,
                    "payment_capture": 1,
                }
            )
        except (BadRequestError, GatewayError, ServerError) as exc:
            return ChargeResult(False, error=str(exc) or None)
        gateway_id = data.get("id")
        if not gateway_id:
            return ChargeResult(False, error="Gateway did not return a payment id", payload=data)
        return ChargeResult(True, payment_id=gateway_id, payload=data)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        try:
            self._client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": order_id,
                    "razorpay_payment_id": payment_id,
                    "razorpay_signature": signature,
                }
            )
        except SignatureVerificationError:
            return False
        return True

    def fetch_order(self, gateway_order_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._client.order.fetch(gateway_order_id)
        except BadRequestError:
            return None


_gateway: Optional[PaymentGateway] = None


def get_payment_gateway() -> PaymentGateway:
    global _gateway
    if _gateway is None:
        _gateway = RazorpayGateway()
    return _gateway
