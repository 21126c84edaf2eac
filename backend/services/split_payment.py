import asyncio
import logging
import math
import time
from decimal import Decimal
from typing import Optional, Set, Tuple

from config import settings
from payment_gateway import ChargeRequest, PaymentGateway, get_payment_gateway
from schemas import Order, PaymentResult, PaymentSplit

logger = logging.getLogger("storefront")

ADVANCE_RATIO = Decimal("0.5")
MINOR_UNITS_PER_MAJOR = 100

PAYMENT_FAILED_TITLE = "Payment Failed"
PAYMENT_FAILED_MESSAGE = "There was a problem processing your payment."
UNEXPECTED_ERROR_TITLE = "Error"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class PaymentInProgressError(RuntimeError):
    """A split payment for the same receipt has not finished yet."""


def compute_split(total: Decimal | float | int) -> Tuple[int, int]:
    """Return ``(advance, cod)`` in whole major units.

    Advance rounds up and COD rounds down independently, so the two do not
    always add back to ``total``: 99.99 splits into 50 + 49.
    """
    amount = Decimal(str(total))
    if amount < 0:
        raise ValueError("Order total must not be negative")
    half = amount * ADVANCE_RATIO
    return math.ceil(half), math.floor(half)


def build_receipt(order: Order) -> str:
    return order.id or f"order-{int(time.time() * 1000)}"


class SplitPaymentOrchestrator:
    """Charges the advance half of an order online; the rest is cash on delivery."""

    def __init__(
        self,
        gateway: Optional[PaymentGateway] = None,
        currency: Optional[str] = None,
    ) -> None:
        self._gateway = gateway
        self.currency = currency or settings.payment_currency
        self._processing: Set[str] = set()

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway or get_payment_gateway()

    def is_processing(self, receipt: str) -> bool:
        return receipt in self._processing

    def preview(self, order: Order) -> PaymentSplit:
        advance, cod = compute_split(order.total_amount)
        return PaymentSplit(
            total_amount=order.total_amount,
            advance_amount=advance,
            cod_amount=cod,
            advance_minor_units=advance * MINOR_UNITS_PER_MAJOR,
            currency=self.currency,
        )

    async def process(self, order: Order) -> PaymentResult:
        split = self.preview(order)
        receipt = build_receipt(order)
        if self.is_processing(receipt):
            raise PaymentInProgressError(f"Payment for {receipt} is already processing")

        request = ChargeRequest(
            amount=split.advance_minor_units,
            currency=self.currency,
            receipt=receipt,
        )
        self._processing.add(receipt)
        try:
            result = await asyncio.to_thread(self.gateway.charge, request)
        except Exception as exc:
            logger.exception("Advance payment for %s raised: %s", receipt, exc)
            return PaymentResult(
                success=False,
                error=str(exc) or UNEXPECTED_ERROR_MESSAGE,
                error_title=UNEXPECTED_ERROR_TITLE,
            )
        finally:
            self._processing.discard(receipt)

        if not result.success:
            logger.warning("Advance payment for %s failed: %s", receipt, result.error)
            return PaymentResult(
                success=False,
                error=result.error or PAYMENT_FAILED_MESSAGE,
                error_title=PAYMENT_FAILED_TITLE,
            )
        logger.info(
            "Advance payment for %s accepted: %s %s (%s)",
            receipt,
            request.amount,
            request.currency,
            result.payment_id,
        )
        return PaymentResult(success=True, payment_id=result.payment_id)


split_payment_orchestrator = SplitPaymentOrchestrator()
