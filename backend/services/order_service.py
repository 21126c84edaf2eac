import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from config import settings
from payment_gateway import ChargeRequest, get_payment_gateway
from repositories.order_repository import (
    fetch_order,
    fetch_user_orders,
    insert_order,
    insert_payment,
    update_order,
)
from schemas import (
    Order,
    OrderCreate,
    PaymentConfirmation,
    PaymentVerification,
    RemainingPaymentResponse,
)
from services.split_payment import MINOR_UNITS_PER_MAJOR, compute_split

logger = logging.getLogger("storefront")

CANCELLABLE_STATUSES = {"pending", "processing"}


class OrderStateError(Exception):
    """The order is not in a state that allows the requested action."""


class PaymentVerificationError(Exception):
    """The gateway signature for a completed checkout did not match."""


class PaymentGatewayError(Exception):
    """The gateway refused to open a charge."""


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _clean_address(address: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not address:
        return None
    cleaned = {key: value for key, value in address.items() if value is not None}
    return cleaned or None


def _format_row(row: Dict[str, Any]) -> Order:
    return Order(
        id=row.get("id"),
        user_id=row["userId"],
        items=row.get("items") or [],
        total_amount=_to_decimal(row.get("totalAmount")),
        paid_amount=_to_decimal(row.get("paidAmount")),
        remaining_amount=_to_decimal(row.get("remainingAmount")),
        status=row.get("status", "pending"),
        payment_status=row.get("paymentStatus", "pending"),
        shipping_address=row.get("shippingAddress"),
        created_at=row.get("createdAt"),
        updated_at=row.get("updatedAt"),
    )


async def create_order(user_id: str, payload: OrderCreate) -> Order:
    total = float(payload.total_amount)
    record: Dict[str, Any] = {
        "userId": user_id,
        "items": payload.items,
        "totalAmount": total,
        "paidAmount": 0,
        "remainingAmount": total,
        "status": "pending",
        "paymentStatus": "pending",
    }
    address = _clean_address(payload.shipping_address)
    if address:
        record["shippingAddress"] = address
    row = await asyncio.to_thread(insert_order, record)
    return _format_row(row)


async def get_order(user_id: str, order_id: str) -> Order:
    row = await asyncio.to_thread(fetch_order, order_id)
    if row is None:
        raise ValueError("Order not found")
    if row.get("userId") != user_id:
        raise PermissionError("You do not have permission to access this order")
    return _format_row(row)


async def list_orders(user_id: str) -> List[Order]:
    rows = await asyncio.to_thread(fetch_user_orders, user_id)
    return [_format_row(row) for row in rows]


def _minor_units(amount: Decimal) -> int:
    return int((amount * MINOR_UNITS_PER_MAJOR).to_integral_value())


async def _verify(
    verification: PaymentVerification,
    receipt: str,
    amount: int,
) -> None:
    """Check the checkout signature and that it paid for this receipt and amount."""
    gateway = get_payment_gateway()
    valid = await asyncio.to_thread(
        gateway.verify_signature,
        verification.razorpay_order_id,
        verification.razorpay_payment_id,
        verification.razorpay_signature,
    )
    if not valid:
        raise PaymentVerificationError("Payment signature verification failed")

    gateway_order = await asyncio.to_thread(
        gateway.fetch_order, verification.razorpay_order_id
    )
    if (
        not gateway_order
        or gateway_order.get("receipt") != receipt
        or gateway_order.get("amount") != amount
    ):
        logger.warning(
            "Gateway order %s does not match receipt %s for %s",
            verification.razorpay_order_id,
            receipt,
            amount,
        )
        raise PaymentVerificationError("Payment does not belong to this order")


async def _record_payment(
    user_id: str,
    order_id: str,
    amount: Decimal,
    verification: PaymentVerification,
) -> str:
    record = {
        "userId": user_id,
        "orderId": order_id,
        "amount": float(amount),
        "currency": settings.payment_currency,
        "status": "completed",
        "method": "razorpay",
        "razorpayPaymentId": verification.razorpay_payment_id,
        "razorpayOrderId": verification.razorpay_order_id,
        "razorpaySignature": verification.razorpay_signature,
    }
    return await asyncio.to_thread(insert_payment, record)


async def confirm_advance_payment(
    user_id: str,
    order_id: str,
    verification: PaymentVerification,
) -> PaymentConfirmation:
    order = await get_order(user_id, order_id)
    if order.payment_status != "pending":
        raise OrderStateError("Advance payment is already recorded for this order")
    advance, _ = compute_split(order.total_amount)
    paid = Decimal(advance)
    await _verify(verification, order_id, _minor_units(paid))

    payment_id = await _record_payment(user_id, order_id, paid, verification)
    # remainingAmount is total - advance, not the rounded-down COD share.
    await asyncio.to_thread(
        update_order,
        order_id,
        paidAmount=float(paid),
        remainingAmount=float(order.total_amount - paid),
        paymentStatus="partial",
        status="processing",
    )
    logger.info("Recorded advance payment %s for order %s", payment_id, order_id)
    return PaymentConfirmation(success=True, order_id=order_id, payment_id=payment_id)


async def record_payment_failure(
    user_id: str,
    order_id: str,
    reason: Optional[str] = None,
) -> Order:
    order = await get_order(user_id, order_id)
    if order.payment_status in {"partial", "completed"}:
        raise OrderStateError("Order already has a recorded payment")
    await asyncio.to_thread(
        update_order,
        order_id,
        paymentStatus="failed",
        status="cancelled",
    )
    logger.warning("Payment for order %s failed: %s", order_id, reason or "Payment failed")
    return await get_order(user_id, order_id)


async def start_remaining_payment(user_id: str, order_id: str) -> RemainingPaymentResponse:
    order = await get_order(user_id, order_id)
    if order.payment_status != "partial":
        raise OrderStateError("This order is not eligible for remaining payment")

    gateway = get_payment_gateway()
    request = ChargeRequest(
        amount=_minor_units(order.remaining_amount),
        currency=settings.payment_currency,
        receipt=f"{order_id}-remaining",
    )
    result = await asyncio.to_thread(gateway.charge, request)
    if not result.success:
        raise PaymentGatewayError(result.error or "Failed to start remaining payment")
    return RemainingPaymentResponse(
        order_id=order_id,
        amount=request.amount,
        currency=request.currency,
        receipt=request.receipt,
        gateway_order_id=result.payment_id,
        key_id=gateway.key_id,
    )


async def confirm_remaining_payment(
    user_id: str,
    order_id: str,
    verification: PaymentVerification,
) -> PaymentConfirmation:
    order = await get_order(user_id, order_id)
    if order.payment_status != "partial":
        raise OrderStateError("This order is not eligible for remaining payment")
    await _verify(
        verification,
        f"{order_id}-remaining",
        _minor_units(order.remaining_amount),
    )

    payment_id = await _record_payment(
        user_id, order_id, order.remaining_amount, verification
    )
    await asyncio.to_thread(
        update_order,
        order_id,
        paidAmount=float(order.total_amount),
        remainingAmount=0,
        paymentStatus="completed",
    )
    logger.info("Recorded remaining payment %s for order %s", payment_id, order_id)
    return PaymentConfirmation(success=True, order_id=order_id, payment_id=payment_id)


async def cancel_order(user_id: str, order_id: str) -> Order:
    order = await get_order(user_id, order_id)
    if order.status not in CANCELLABLE_STATUSES:
        raise OrderStateError("This order cannot be cancelled")
    await asyncio.to_thread(update_order, order_id, status="cancelled")
    return await get_order(user_id, order_id)
