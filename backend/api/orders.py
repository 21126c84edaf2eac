from fastapi import APIRouter, Depends, HTTPException, status
from google.api_core.exceptions import GoogleAPICallError

from api.errors import store_http_error
from auth import get_current_user_id
from schemas import (
    Order,
    OrderCreate,
    OrderListResponse,
    PaymentConfirmation,
    PaymentFailureRequest,
    PaymentVerification,
    RemainingPaymentResponse,
)
from services import order_service
from services.order_service import (
    OrderStateError,
    PaymentGatewayError,
    PaymentVerificationError,
)

router = APIRouter(prefix="/api/orders", tags=["orders"])

ORDER_ERRORS = (
    ValueError,
    PermissionError,
    OrderStateError,
    PaymentVerificationError,
    PaymentGatewayError,
    GoogleAPICallError,
)


def order_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, GoogleAPICallError):
        return store_http_error(exc, "Order")
    if isinstance(exc, PermissionError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, OrderStateError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, PaymentVerificationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, PaymentGatewayError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_404_NOT_FOUND
    return HTTPException(status_code=code, detail=str(exc))


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    user_id: str = Depends(get_current_user_id),
) -> Order:
    try:
        return await order_service.create_order(user_id, payload)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Order") from exc
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc


@router.get("", response_model=OrderListResponse)
async def list_orders(
    user_id: str = Depends(get_current_user_id),
) -> OrderListResponse:
    try:
        items = await order_service.list_orders(user_id)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Order") from exc
    return OrderListResponse(items=items)


@router.get("/{order_id}", response_model=Order)
async def read_order(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Order:
    try:
        return await order_service.get_order(user_id, order_id)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel_order(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Order:
    try:
        return await order_service.cancel_order(user_id, order_id)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc


@router.post("/{order_id}/payments/confirm", response_model=PaymentConfirmation)
async def confirm_advance_payment(
    order_id: str,
    payload: PaymentVerification,
    user_id: str = Depends(get_current_user_id),
) -> PaymentConfirmation:
    try:
        return await order_service.confirm_advance_payment(user_id, order_id, payload)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc


@router.post("/{order_id}/payments/failure", response_model=Order)
async def record_payment_failure(
    order_id: str,
    payload: PaymentFailureRequest,
    user_id: str = Depends(get_current_user_id),
) -> Order:
    try:
        return await order_service.record_payment_failure(
            user_id, order_id, payload.reason
        )
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc


@router.post("/{order_id}/payments/remaining", response_model=RemainingPaymentResponse)
async def start_remaining_payment(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
) -> RemainingPaymentResponse:
    try:
        return await order_service.start_remaining_payment(user_id, order_id)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc


@router.post(
    "/{order_id}/payments/remaining/confirm", response_model=PaymentConfirmation
)
async def confirm_remaining_payment(
    order_id: str,
    payload: PaymentVerification,
    user_id: str = Depends(get_current_user_id),
) -> PaymentConfirmation:
    try:
        return await order_service.confirm_remaining_payment(
            user_id, order_id, payload
        )
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc
