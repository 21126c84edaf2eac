from fastapi import APIRouter, Depends, HTTPException, status

from api.orders import ORDER_ERRORS, order_http_error
from auth import get_current_user_id
from schemas import PaymentResult, PaymentSplit
from services import order_service
from services.split_payment import PaymentInProgressError, split_payment_orchestrator

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("/split/{order_id}", response_model=PaymentSplit)
async def preview_split_payment(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
) -> PaymentSplit:
    try:
        order = await order_service.get_order(user_id, order_id)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc
    return split_payment_orchestrator.preview(order)


@router.post("/split/{order_id}", response_model=PaymentResult)
async def process_split_payment(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
) -> PaymentResult:
    try:
        order = await order_service.get_order(user_id, order_id)
    except ORDER_ERRORS as exc:
        raise order_http_error(exc) from exc
    try:
        return await split_payment_orchestrator.process(order)
    except PaymentInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
