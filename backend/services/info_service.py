from config import settings
from payment_gateway import get_payment_gateway
from schemas import ApiInfoResponse


async def get_api_info() -> ApiInfoResponse:
    return ApiInfoResponse(
        store_name=settings.store_name,
        currency=settings.payment_currency,
        razorpay_key_id=get_payment_gateway().key_id,
    )
