from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "processing", "in-transit", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "partial", "completed", "failed", "refunded"]


class WishlistItemCreate(BaseModel):
    product_id: str = Field(..., min_length=1, description="Product document id")
    name: str
    base_price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    featured_image: Optional[str] = None
    brand: Optional[str] = None


class WishlistItem(WishlistItemCreate):
    added_at: Optional[datetime] = None


class WishlistListResponse(BaseModel):
    items: List[WishlistItem]


class WishlistStatusResponse(BaseModel):
    product_id: str
    in_wishlist: bool
    lookup: Literal["found", "not_found", "error"]


class WishlistMetadata(BaseModel):
    item_count: int = 0
    updated_at: Optional[datetime] = None


class WishlistReconcileResponse(BaseModel):
    previous_count: int
    item_count: int


class OrderCreate(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_amount: Decimal = Field(..., ge=0, decimal_places=2)
    shipping_address: Optional[Dict[str, Any]] = None


class Order(BaseModel):
    id: Optional[str] = None
    user_id: str
    items: List[Dict[str, Any]] = []
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    status: OrderStatus = "pending"
    payment_status: PaymentStatus = "pending"
    shipping_address: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderListResponse(BaseModel):
    items: List[Order]


class PaymentSplit(BaseModel):
    total_amount: Decimal
    advance_amount: int
    cod_amount: int
    advance_minor_units: int
    currency: str


class PaymentResult(BaseModel):
    success: bool
    payment_id: Optional[str] = None
    error: Optional[str] = None
    error_title: Optional[str] = None


class PaymentVerification(BaseModel):
    razorpay_payment_id: str
    razorpay_order_id: str
    razorpay_signature: str


class PaymentFailureRequest(BaseModel):
    reason: Optional[str] = None


class PaymentConfirmation(BaseModel):
    success: bool
    order_id: str
    payment_id: str


class RemainingPaymentResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    receipt: str
    gateway_order_id: Optional[str]
    key_id: str


class ApiInfoResponse(BaseModel):
    store_name: str
    currency: str
    razorpay_key_id: str
