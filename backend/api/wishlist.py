from fastapi import APIRouter, Depends, Response, status
from google.api_core.exceptions import GoogleAPICallError

from api.errors import store_http_error
from auth import get_current_user_id
from schemas import (
    WishlistItemCreate,
    WishlistListResponse,
    WishlistMetadata,
    WishlistReconcileResponse,
    WishlistStatusResponse,
)
from services import wishlist_service
from services.wishlist_service import WishlistLookup

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistListResponse)
async def read_wishlist(
    user_id: str = Depends(get_current_user_id),
) -> WishlistListResponse:
    items = await wishlist_service.list_items(user_id)
    return WishlistListResponse(items=items)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_wishlist(user_id: str = Depends(get_current_user_id)) -> Response:
    try:
        await wishlist_service.clear(user_id)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Wishlist") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/metadata", response_model=WishlistMetadata)
async def read_metadata(
    user_id: str = Depends(get_current_user_id),
) -> WishlistMetadata:
    try:
        return await wishlist_service.get_metadata(user_id)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Wishlist") from exc


@router.post("/reconcile", response_model=WishlistReconcileResponse)
async def reconcile_wishlist(
    user_id: str = Depends(get_current_user_id),
) -> WishlistReconcileResponse:
    try:
        previous, actual = await wishlist_service.reconcile_count(user_id)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Wishlist") from exc
    return WishlistReconcileResponse(previous_count=previous, item_count=actual)


@router.post("/items", status_code=status.HTTP_204_NO_CONTENT)
async def add_item(
    payload: WishlistItemCreate,
    user_id: str = Depends(get_current_user_id),
) -> Response:
    try:
        await wishlist_service.add(user_id, payload)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Wishlist") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/items/{product_id}", response_model=WishlistStatusResponse)
async def read_item_status(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
) -> WishlistStatusResponse:
    lookup = await wishlist_service.lookup_status(user_id, product_id)
    return WishlistStatusResponse(
        product_id=product_id,
        in_wishlist=lookup is WishlistLookup.FOUND,
        lookup=lookup.value,
    )


@router.delete("/items/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Response:
    try:
        await wishlist_service.remove(user_id, product_id)
    except GoogleAPICallError as exc:
        raise store_http_error(exc, "Wishlist") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
