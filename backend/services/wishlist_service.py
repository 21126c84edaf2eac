"""Per-user wishlist stored as ``wishlists/{user}/items/{product}``.

The parent ``wishlists/{user}`` document carries ``itemCount`` and
``updatedAt``. The count is maintained with increments that are written
separately from the item documents, so a failure (or two interleaved
requests) between the two writes leaves it out of step with the items.
``reconcile_count`` recomputes it from the collection.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Tuple

from repositories.wishlist_repository import (
    count_items,
    delete_all_items,
    delete_item,
    fetch_items,
    fetch_metadata,
    increment_item_count,
    item_exists,
    set_item_count,
    upsert_item,
)
from schemas import WishlistItem, WishlistItemCreate, WishlistMetadata

logger = logging.getLogger("storefront")


class WishlistLookup(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


def _to_record(item: WishlistItemCreate) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "productId": item.product_id,
        "name": item.name,
        "basePrice": item.base_price,
    }
    optional = {
        "discountPrice": item.discount_price,
        "featuredImage": item.featured_image,
        "brand": item.brand,
    }
    record.update({key: value for key, value in optional.items() if value is not None})
    return record


def _format_row(row: Dict[str, Any]) -> WishlistItem:
    return WishlistItem(
        product_id=row["productId"],
        name=row.get("name", ""),
        base_price=row.get("basePrice", 0),
        discount_price=row.get("discountPrice"),
        featured_image=row.get("featuredImage"),
        brand=row.get("brand"),
        added_at=row.get("addedAt"),
    )


async def lookup_status(user_id: str, product_id: str) -> WishlistLookup:
    try:
        exists = await asyncio.to_thread(item_exists, user_id, product_id)
    except Exception as exc:
        logger.warning(
            "Wishlist status check failed for %s/%s: %s", user_id, product_id, exc
        )
        return WishlistLookup.ERROR
    return WishlistLookup.FOUND if exists else WishlistLookup.NOT_FOUND


async def get_status(user_id: str, product_id: str) -> bool:
    """True when the product is wishlisted; a failed lookup also reads as False."""
    return await lookup_status(user_id, product_id) is WishlistLookup.FOUND


async def add(user_id: str, item: WishlistItemCreate) -> None:
    await asyncio.to_thread(upsert_item, user_id, _to_record(item))
    await asyncio.to_thread(increment_item_count, user_id, 1)


async def remove(user_id: str, product_id: str) -> None:
    await asyncio.to_thread(delete_item, user_id, product_id)
    await asyncio.to_thread(increment_item_count, user_id, -1)


async def list_items(user_id: str) -> List[WishlistItem]:
    try:
        rows = await asyncio.to_thread(fetch_items, user_id)
    except Exception as exc:
        logger.warning("Wishlist fetch failed for %s: %s", user_id, exc)
        return []
    return [_format_row(row) for row in rows]


async def clear(user_id: str) -> None:
    removed = await asyncio.to_thread(delete_all_items, user_id)
    await asyncio.to_thread(set_item_count, user_id, 0)
    logger.info("Cleared %s wishlist items for %s", removed, user_id)


async def get_metadata(user_id: str) -> WishlistMetadata:
    row = await asyncio.to_thread(fetch_metadata, user_id) or {}
    return WishlistMetadata(
        item_count=int(row.get("itemCount") or 0),
        updated_at=row.get("updatedAt"),
    )


async def reconcile_count(user_id: str) -> Tuple[int, int]:
    metadata = await get_metadata(user_id)
    actual = await asyncio.to_thread(count_items, user_id)
    if actual != metadata.item_count:
        logger.warning(
            "Wishlist count drift for %s: stored=%s actual=%s",
            user_id,
            metadata.item_count,
            actual,
        )
    await asyncio.to_thread(set_item_count, user_id, actual)
    return metadata.item_count, actual
