from typing import Any, Dict, List, Optional

from google.cloud import firestore

from firebase_client import get_db

WISHLIST_COLLECTION = "wishlists"
ITEMS_COLLECTION = "items"


def _wishlist_ref(user_id: str):
    return get_db().collection(WISHLIST_COLLECTION).document(user_id)


def _items_ref(user_id: str):
    return _wishlist_ref(user_id).collection(ITEMS_COLLECTION)


def item_exists(user_id: str, product_id: str) -> bool:
    return _items_ref(user_id).document(product_id).get().exists


def upsert_item(user_id: str, record: Dict[str, Any]) -> None:
    payload = {**record, "addedAt": firestore.SERVER_TIMESTAMP}
    _items_ref(user_id).document(record["productId"]).set(payload)


def delete_item(user_id: str, product_id: str) -> None:
    _items_ref(user_id).document(product_id).delete()


def fetch_items(user_id: str) -> List[Dict[str, Any]]:
    docs = (
        _items_ref(user_id)
        .order_by("addedAt", direction=firestore.Query.DESCENDING)
        .stream()
    )
    return [{**(doc.to_dict() or {}), "productId": doc.id} for doc in docs]


def count_items(user_id: str) -> int:
    return sum(1 for _ in _items_ref(user_id).stream())


def delete_all_items(user_id: str) -> int:
    docs = list(_items_ref(user_id).stream())
    batch = get_db().batch()
    for doc in docs:
        batch.delete(doc.reference)
    batch.commit()
    return len(docs)


def increment_item_count(user_id: str, delta: int) -> None:
    _wishlist_ref(user_id).set(
        {
            "updatedAt": firestore.SERVER_TIMESTAMP,
            "itemCount": firestore.Increment(delta),
        },
        merge=True,
    )


def set_item_count(user_id: str, count: int) -> None:
    _wishlist_ref(user_id).set(
        {"updatedAt": firestore.SERVER_TIMESTAMP, "itemCount": count},
        merge=True,
    )


def fetch_metadata(user_id: str) -> Optional[Dict[str, Any]]:
    snapshot = _wishlist_ref(user_id).get()
    return snapshot.to_dict() if snapshot.exists else None


def fetch_wishlist_owner_ids() -> List[str]:
    return [ref.id for ref in get_db().collection(WISHLIST_COLLECTION).list_documents()]
