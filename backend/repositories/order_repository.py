from typing import Any, Dict, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from firebase_client import get_db

ORDERS_COLLECTION = "orders"
PAYMENTS_COLLECTION = "payments"


def _with_id(snapshot) -> Dict[str, Any]:
    return {**(snapshot.to_dict() or {}), "id": snapshot.id}


def insert_order(record: Dict[str, Any]) -> Dict[str, Any]:
    payload = {
        **record,
        "createdAt": firestore.SERVER_TIMESTAMP,
        "updatedAt": firestore.SERVER_TIMESTAMP,
    }
    _, ref = get_db().collection(ORDERS_COLLECTION).add(payload)
    snapshot = ref.get()
    if not snapshot.exists:
        raise RuntimeError("Failed to store order")
    return _with_id(snapshot)


def fetch_order(order_id: str) -> Optional[Dict[str, Any]]:
    snapshot = get_db().collection(ORDERS_COLLECTION).document(order_id).get()
    return _with_id(snapshot) if snapshot.exists else None


def fetch_user_orders(user_id: str) -> List[Dict[str, Any]]:
    docs = (
        get_db()
        .collection(ORDERS_COLLECTION)
        .where(filter=FieldFilter("userId", "==", user_id))
        .order_by("createdAt", direction=firestore.Query.DESCENDING)
        .stream()
    )
    return [_with_id(doc) for doc in docs]


def update_order(order_id: str, **fields: Any) -> None:
    payload = {key: value for key, value in fields.items() if value is not None}
    if not payload:
        return
    payload["updatedAt"] = firestore.SERVER_TIMESTAMP
    get_db().collection(ORDERS_COLLECTION).document(order_id).update(payload)


def insert_payment(record: Dict[str, Any]) -> str:
    payload = {
        **record,
        "createdAt": firestore.SERVER_TIMESTAMP,
        "updatedAt": firestore.SERVER_TIMESTAMP,
    }
    _, ref = get_db().collection(PAYMENTS_COLLECTION).add(payload)
    return ref.id
