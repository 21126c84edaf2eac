import asyncio
import logging
import sys
from typing import Dict, List, Optional, Tuple

from repositories.wishlist_repository import fetch_wishlist_owner_ids
from services import wishlist_service


async def reconcile_all(user_ids: Optional[List[str]] = None) -> Dict[str, Tuple[int, int]]:
    owners = user_ids or await asyncio.to_thread(fetch_wishlist_owner_ids)
    results: Dict[str, Tuple[int, int]] = {}
    for user_id in owners:
        results[user_id] = await wishlist_service.reconcile_count(user_id)
    return results


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    results = asyncio.run(reconcile_all(sys.argv[1:]))
    drifted = {uid: counts for uid, counts in results.items() if counts[0] != counts[1]}
    for user_id, (stored, actual) in sorted(drifted.items()):
        print(f"{user_id}: itemCount {stored} -> {actual}")
    print(f"Reconciled {len(results)} wishlists, {len(drifted)} drifted.")


if __name__ == "__main__":
    main()
