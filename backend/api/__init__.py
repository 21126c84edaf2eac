from .info import router as info_router
from .orders import router as orders_router
from .payments import router as payments_router
from .wishlist import router as wishlist_router

__all__ = [
    "info_router",
    "orders_router",
    "payments_router",
    "wishlist_router",
]
