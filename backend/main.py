import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import info_router, orders_router, payments_router, wishlist_router
from config import settings

logger = logging.getLogger("storefront")

app = FastAPI(title="Storefront API")

allow_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(info_router)
app.include_router(wishlist_router)
app.include_router(orders_router)
app.include_router(payments_router)


@app.on_event("startup")
async def _on_startup() -> None:
    if "*" in allow_origins:
        logger.warning("ALLOWED_ORIGINS includes *; any site can call the storefront API.")
    if not settings.firebase_credentials_path:
        logger.info("FIREBASE_CREDENTIALS_PATH not set; using Application Default Credentials.")


@app.middleware("http")
async def log_preflight(request, call_next):
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "")
        logger.info("CORS preflight %s %s origin=%s", request.method, request.url.path, origin)
    response = await call_next(request)
    return response
