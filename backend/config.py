import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    firebase_web_api_key: str = _require_env("FIREBASE_WEB_API_KEY")
    firebase_credentials_path: str | None = os.getenv("FIREBASE_CREDENTIALS_PATH")
    firebase_project_id: str | None = os.getenv("FIREBASE_PROJECT_ID")
    razorpay_key_id: str = _require_env("RAZORPAY_KEY_ID")
    razorpay_key_secret: str = _require_env("RAZORPAY_KEY_SECRET")
    payment_currency: str = os.getenv("PAYMENT_CURRENCY", "INR")
    store_name: str = os.getenv("STORE_NAME", "Lotedd")
    auth_timeout_seconds: int = int(os.getenv("AUTH_TIMEOUT_SECONDS", "10"))
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
