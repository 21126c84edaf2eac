from fastapi import Header, HTTPException, status
import httpx

from config import settings

ACCOUNTS_LOOKUP_URL = "https://identitytoolkit.googleapis.com/v1/accounts:lookup"


async def _fetch_user(id_token: str) -> dict:
    params = {"key": settings.firebase_web_api_key}
    async with httpx.AsyncClient(timeout=settings.auth_timeout_seconds) as client:
        response = await client.post(
            ACCOUNTS_LOOKUP_URL, params=params, json={"idToken": id_token}
        )
    if response.status_code != 200:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth token"
        )
    users = response.json().get("users") or []
    return users[0] if users else {}


async def get_current_user_id(
    authorization: str | None = Header(default=None, convert_underscores=False),
) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing auth token"
        )
    token = authorization.split(" ", 1)[1]
    user = await _fetch_user(token)
    user_id = user.get("localId")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user profile"
        )
    return user_id
