from fastapi import HTTPException, status
from google.api_core.exceptions import GoogleAPICallError


def store_http_error(exc: GoogleAPICallError, store: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"{store} store error: {exc.message or exc}",
    )
