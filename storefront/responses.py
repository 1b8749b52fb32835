"""
Storefront API — Error Envelope
=================================

What:  Builds the JSON body shared by every error response.
Who:   The exception handlers in main.py and the RequestIDMiddleware fallback
       for unhandled exceptions.

Body:
    {"error": <kind>, "message": str, "details": {...}, "request_id": str}
"""

from typing import Optional

from fastapi.responses import JSONResponse


def error_response(
    status_code: int,
    kind: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
    request_id: str = "",
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": kind,
            "message": message,
            "details": details or {},
            "request_id": request_id,
        },
        headers=headers or None,
    )
