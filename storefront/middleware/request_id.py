"""
Storefront API — Request ID Middleware
========================================

What:  Tags each request with a short correlation id and returns it in the
       X-Request-ID response header.
Why:   Error envelopes and log lines carry the same id, so a client report
       can be matched to the server log entry.
How:   Reuses a client-supplied X-Request-ID when present, otherwise
       generates one; stores it in a ContextVar and on request.state.
       Unhandled exceptions become the 500 error envelope here, while the
       id is still set.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from storefront.responses import error_response

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on the same loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Outermost application middleware, so it also renders unhandled
    exceptions: Starlette's own 500 handler runs outside this middleware,
    after the request id has been reset.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(e),
                exc_info=True,
            )
            response = error_response(
                500,
                "internal_error",
                "An unexpected error occurred. Please try again or contact support.",
                request_id=rid,
            )
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
