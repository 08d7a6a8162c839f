"""
Recovery middleware.

Outermost layer of the middleware chain: any exception that escapes the
application becomes a 500 JSON response and the server keeps serving.
"""

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Convert unhandled exceptions into ``500 {"error": ...}``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "unexpected_exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": INTERNAL_ERROR_MESSAGE}
            )
