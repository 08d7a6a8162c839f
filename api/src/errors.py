"""
Typed API errors.

Handlers raise these instead of building error responses by hand; the
exception handlers registered in ``api.src.main`` turn them into
``{"error": "<message>"}`` bodies with the matching status code.
"""

from fastapi import status


class APIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(APIError):
    """Malformed path/query id or request body."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request payload"


class NotFoundError(APIError):
    """Zero rows returned or affected."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreError(APIError):
    """Any persistence failure other than "no rows".

    The message is what callers see; the underlying driver error travels as
    ``__cause__`` and is only ever logged.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error"


class StoreTimeoutError(StoreError):
    """A database call exceeded its deadline."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = "Database request timed out"
