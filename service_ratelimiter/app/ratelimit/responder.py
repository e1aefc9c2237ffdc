"""
Response writers used when a request is blocked.
"""

from typing import Any, Protocol, runtime_checkable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from shared.errors import RateLimitError

BLOCKED_MESSAGE = (
    "you have reached the maximum number of requests or actions allowed "
    "within a certain time frame"
)


@runtime_checkable
class ResponseWriter(Protocol):
    """Capability that answers a blocked request."""

    kind: str

    def write_blocked(self, request: Request, policy: Any) -> Response:
        ...


class DefaultResponseWriter:
    """Answers blocked requests with HTTP 429 and a standard error body."""

    kind = "default"

    def write_blocked(self, request: Request, policy: Any) -> Response:
        retry_after_ms = getattr(policy, "block_time_milliseconds", None)
        details = {"path": request.url.path}
        headers = {}
        if retry_after_ms is not None:
            details["block_time_milliseconds"] = retry_after_ms
            headers["Retry-After"] = str(max(1, -(-retry_after_ms // 1000)))

        error = RateLimitError(BLOCKED_MESSAGE, details)
        return JSONResponse(
            status_code=429,
            content=error.to_response().model_dump(),
            headers=headers
        )
