"""
Rate limiter service bootstrap.

Resolves the rate limiter configuration once at start-up and keeps it on
``app.state.rate_limiter_config`` for request handlers.
"""

from typing import Any, Dict, Mapping, Optional

from fastapi.responses import PlainTextResponse

from shared.base_service import BaseService
from shared.config import capture_environment

from .ratelimit.models import RateLimiterConfig
from .ratelimit.resolver import resolve_or_exit


class RateLimiterService(BaseService):
    """Service wrapper around the resolved rate limiter configuration."""

    def __init__(
        self,
        rate_limiter_config: Optional[RateLimiterConfig] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        super().__init__("ratelimiter", 8080)

        if environ is None:
            environ = capture_environment(self.config.env_file)
        self.rate_limiter_config = resolve_or_exit(rate_limiter_config, environ)
        self.app.state.rate_limiter_config = self.rate_limiter_config

        self.logger.info(
            "Rate limiter configured",
            storage=self.rate_limiter_config.storage.kind,
            response_writer=self.rate_limiter_config.response_writer.kind,
            custom_tokens=len(self.rate_limiter_config.custom_tokens)
        )

        @self.app.get("/")
        async def root():
            return PlainTextResponse("OK")

    async def _check_dependencies(self) -> Dict[str, Any]:
        return {
            "storage": self.rate_limiter_config.storage.kind,
            "response_writer": self.rate_limiter_config.response_writer.kind,
        }


def create_app(
    rate_limiter_config: Optional[RateLimiterConfig] = None,
    environ: Optional[Mapping[str, str]] = None
):
    """Create FastAPI application."""
    service = RateLimiterService(rate_limiter_config, environ)
    return service.app


if __name__ == "__main__":
    service = RateLimiterService()
    service.run()
