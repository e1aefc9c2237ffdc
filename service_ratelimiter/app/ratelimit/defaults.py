"""
Built-in baseline configuration.
"""

from .models import RatePolicy, ResolvedConfig
from .responder import DefaultResponseWriter
from .storage import MemoryStorageBackend

DEFAULT_IP_MAX_REQUESTS = 100
DEFAULT_IP_BLOCK_TIME_MS = 1000
DEFAULT_TOKEN_MAX_REQUESTS = 200
DEFAULT_TOKEN_BLOCK_TIME_MS = 500


def default_ip_policy() -> RatePolicy:
    return RatePolicy(
        max_requests_per_second=DEFAULT_IP_MAX_REQUESTS,
        block_time_milliseconds=DEFAULT_IP_BLOCK_TIME_MS
    )


def default_token_policy() -> RatePolicy:
    return RatePolicy(
        max_requests_per_second=DEFAULT_TOKEN_MAX_REQUESTS,
        block_time_milliseconds=DEFAULT_TOKEN_BLOCK_TIME_MS
    )


def default_configuration() -> ResolvedConfig:
    """Build a fresh baseline with new backend and response writer instances."""
    return ResolvedConfig(
        ip=default_ip_policy(),
        token=default_token_policy(),
        custom_tokens={},
        storage=MemoryStorageBackend(),
        response_writer=DefaultResponseWriter(),
        debug=False
    )
