"""
Custom token discovery.

Custom tokens are declared purely through environment variable names:
``RATE_LIMITER_TOKEN_<ID>_MAX_REQUESTS`` and ``RATE_LIMITER_TOKEN_<ID>_BLOCK_TIME``.
Either one is enough to declare ``<ID>``.
"""

import re
from typing import Iterable, Mapping, Set

from .env import get_int_env
from .models import RatePolicy

CUSTOM_TOKEN_PATTERN = re.compile(r"RATE_LIMITER_TOKEN_(.+)_(MAX_REQUESTS|BLOCK_TIME)")


def max_requests_env_key(identifier: str) -> str:
    return f"RATE_LIMITER_TOKEN_{identifier}_MAX_REQUESTS"


def block_time_env_key(identifier: str) -> str:
    return f"RATE_LIMITER_TOKEN_{identifier}_BLOCK_TIME"


def discover_custom_tokens(keys: Iterable[str]) -> Set[str]:
    """Return the distinct custom token identifiers named by ``keys``."""
    found: Set[str] = set()
    for key in keys:
        match = CUSTOM_TOKEN_PATTERN.fullmatch(key)
        if match:
            found.add(match.group(1))
    return found


def resolve_custom_token(identifier: str, environ: Mapping[str, str], base: RatePolicy, tracer=None) -> RatePolicy:
    """Resolve one custom token, taking each missing field from ``base``."""
    max_requests_key = max_requests_env_key(identifier)
    max_requests, ok = get_int_env(environ, max_requests_key)
    if not ok:
        max_requests = base.max_requests_per_second
        if tracer is not None:
            tracer.trace(f'env "{max_requests_key}" not found: using default value {max_requests}')

    block_time_key = block_time_env_key(identifier)
    block_time, ok = get_int_env(environ, block_time_key)
    if not ok:
        block_time = base.block_time_milliseconds
        if tracer is not None:
            tracer.trace(f'env "{block_time_key}" not found: using default value {block_time}')

    return RatePolicy(
        max_requests_per_second=max_requests,
        block_time_milliseconds=block_time
    )
