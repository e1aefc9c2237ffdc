"""
Typed lookups over an environment snapshot.

Each lookup returns ``(value, present)``. Absent or malformed values report
``present=False`` so that callers fall through to the next precedence level.
"""

import re
from typing import Mapping, Tuple

ENV_IP_MAX_REQUESTS = "RATE_LIMITER_IP_MAX_REQUESTS"
ENV_IP_BLOCK_TIME = "RATE_LIMITER_IP_BLOCK_TIME"
ENV_TOKEN_MAX_REQUESTS = "RATE_LIMITER_TOKEN_MAX_REQUESTS"
ENV_TOKEN_BLOCK_TIME = "RATE_LIMITER_TOKEN_BLOCK_TIME"
ENV_DEBUG = "RATE_LIMITER_DEBUG"
ENV_USE_REDIS = "RATE_LIMITER_USE_REDIS"
ENV_REDIS_ADDRESS = "RATE_LIMITER_REDIS_ADDRESS"
ENV_REDIS_PASSWORD = "RATE_LIMITER_REDIS_PASSWORD"
ENV_REDIS_DB = "RATE_LIMITER_REDIS_DB"

TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def get_bool_env(environ: Mapping[str, str], key: str) -> Tuple[bool, bool]:
    """Read ``key`` as a boolean."""
    raw = environ.get(key)
    if raw is None:
        return False, False
    value = raw.lower()
    if value in TRUE_VALUES:
        return True, True
    if value in FALSE_VALUES:
        return False, True
    return False, False


def get_int_env(environ: Mapping[str, str], key: str) -> Tuple[int, bool]:
    """Read ``key`` as a base-10 signed 64-bit integer."""
    raw = environ.get(key)
    if raw is None or not _INT_PATTERN.fullmatch(raw):
        return 0, False
    value = int(raw, 10)
    if not INT64_MIN <= value <= INT64_MAX:
        return 0, False
    return value, True


def get_str_env(environ: Mapping[str, str], key: str) -> Tuple[str, bool]:
    """Read ``key`` as a string; an empty value still counts as present."""
    raw = environ.get(key)
    if raw is None:
        return "", False
    return raw, True
