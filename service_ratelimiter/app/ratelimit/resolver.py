"""
Configuration resolution for the rate limiter.

Every dimension is resolved as: explicit caller value, then environment
override (unless ``disable_envs``), then the built-in default. The debug gate
is resolved first so that every later decision can be traced.
"""

import os
from typing import Dict, Mapping, Optional

from shared.errors import BackendConfigurationError
from shared.logging import get_logger

from . import env
from .defaults import default_configuration
from .discovery import discover_custom_tokens, resolve_custom_token
from .models import RateLimiterConfig, RatePolicy, ResolvedConfig
from .responder import ResponseWriter
from .storage import RedisStorageBackend, StorageBackend
from .tracing import DebugTracer

logger = get_logger("ratelimiter.resolver")


def resolve_configuration(
    config: Optional[RateLimiterConfig] = None,
    environ: Optional[Mapping[str, str]] = None
) -> ResolvedConfig:
    """Resolve the effective rate limiter configuration.

    Args:
        config: Partial caller configuration; ``None`` means all fields unset.
        environ: Environment snapshot; defaults to a copy of ``os.environ``.

    Raises:
        BackendConfigurationError: Redis was selected through the environment
            without ``RATE_LIMITER_REDIS_ADDRESS``.
    """
    if config is None:
        config = RateLimiterConfig()
    if environ is None:
        environ = dict(os.environ)
    # Nothing below may see the environment when it is disabled
    if config.disable_envs:
        environ = {}

    defaults = default_configuration()

    tracer = DebugTracer(bool(config.debug))
    debug, ok = env.get_bool_env(environ, env.ENV_DEBUG)
    if ok:
        tracer.enabled = debug
        tracer.trace(f"using env {env.ENV_DEBUG}")

    ip = _resolve_policy(
        "IP", config.ip, defaults.ip, environ,
        env.ENV_IP_MAX_REQUESTS, env.ENV_IP_BLOCK_TIME, tracer
    )
    token = _resolve_policy(
        "Token", config.token, defaults.token, environ,
        env.ENV_TOKEN_MAX_REQUESTS, env.ENV_TOKEN_BLOCK_TIME, tracer
    )
    custom_tokens = _resolve_custom_tokens(config.custom_tokens, token, environ, tracer)
    storage = _select_storage(config.storage, defaults.storage, environ, tracer)
    response_writer = _select_response_writer(config.response_writer, defaults.response_writer, tracer)

    resolved = ResolvedConfig(
        ip=ip,
        token=token,
        custom_tokens=custom_tokens,
        storage=storage,
        response_writer=response_writer,
        debug=tracer.enabled,
        disable_envs=config.disable_envs
    )
    tracer.trace_snapshot(resolved.snapshot())
    return resolved


def resolve_or_exit(
    config: Optional[RateLimiterConfig] = None,
    environ: Optional[Mapping[str, str]] = None
) -> ResolvedConfig:
    """Resolve the configuration, terminating the process on misconfiguration."""
    try:
        return resolve_configuration(config, environ)
    except BackendConfigurationError as e:
        logger.critical("Rate limiter misconfigured", error=e.message, code=e.code, **e.details)
        raise SystemExit(1) from e


def _resolve_policy(
    name: str,
    policy: Optional[RatePolicy],
    default: RatePolicy,
    environ: Mapping[str, str],
    max_requests_key: str,
    block_time_key: str,
    tracer: DebugTracer
) -> RatePolicy:
    if policy is None:
        policy = default
        tracer.trace(f"using default {name} policy")

    updates = {}
    max_requests, ok = env.get_int_env(environ, max_requests_key)
    if ok:
        updates["max_requests_per_second"] = max_requests
        tracer.trace(f"using env {max_requests_key}")

    block_time, ok = env.get_int_env(environ, block_time_key)
    if ok:
        updates["block_time_milliseconds"] = block_time
        tracer.trace(f"using env {block_time_key}")

    return policy.model_copy(update=updates) if updates else policy


def _resolve_custom_tokens(
    custom_tokens: Optional[Mapping[str, Optional[RatePolicy]]],
    token: RatePolicy,
    environ: Mapping[str, str],
    tracer: DebugTracer
) -> Dict[str, RatePolicy]:
    resolved: Dict[str, RatePolicy] = {}
    for name, policy in (custom_tokens or {}).items():
        if policy is None:
            tracer.trace(f'custom token "{name}" has no policy: using token policy')
            policy = token
        resolved[name] = policy

    # Sorted only to keep the trace output stable
    for name in sorted(discover_custom_tokens(environ.keys())):
        tracer.trace(f'configuring custom token "{name}"')
        resolved[name] = resolve_custom_token(name, environ, resolved.get(name, token), tracer)

    return resolved


def _select_storage(
    storage: Optional[StorageBackend],
    default: StorageBackend,
    environ: Mapping[str, str],
    tracer: DebugTracer
) -> StorageBackend:
    use_redis, ok = env.get_bool_env(environ, env.ENV_USE_REDIS)
    if ok and use_redis:
        tracer.trace("using StorageBackend Redis")
        return _build_redis_storage(environ)
    if storage is not None:
        tracer.trace("using StorageBackend Custom")
        return storage
    tracer.trace("using StorageBackend Default")
    return default


def _build_redis_storage(environ: Mapping[str, str]) -> RedisStorageBackend:
    address, ok = env.get_str_env(environ, env.ENV_REDIS_ADDRESS)
    if not ok:
        raise BackendConfigurationError(env.ENV_REDIS_ADDRESS)

    password, ok = env.get_str_env(environ, env.ENV_REDIS_PASSWORD)
    if not ok:
        password = ""

    db, ok = env.get_int_env(environ, env.ENV_REDIS_DB)
    if not ok:
        db = 0

    return RedisStorageBackend(address, password, db)


def _select_response_writer(
    response_writer: Optional[ResponseWriter],
    default: ResponseWriter,
    tracer: DebugTracer
) -> ResponseWriter:
    if response_writer is not None:
        tracer.trace("using ResponseWriter Custom")
        return response_writer
    tracer.trace("using ResponseWriter Default")
    return default
