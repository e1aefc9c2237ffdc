"""
Shared utilities for the rate limiter service.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings and environment capture
- logging: Structured logging via structlog
- errors: Canonical error types and responses

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
