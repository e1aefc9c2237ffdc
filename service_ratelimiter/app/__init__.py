"""
Rate limiter service package.

Resolves the effective rate limiter policy from built-in defaults, a
caller-supplied configuration and the process environment.

Structure:
- app.main: FastAPI app and start-up wiring.
- app.ratelimit: Policy models, environment lookups, custom token
  discovery, precedence resolution, storage backends and response writers.
"""
