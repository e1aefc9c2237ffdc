"""
Rate limiting configuration package.

Holds the policy models and the resolution engine that merges defaults,
caller configuration and environment overrides, together with the storage
backends and response writers it selects between.
"""
