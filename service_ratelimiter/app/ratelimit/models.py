"""
Rate policy data models for the rate limiter.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .responder import ResponseWriter
from .storage import StorageBackend


class RatePolicy(BaseModel):
    """Requests-per-second ceiling and block duration for one policy scope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_requests_per_second: int = Field(alias="maxRequestsPerSecond")
    block_time_milliseconds: int = Field(alias="blockTimeMilliseconds")


class RateLimiterConfig(BaseModel):
    """Partial configuration supplied by the caller.

    Every overridable field defaults to ``None``, meaning "unset". Anything
    else is an explicit choice, even when it equals the built-in default.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ip: Optional[RatePolicy] = None
    token: Optional[RatePolicy] = None
    custom_tokens: Optional[Dict[str, Optional[RatePolicy]]] = None
    storage: Optional[StorageBackend] = None
    response_writer: Optional[ResponseWriter] = None
    debug: Optional[bool] = None
    # Not overridable by environment
    disable_envs: bool = False


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully populated policy, shared read-only by every request handler."""

    ip: RatePolicy
    token: RatePolicy
    storage: StorageBackend
    response_writer: ResponseWriter
    custom_tokens: Mapping[str, RatePolicy] = field(default_factory=dict)
    debug: bool = False
    disable_envs: bool = False

    def __post_init__(self):
        object.__setattr__(self, "custom_tokens", MappingProxyType(dict(self.custom_tokens)))

    def policy_for_token(self, token: str) -> Tuple[RatePolicy, bool]:
        """Return the policy for ``token`` and whether it has its own scope."""
        policy = self.custom_tokens.get(token)
        if policy is not None:
            return policy, True
        return self.token, False

    def snapshot(self) -> Dict[str, Any]:
        """Key/value view of the configuration used for debug output."""
        return {
            "ip": self.ip.model_dump(by_alias=True),
            "token": self.token.model_dump(by_alias=True),
            "tokens": {
                name: policy.model_dump(by_alias=True)
                for name, policy in self.custom_tokens.items()
            },
            "storage": self.storage.kind,
            "responseWriter": self.response_writer.kind,
            "debug": self.debug,
            "disableEnvs": self.disable_envs,
        }
