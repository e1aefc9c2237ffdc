"""
Shared configuration management for the rate limiter service.
"""

import os
from typing import Dict, Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Environment
    env: str = Field(default="local", validation_alias="RATE_LIMITER_ENV")
    log_level: str = Field(default="info", validation_alias="RATE_LIMITER_LOG_LEVEL")

    # File holding extra RATE_LIMITER_* variables
    env_file: str = Field(default=".env", validation_alias="RATE_LIMITER_ENV_FILE")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)


def capture_environment(env_file: Optional[str] = ".env") -> Dict[str, str]:
    """Snapshot the process environment, filling gaps from an env file.

    Variables already present in the process win over the file, so a
    deployment can always override what is checked into ``.env``.
    """
    environ: Dict[str, str] = {}
    if env_file and os.path.isfile(env_file):
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                environ[key] = value
    environ.update(os.environ)
    return environ
