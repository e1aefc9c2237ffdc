"""
Tests for shared configuration and error helpers.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.config import ServiceConfig, capture_environment, get_config
from shared.errors import BackendConfigurationError, RateLimitError


class TestCaptureEnvironment:
    """Test cases for capture_environment."""

    def test_reads_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("RATE_LIMITER_TOKEN_FILE_MAX_REQUESTS=12\n")
        monkeypatch.delenv("RATE_LIMITER_TOKEN_FILE_MAX_REQUESTS", raising=False)

        environ = capture_environment(str(env_file))

        assert environ["RATE_LIMITER_TOKEN_FILE_MAX_REQUESTS"] == "12"

    def test_process_environment_wins(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("RATE_LIMITER_IP_MAX_REQUESTS=1\n")
        monkeypatch.setenv("RATE_LIMITER_IP_MAX_REQUESTS", "2")

        environ = capture_environment(str(env_file))

        assert environ["RATE_LIMITER_IP_MAX_REQUESTS"] == "2"

    def test_missing_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RATE_LIMITER_DEBUG", "true")

        environ = capture_environment(str(tmp_path / "missing.env"))

        assert environ["RATE_LIMITER_DEBUG"] == "true"

    def test_snapshot_is_a_copy(self, monkeypatch):
        environ = capture_environment(None)
        monkeypatch.setenv("RATE_LIMITER_LATE_VARIABLE", "1")
        assert "RATE_LIMITER_LATE_VARIABLE" not in environ


class TestServiceConfig:
    """Test cases for ServiceConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RATE_LIMITER_LOG_LEVEL", raising=False)
        config = get_config("ratelimiter", 8080)

        assert isinstance(config, ServiceConfig)
        assert config.service_name == "ratelimiter"
        assert config.port == 8080
        assert config.log_level == "info"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMITER_LOG_LEVEL", "debug")
        assert get_config("ratelimiter", 8080).log_level == "debug"


class TestErrors:
    """Test cases for shared errors."""

    def test_backend_configuration_error(self):
        error = BackendConfigurationError("RATE_LIMITER_REDIS_ADDRESS")
        response = error.to_response()

        assert response.code == "BACKEND_CONFIGURATION_ERROR"
        assert "RATE_LIMITER_REDIS_ADDRESS" in response.message
        assert response.details["variable"] == "RATE_LIMITER_REDIS_ADDRESS"

    def test_rate_limit_error(self):
        error = RateLimitError()
        assert error.code == "RATE_LIMIT_ERROR"
        assert error.message == "Rate limit exceeded"
