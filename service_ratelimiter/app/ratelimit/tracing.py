"""
Debug tracing for configuration resolution.
"""

import json
from typing import Any, Dict

from shared.logging import get_logger


class DebugTracer:
    """Emits resolution trace lines while the debug gate is on."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.logger = get_logger("ratelimiter.config")

    def trace(self, message: str, **kwargs: Any) -> None:
        if self.enabled:
            self.logger.info(message, **kwargs)

    def trace_snapshot(self, snapshot: Dict[str, Any]) -> None:
        """Trace the serialized configuration; skipped if it cannot be serialized."""
        if not self.enabled:
            return
        try:
            serialized = json.dumps(snapshot, sort_keys=True)
        except (TypeError, ValueError):
            return
        self.logger.info(f"using configuration: {serialized}")
