"""Config – DispatchSettings for the mediator and its standard behaviors."""
from __future__ import annotations

import dataclasses
import logging

from mp_dispatch.config.settings.base import Settings
from mp_dispatch.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class DispatchSettings(Settings):
    """Settings read from ``DISPATCH_*`` environment variables.

    ``timeout_seconds`` and ``slow_request_ms`` are disabled when ``0``.
    """

    _prefix = "DISPATCH"

    cache_ttl_seconds: float = 60.0
    timeout_seconds: float = 0.0
    slow_request_ms: float = 0.0
    log_level: str = "INFO"
    json_logs: bool = True

    def _validate(self) -> None:
        if self.cache_ttl_seconds <= 0:
            raise InvalidSettingValueError("cache_ttl_seconds", self.cache_ttl_seconds, "must be positive")
        if self.timeout_seconds < 0:
            raise InvalidSettingValueError("timeout_seconds", self.timeout_seconds, "must not be negative")
        if self.slow_request_ms < 0:
            raise InvalidSettingValueError("slow_request_ms", self.slow_request_ms, "must not be negative")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")


__all__ = ["DispatchSettings"]
