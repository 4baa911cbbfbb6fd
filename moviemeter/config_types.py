"""Typed configuration dataclasses for moviemeter.

Provides strongly-typed configuration objects that can be used throughout
the application for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """A configuration value has the wrong type or is out of range."""


@dataclass
class EndpointConfig:
    """Results endpoint configuration."""
    base_url: str = "http://127.0.0.1:3000"
    timeout_seconds: float = 30.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class DebounceConfig:
    """Debounce timing for filter edits."""
    delay_ms: int = 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    debounce: DebounceConfig = field(default_factory=DebounceConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "endpoint": self.endpoint.to_dict(),
            "debounce": self.debounce.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        config = cls(
            log_level=str(data.get("log_level", "INFO")).upper(),
            endpoint=EndpointConfig(**data.get("endpoint", {})),
            debounce=DebounceConfig(**data.get("debounce", {})),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check value types and ranges.

        Raises:
            ConfigError: On the first invalid value
        """
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got '{self.log_level}'")
        if not isinstance(self.endpoint.base_url, str) or not self.endpoint.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"endpoint.base_url must be an http(s) URL, got {self.endpoint.base_url!r}")
        timeout = self.endpoint.timeout_seconds
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"endpoint.timeout_seconds must be a positive number, got {timeout!r}")
        delay = self.debounce.delay_ms
        if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
            raise ConfigError(f"debounce.delay_ms must be a non-negative integer, got {delay!r}")


__all__ = ["AppConfig", "EndpointConfig", "DebounceConfig", "ConfigError"]
