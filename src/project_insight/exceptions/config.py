"""Configuration and registration exceptions."""

from typing import Any

from .base import ProjectInsightError


class ConfigurationError(ProjectInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class RegistrationError(ConfigurationError):
    """Raised when a scanner, interpreter, scorer or stack cannot be registered."""

    def __init__(self, kind: str, reason: str):
        super().__init__(
            f"Cannot register {kind}",
            details={"kind": kind, "reason": reason},
        )
        self.kind = kind
        self.reason = reason
