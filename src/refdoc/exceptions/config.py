"""Configuration and path safety exceptions."""

from pathlib import Path

from .base import RefdocError


class ConfigurationError(RefdocError):
    """Base class for configuration-related errors."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str):
        super().__init__(
            f"Invalid configuration for '{key}'",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidPathError(ConfigurationError):
    """Raised when a path does not exist or cannot be resolved."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid path: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class SecurityError(ConfigurationError):
    """Raised when a path escapes the configured source root."""

    def __init__(self, reason: str, path: Path):
        super().__init__(
            f"Security check failed: {reason}",
            details={"path": str(path)},
        )
        self.path = path
        self.reason = reason
