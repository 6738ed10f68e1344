"""Exception hierarchy for refdoc."""

from .base import RefdocError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    SecurityError,
)
from .rendering import TemplateError
from .store import ExportFormatError, RecordNotFoundError, RecordStoreError

__all__ = [
    "RefdocError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "SecurityError",
    "RecordStoreError",
    "RecordNotFoundError",
    "ExportFormatError",
    "TemplateError",
]
