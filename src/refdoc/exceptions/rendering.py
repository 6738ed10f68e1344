"""Rendering exceptions."""

from .base import RefdocError


class TemplateError(RefdocError):
    """Raised when a template exists but cannot be read."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"Cannot load template: {name}",
            details={"template": name, "reason": reason},
        )
        self.name = name
        self.reason = reason
