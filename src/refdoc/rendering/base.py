"""Renderer interface."""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class Renderer(ABC):
    """Turns a named template and a data mapping into output text.

    Template lookup is entirely the renderer's concern; callers only pass a
    template name.
    """

    @abstractmethod
    def render(self, name: str, data: Mapping[str, Any]) -> str:
        """Render template ``name`` with ``data``."""
