"""
File-based template renderer.

Templates live in ``<template_dir>/<name><extension>`` and use
``string.Template`` placeholders:

    <h2>$title</h2>
    <p>$summary</p>
    <code>$signature_name</code>
    <!-- subrender:methods -->

Mapping values are flattened one level (``signature.name`` becomes
``$signature_name``). A ``<!-- subrender:KEY -->`` marker is kept in the
output and followed by every nested item under ``KEY`` rendered with its
own default template.
"""

import re
from pathlib import Path
from string import Template
from typing import Any, Mapping, Union

from ..exceptions import TemplateError
from ..logging_config import get_logger
from .base import Renderer

logger = get_logger(__name__)

_SUBRENDER = re.compile(r"<!-- subrender:(\S+) -->")


class TemplateRenderer(Renderer):
    """Render templates from a directory with ``string.Template``."""

    def __init__(self, template_dir: Union[str, Path] = "templates/refdoc", extension: str = ".html"):
        self.template_dir = Path(template_dir)
        self.extension = extension

    def template_path(self, name: str) -> Path:
        return self.template_dir / f"{name}{self.extension}"

    def load(self, name: str) -> str:
        """Template source, '' when the template does not exist.

        Raises:
            TemplateError: If the template exists but cannot be read
        """
        path = self.template_path(name)
        if not path.is_file():
            logger.debug(f"Template not found: {path}")
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(name, str(e))

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        source = self.load(name)
        if not source:
            return ""
        markup = Template(source).safe_substitute(self.context(data))
        return _SUBRENDER.sub(lambda m: self._subrender(m.group(1), data), markup)

    @staticmethod
    def context(data: Mapping[str, Any]) -> dict[str, str]:
        """Flatten data into template substitutions."""
        context: dict[str, str] = {}
        for key, value in data.items():
            if isinstance(value, Mapping):
                for sub_key, sub_value in value.items():
                    if _is_scalar(sub_value):
                        context[f"{key}_{sub_key}"] = _text(sub_value)
            elif _is_scalar(value):
                context[key] = _text(value)
        return context

    def _subrender(self, key: str, data: Mapping[str, Any]) -> str:
        items = data.get(key)
        if not _renderables(items) and "reference" in data:
            items = data["reference"].get(key)

        markup = f"<!-- subrender:{key} -->\n"
        if _renderables(items):
            for item in items:
                markup += item.render()
        return markup


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _renderables(items: Any) -> bool:
    return isinstance(items, (list, tuple)) and all(hasattr(i, "render") for i in items)
