"""Renderers: the template contract plus file-template and JSON renderers."""

from .base import Renderer
from .basic import TemplateRenderer
from .json_renderer import JsonRenderer

__all__ = ["Renderer", "TemplateRenderer", "JsonRenderer"]
