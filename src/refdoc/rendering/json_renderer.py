"""JSON renderer: ignores the template name and emits the data as JSON."""

import json
from typing import Any, Mapping, Optional

from ..reference.serialize import _serialize_value
from .base import Renderer


class JsonRenderer(Renderer):
    """Render the JSON projection of a data mapping.

    Entities (anything with ``to_dict``) are emitted as their full
    projection. The ``reference`` back-pointer of entity template data is
    skipped; its fields are already present at the top level.
    """

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        payload = {key: _payload(value) for key, value in data.items() if key != "reference"}
        return json.dumps(payload, indent=self.indent)


def _payload(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_payload(v) for v in value]
    return _serialize_value(value)
