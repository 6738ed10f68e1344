"""JSON projections of reference entities.

Two depths:

    basic  the fields listed in ``Projection.basic_keys``; never contains
           another entity, so it is safe at any depth
    full   basic plus each ``Projection.advanced_keys`` field (uses,
           used_by) projected to a list of *basic* data, plus ``methods``
           for kinds that aggregate methods

Nested entities are only ever projected to basic data, which is what keeps
serialization finite on a cyclic uses/used-by graph.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from ..config import DEFAULT_ADVANCED_KEYS, DEFAULT_BASIC_KEYS, RefdocConfig

if TYPE_CHECKING:
    from .entity import Reference


@dataclass(frozen=True)
class Projection:
    """The key sets of the basic and full projections."""

    basic_keys: tuple[str, ...] = DEFAULT_BASIC_KEYS
    advanced_keys: tuple[str, ...] = DEFAULT_ADVANCED_KEYS

    @classmethod
    def from_config(cls, config: RefdocConfig) -> "Projection":
        return cls(basic_keys=tuple(config.basic_keys), advanced_keys=tuple(config.advanced_keys))

    def add_basic(self, *keys: str) -> "Projection":
        return replace(self, basic_keys=_extend(self.basic_keys, keys))

    def remove_basic(self, *keys: str) -> "Projection":
        return replace(self, basic_keys=tuple(k for k in self.basic_keys if k not in keys))

    def add_advanced(self, *keys: str) -> "Projection":
        return replace(self, advanced_keys=_extend(self.advanced_keys, keys))

    def remove_advanced(self, *keys: str) -> "Projection":
        return replace(self, advanced_keys=tuple(k for k in self.advanced_keys if k not in keys))


def _extend(keys: tuple[str, ...], extra: tuple[str, ...]) -> tuple[str, ...]:
    return keys + tuple(k for k in dict.fromkeys(extra) if k not in keys)


def basic_data(reference: Reference, projection: Projection) -> dict[str, Any]:
    return {key: _serialize_value(reference.get(key)) for key in projection.basic_keys}


def full_data(reference: Reference, projection: Projection) -> dict[str, Any]:
    data = basic_data(reference, projection)
    for key in projection.advanced_keys:
        data[key] = _nested(reference.get(key), projection)
    if reference.spec.has_methods and "methods" not in data:
        data["methods"] = _nested(reference.methods, projection)
    return data


def _nested(value: Any, projection: Projection) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [
            basic_data(item, projection) if _is_reference(item) else _serialize_value(item)
            for item in value
        ]
    return _serialize_value(value)


def _is_reference(value: Any) -> bool:
    return hasattr(value, "basic_data") and hasattr(value, "spec")


def _serialize_value(value: Any) -> Any:
    """Serialize a field value for JSON output."""
    if isinstance(value, (int, float, str, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _serialize_value(v) for k, v in value.items()}
    # Entities inside a basic field are cut down to their id
    if _is_reference(value):
        return value.id
    if hasattr(value, "to_dict"):
        return _serialize_value(value.to_dict())
    if hasattr(value, "value"):
        return _serialize_value(value.value)
    # Fallback: convert to string
    return str(value)
