"""Reference entities: kinds, factory, projections, source extraction."""

from .entity import Reference
from .factory import FieldRegistry, ReferenceCache, ReferenceFactory
from .kinds import CLASS, DEFAULT_KINDS, FUNCTION, HOOK, METHOD, KindSpec
from .serialize import Projection, basic_data, full_data
from .signature import default_signature, hook_signature, hook_type_for
from .source import SourceExtractor
from .terms import build_changelog, build_namespace, sort_namespace

__all__ = [
    "Reference",
    "ReferenceFactory",
    "ReferenceCache",
    "FieldRegistry",
    "KindSpec",
    "FUNCTION",
    "HOOK",
    "CLASS",
    "METHOD",
    "DEFAULT_KINDS",
    "Projection",
    "basic_data",
    "full_data",
    "default_signature",
    "hook_signature",
    "hook_type_for",
    "SourceExtractor",
    "sort_namespace",
    "build_namespace",
    "build_changelog",
]
