"""
refdoc - cross-linked API reference entities over parsed-code records.

    from refdoc import ReferenceFactory, load_export

    factory = ReferenceFactory(load_export("export.json"))
    ref = factory.resolve(42)
    ref.signature, ref.params, [u.title for u in ref.uses]
"""

__version__ = "0.1.0"

from .config import RefdocConfig, load_config
from .exceptions import RefdocError
from .models import Arg, EntityKind, Record, Tag, Term
from .reference import Projection, Reference, ReferenceFactory
from .reference_list import ReferenceList
from .rendering import JsonRenderer, Renderer, TemplateRenderer
from .store import MemoryRecordStore, Query, QueryResult, RecordStore, load_export

__all__ = [
    "__version__",
    "RefdocConfig",
    "load_config",
    "RefdocError",
    "Arg",
    "EntityKind",
    "Record",
    "Tag",
    "Term",
    "Projection",
    "Reference",
    "ReferenceFactory",
    "ReferenceList",
    "Renderer",
    "TemplateRenderer",
    "JsonRenderer",
    "RecordStore",
    "MemoryRecordStore",
    "Query",
    "QueryResult",
    "load_export",
]
