"""Reference entities.

A ``Reference`` wraps one parsed-code record and exposes its documentation
fields. Every field is computed on first access and memoized for the life
of the entity; records are never modified.

    factory.resolve(42)
        └── Reference(kind=function)
              ├── summary / description      content pipelines
              ├── params / return / signature  doc tags + argument list
              ├── namespace / changelog        taxonomy terms
              ├── uses / used_by               typed connections, via the factory
              └── source_code()                source tree, via SourceExtractor

References are only created by a ``ReferenceFactory``; constructing one
directly raises ``TypeError``. That keeps exactly one instance per
(kind, record id) inside a factory.
"""

from __future__ import annotations

import json
from functools import cached_property
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..docblock import (
    make_doclink_clickable,
    parse_deprecated,
    parse_params,
    parse_return,
    remove_inline_internal,
)
from ..docblock.tags import args_of, tags_of
from ..exceptions import RefdocError
from ..logging_config import get_logger
from ..models import (
    META_ARGS,
    META_END_LINE_NUM,
    META_LINE_NUM,
    META_SOURCE_CODE,
    META_TAGS,
    TAXONOMY_NAMESPACE,
    TAXONOMY_SINCE,
    TAXONOMY_SOURCE_FILE,
    Arg,
    Direction,
    EntityKind,
    Record,
    Tag,
    Term,
)
from . import serialize
from .kinds import KindSpec
from .terms import build_changelog, build_namespace

if TYPE_CHECKING:
    from .factory import ReferenceFactory

logger = get_logger(__name__)

_CONSTRUCT = object()

_RECORD_FIELDS = frozenset(("id", "type", "title", "slug", "parent", "excerpt", "content", "status"))


class Reference:
    """A documented function, hook, class or method."""

    def __init__(self, record: Record, spec: KindSpec, factory: ReferenceFactory, _token=None):
        if _token is not _CONSTRUCT:
            raise TypeError("References are created through ReferenceFactory.resolve()")
        self.record = record
        self.spec = spec
        self._factory = factory
        self._extra: dict[str, Any] = {}

    @classmethod
    def _create(cls, record: Record, spec: KindSpec, factory: ReferenceFactory) -> "Reference":
        return cls(record, spec, factory, _token=_CONSTRUCT)

    def __repr__(self) -> str:
        return f"<Reference {self.type} {self.id} {self.title!r}>"

    # -----------------------------------------------------------------
    # Identity
    # -----------------------------------------------------------------

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def kind(self) -> EntityKind:
        return self.spec.kind

    @property
    def type(self) -> str:
        return self.spec.kind.value

    @property
    def callable(self) -> bool:
        return self.spec.callable

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def slug(self) -> str:
        return self.record.slug

    @property
    def name(self) -> str:
        """Short name: the part after ``::`` for methods, the title otherwise."""
        return self.title.rsplit("::", 1)[-1]

    @property
    def template(self) -> str:
        return self.spec.template

    @property
    def url(self) -> str:
        archive = self._factory.config.archive_url(self.type)
        if not archive or not self.slug:
            return ""
        return f"{archive}{self.slug}/"

    # -----------------------------------------------------------------
    # Raw data access
    # -----------------------------------------------------------------

    def meta(self, key: str, default: Any = None) -> Any:
        """Read one metadata value of the underlying record."""
        try:
            return self.record.meta.get(key, default)
        except AttributeError:
            return default

    def _terms(self, taxonomy: str) -> list[Term]:
        try:
            return self._factory.store.terms(self.id, taxonomy)
        except RefdocError as e:
            logger.warning(f"Could not read {taxonomy} terms of record {self.id}: {e}")
            return []

    def _line(self, key: str) -> int:
        try:
            return int(self.meta(key, 0) or 0)
        except (TypeError, ValueError):
            return 0

    @cached_property
    def tags(self) -> list[Tag]:
        return tags_of(self.meta(META_TAGS))

    @cached_property
    def args(self) -> list[Arg]:
        return args_of(self.meta(META_ARGS))

    # -----------------------------------------------------------------
    # Documentation fields
    # -----------------------------------------------------------------

    @cached_property
    def summary(self) -> str:
        if not self.record.excerpt:
            return ""
        return self._factory.excerpt_pipeline(self.record.excerpt)

    @cached_property
    def description(self) -> str:
        description = self._factory.description_pipeline(self.record.content)
        description = make_doclink_clickable(description, self._factory.config)
        return remove_inline_internal(description)

    @cached_property
    def returns(self) -> dict[str, str]:
        return parse_return(self.tags)

    @cached_property
    def signature(self) -> dict[str, Any]:
        return self.spec.signature(self)

    @cached_property
    def params(self) -> dict[str, dict[str, Any]]:
        return parse_params(self.tags, self.args, self._factory.config)

    @cached_property
    def namespace(self) -> dict[str, Any]:
        return build_namespace(self._terms(TAXONOMY_NAMESPACE))

    @cached_property
    def changelog(self) -> dict[str, dict[str, str]]:
        return build_changelog(self._terms(TAXONOMY_SINCE), self.tags, self._factory.config)

    @cached_property
    def deprecated(self) -> str:
        return parse_deprecated(self.tags)

    # -----------------------------------------------------------------
    # Graph
    # -----------------------------------------------------------------

    @cached_property
    def uses(self) -> list[Reference]:
        if not self.spec.has_uses:
            return []
        return self._connected(self.spec.uses_types, Direction.FROM, self.spec.uses_kinds)

    @cached_property
    def used_by(self) -> list[Reference]:
        if not self.spec.has_used_by:
            return []
        return self._connected(self.spec.used_by_types, Direction.TO, self.spec.used_by_kinds)

    @cached_property
    def methods(self) -> list[Reference]:
        """Methods of a class, sorted by method name."""
        if not self.spec.has_methods:
            return []
        factory = self._factory
        try:
            records = factory.store.children(self.id, factory.tags_for([EntityKind.METHOD]))
        except RefdocError as e:
            logger.warning(f"Could not read methods of record {self.id}: {e}")
            return []
        methods = [m for m in (factory.resolve(r) for r in records) if m is not None]
        return sorted(methods, key=lambda m: m.name)

    def _connected(self, connection_types, direction: Direction, kinds) -> list[Reference]:
        factory = self._factory
        try:
            records = factory.store.connected(
                self.id, connection_types, direction, factory.tags_for(kinds)
            )
        except RefdocError as e:
            logger.warning(f"Could not follow {direction.value} connections of {self.id}: {e}")
            return []
        return [ref for ref in (factory.resolve(r) for r in records) if ref is not None]

    # -----------------------------------------------------------------
    # Source
    # -----------------------------------------------------------------

    @cached_property
    def source_file_term(self) -> Optional[Term]:
        terms = self._terms(TAXONOMY_SOURCE_FILE)
        return terms[0] if terms else None

    @property
    def source_file(self) -> str:
        term = self.source_file_term
        return term.name if term else ""

    @property
    def start_line(self) -> int:
        return self._line(META_LINE_NUM)

    @property
    def end_line(self) -> int:
        return self._line(META_END_LINE_NUM)

    def source_file_archive_link(self) -> str:
        term = self.source_file_term
        if term is None:
            return ""
        return self._factory.config.term_url(TAXONOMY_SOURCE_FILE, term.slug)

    def has_source_code(self) -> bool:
        return self.type in self._factory.config.types_with_source_code

    def source_code(self, force_parse: bool = False) -> str:
        """Source code of this item.

        Source stored with the record is used unless ``force_parse`` is set;
        otherwise the line range is read from the source tree.
        """
        if not force_parse:
            stored = self.meta(META_SOURCE_CODE)
            if isinstance(stored, str) and stored:
                return stored
        if not self.has_source_code():
            return ""
        return self._factory.source_extractor.extract(
            self.source_file, self.start_line, self.end_line, force=force_parse
        )

    # -----------------------------------------------------------------
    # Explanations
    # -----------------------------------------------------------------

    @cached_property
    def explanation(self) -> Optional[Record]:
        """The published explanation record attached to this reference, if any."""
        try:
            children = self._factory.store.children(
                self.id, (self._factory.config.explanation_type,)
            )
        except RefdocError as e:
            logger.warning(f"Could not read explanation of record {self.id}: {e}")
            return None
        return children[0] if children else None

    def explanation_field(self, name: str) -> str:
        """One field of the explanation (``content``, ``title``, ... or a meta key).

        Empty when there is no explanation or no such field.
        """
        explanation = self.explanation
        if explanation is None:
            return ""
        if name in _RECORD_FIELDS:
            value = getattr(explanation, name)
        else:
            value = (explanation.meta or {}).get(name)
        return "" if value is None else str(value)

    # -----------------------------------------------------------------
    # Field access
    # -----------------------------------------------------------------

    def get(self, key: str) -> Any:
        """Field by name, including fields registered on the factory.

        Unknown keys return None.
        """
        accessor = _ACCESSORS.get(key)
        if accessor is not None:
            return accessor(self)

        if key in self._extra:
            return self._extra[key]
        field_fn = self._factory.fields.get(key)
        if field_fn is None:
            return None
        value = field_fn(self)
        self._extra[key] = value
        return value

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    # -----------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------

    def basic_data(self) -> dict[str, Any]:
        return serialize.basic_data(self, self._factory.projection)

    def full_data(self) -> dict[str, Any]:
        return serialize.full_data(self, self._factory.projection)

    def to_dict(self) -> dict[str, Any]:
        return self.full_data()

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def template_data(self) -> dict[str, Any]:
        return {"reference": self, **self.basic_data()}

    def render(self, template: Optional[str] = None) -> str:
        name = template or self.template
        logger.debug(f"Rendering {self!r} with template {name}")
        return self._factory.renderer.render(name, self.template_data())


_ACCESSORS: dict[str, Callable[[Reference], Any]] = {
    "id": lambda r: r.id,
    "title": lambda r: r.title,
    "slug": lambda r: r.slug,
    "callable": lambda r: r.callable,
    "url": lambda r: r.url,
    "type": lambda r: r.type,
    "summary": lambda r: r.summary,
    "description": lambda r: r.description,
    "namespace": lambda r: r.namespace,
    "return": lambda r: r.returns,
    "signature": lambda r: r.signature,
    "params": lambda r: r.params,
    "source_file": lambda r: r.source_file,
    "start_line": lambda r: r.start_line,
    "end_line": lambda r: r.end_line,
    "changelog": lambda r: r.changelog,
    "deprecated": lambda r: r.deprecated,
    "uses": lambda r: r.uses,
    "used_by": lambda r: r.used_by,
    "methods": lambda r: r.methods,
}

BUILTIN_FIELDS = frozenset(_ACCESSORS)
