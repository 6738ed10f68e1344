"""Reference factory and identity cache.

The factory is the only way to obtain a ``Reference``. It maps a record's
type tag onto a ``KindSpec`` and keeps one instance per (kind, record id):

    factory = ReferenceFactory(store, config)
    a = factory.resolve(42)
    b = factory.resolve(store.get(42))
    assert a is b

Graph edges (uses, used_by, methods) are resolved through the same factory,
so they point at the same instances as direct lookups.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Union

from ..cache import SourceCache
from ..config import DEFAULT_CONFIG, RefdocConfig
from ..docblock import ContentPipeline, description_pipeline, excerpt_pipeline
from ..exceptions import RefdocError
from ..logging_config import get_logger
from ..models import EntityKind, Record
from ..store import RecordStore
from .entity import BUILTIN_FIELDS, Reference
from .kinds import DEFAULT_KINDS, KindSpec
from .serialize import Projection
from .source import SourceExtractor

if TYPE_CHECKING:
    from ..rendering import Renderer

logger = get_logger(__name__)

RecordOrId = Union[Record, int, str]
FieldFn = Callable[[Reference], Any]


class ReferenceCache:
    """Identity map of references keyed by (kind, record id).

    Also indexes cached references by record id alone so that resolving a
    bare id a second time does not fetch the record again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[tuple[EntityKind, int], Reference] = {}
        self._by_id: dict[int, Reference] = {}

    def get(self, kind: EntityKind, record_id: int) -> Optional[Reference]:
        return self._entries.get((kind, record_id))

    def get_by_id(self, record_id: int) -> Optional[Reference]:
        return self._by_id.get(record_id)

    def get_or_create(
        self, kind: EntityKind, record_id: int, create: Callable[[], Reference]
    ) -> Reference:
        """Return the cached reference, constructing it under the lock if absent."""
        key = (kind, record_id)
        reference = self._entries.get(key)
        if reference is not None:
            return reference
        with self._lock:
            reference = self._entries.get(key)
            if reference is None:
                reference = create()
                self._entries[key] = reference
                self._by_id[record_id] = reference
            return reference

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._by_id.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


class FieldRegistry:
    """Extra fields made available through ``Reference.get``.

    A field function takes the reference and returns the value; the value
    is memoized per reference. Built-in field names cannot be overridden.
    """

    def __init__(self) -> None:
        self._fields: dict[str, FieldFn] = {}

    def register(self, name: str, fn: FieldFn) -> None:
        if name in BUILTIN_FIELDS:
            raise ValueError(f"'{name}' is a built-in reference field")
        self._fields[name] = fn

    def unregister(self, name: str) -> None:
        self._fields.pop(name, None)

    def get(self, name: str) -> Optional[FieldFn]:
        return self._fields.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def names(self) -> list[str]:
        return list(self._fields)


class ReferenceFactory:
    """Creates, caches and resolves references over a record store.

    Args:
        store: Record store the references read from.
        config: Settings; defaults to ``DEFAULT_CONFIG``.
        renderer: Renderer used by ``Reference.render``; a ``TemplateRenderer``
            over ``config.template_dir`` is created on first use if omitted.
        cache: Identity cache; a fresh one per factory if omitted.
        source_extractor: Reads source code line ranges; built from config
            if omitted.
        projection: Basic/advanced key sets for JSON output.
        excerpt_filters / description_filters: Content pipelines for the
            summary and description.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[RefdocConfig] = None,
        renderer: Optional[Renderer] = None,
        cache: Optional[ReferenceCache] = None,
        source_extractor: Optional[SourceExtractor] = None,
        projection: Optional[Projection] = None,
        excerpt_filters: Optional[ContentPipeline] = None,
        description_filters: Optional[ContentPipeline] = None,
    ):
        self.store = store
        self.config = config or DEFAULT_CONFIG
        self.cache = cache if cache is not None else ReferenceCache()
        self.projection = projection or Projection.from_config(self.config)
        self.excerpt_pipeline = excerpt_filters if excerpt_filters is not None else excerpt_pipeline()
        self.description_pipeline = (
            description_filters if description_filters is not None else description_pipeline()
        )
        self.fields = FieldRegistry()
        self._renderer = renderer
        self._source_extractor = source_extractor

        self._kinds: dict[str, KindSpec] = dict(DEFAULT_KINDS)
        for type_tag, kind in self.config.type_aliases.items():
            spec = DEFAULT_KINDS.get(kind)
            if spec is None:
                logger.warning(f"Ignoring alias {type_tag!r}: unknown kind {kind!r}")
                continue
            self._kinds[type_tag] = spec

    # -----------------------------------------------------------------
    # Type mapping
    # -----------------------------------------------------------------

    def register(self, type_tag: str, spec: KindSpec) -> None:
        """Map a record type tag onto a kind spec (replacing any existing one)."""
        self._kinds[type_tag] = spec

    def unregister(self, type_tag: str) -> None:
        self._kinds.pop(type_tag, None)

    def kind_for(self, type_tag: str) -> Optional[KindSpec]:
        return self._kinds.get(type_tag)

    def tags_for(self, kinds: Iterable[EntityKind]) -> tuple[str, ...]:
        """All type tags mapped onto any of ``kinds``."""
        wanted = set(kinds)
        return tuple(tag for tag, spec in self._kinds.items() if spec.kind in wanted)

    # -----------------------------------------------------------------
    # Resolution
    # -----------------------------------------------------------------

    def resolve(self, record_or_id: RecordOrId) -> Optional[Reference]:
        """Reference for a record or record id.

        Returns None when the record does not exist or its type tag is not
        mapped to a kind.
        """
        if isinstance(record_or_id, Record):
            record = record_or_id
        else:
            try:
                record_id = int(record_or_id)
            except (TypeError, ValueError):
                logger.debug(f"Not a record id: {record_or_id!r}")
                return None
            cached = self.cache.get_by_id(record_id)
            if cached is not None and self._is_mapped(cached):
                return cached
            record = self._fetch(record_id)
            if record is None:
                return None

        spec = self.kind_for(record.type)
        if spec is None:
            logger.debug(f"No kind registered for type {record.type!r} (record {record.id})")
            return None
        return self.cache.get_or_create(
            spec.kind, record.id, lambda: Reference._create(record, spec, self)
        )

    def get(self, kind: Union[EntityKind, str], record_or_id: RecordOrId) -> Optional[Reference]:
        """Reference of a specific kind; None if the record is of another kind."""
        try:
            kind = EntityKind(kind)
        except ValueError:
            logger.debug(f"Unknown kind {kind!r}")
            return None
        record_id = record_or_id.id if isinstance(record_or_id, Record) else record_or_id
        try:
            cached = self.cache.get(kind, int(record_id))
        except (TypeError, ValueError):
            return None
        if cached is not None and self._is_mapped(cached):
            return cached
        reference = self.resolve(record_or_id)
        if reference is None or reference.kind is not kind:
            return None
        return reference

    def resolve_many(self, records: Iterable[RecordOrId]) -> list[Reference]:
        """Resolve several records, dropping any that do not resolve."""
        references = []
        for item in records:
            reference = self.resolve(item)
            if reference is not None:
                references.append(reference)
        return references

    def _is_mapped(self, reference: Reference) -> bool:
        # Registrations may have changed since the reference was cached
        spec = self.kind_for(reference.record.type)
        return spec is not None and spec.kind is reference.kind

    def _fetch(self, record_id: int) -> Optional[Record]:
        try:
            record = self.store.get(record_id)
        except RefdocError as e:
            logger.warning(f"Could not fetch record {record_id}: {e}")
            return None
        if record is None:
            logger.debug(f"Record {record_id} not found")
        return record

    # -----------------------------------------------------------------
    # Collaborators
    # -----------------------------------------------------------------

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            from ..rendering import TemplateRenderer

            self._renderer = TemplateRenderer(
                self.config.template_dir, self.config.template_extension
            )
        return self._renderer

    @renderer.setter
    def renderer(self, renderer: Renderer) -> None:
        self._renderer = renderer

    @property
    def source_extractor(self) -> SourceExtractor:
        if self._source_extractor is None:
            cache = None
            if self.config.cache_enabled:
                cache = SourceCache(
                    cache_dir=self.config.cache_dir,
                    ttl_hours=self.config.cache_ttl_hours,
                    enabled=True,
                )
            self._source_extractor = SourceExtractor(
                self.config.source_root_path, cache, self.config.strip_source_indent
            )
        return self._source_extractor
