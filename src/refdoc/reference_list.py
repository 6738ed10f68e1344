"""Reference lists: a query result wrapped as references.

A ``ReferenceList`` stands in for the result set it wraps. Metadata keys
and result-set attributes are both readable as attributes:

    refs = ReferenceList(factory, {"type": "function", "search": "title"},
                         meta={"heading": "Title functions"})
    refs.heading          # metadata
    refs.found            # from the QueryResult
    refs.map_render({"hook": "hook-item", "function": "function-item"})
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from .exceptions import RefdocError
from .logging_config import get_logger
from .models import Record
from .reference import Reference, ReferenceFactory
from .store import Query, QueryResult

logger = get_logger(__name__)

ResultSource = Union[QueryResult, Query, Mapping[str, Any], Sequence[Union[Record, int]], None]


class ReferenceList:
    """An ordered result set whose members are resolved to references on demand."""

    def __init__(
        self,
        factory: ReferenceFactory,
        result: ResultSource = None,
        meta: Optional[Mapping[str, Any]] = None,
    ):
        self._factory = factory
        self._result = self._run(result)
        self._meta = dict(meta or {})

    def _run(self, result: ResultSource) -> QueryResult:
        if isinstance(result, QueryResult):
            return result
        store = self._factory.store
        if result is None:
            query = Query()
        elif isinstance(result, Query):
            query = result
        elif isinstance(result, Mapping):
            query = Query.from_criteria(result)
        else:
            records = [r for r in (self._record(item) for item in result) if r is not None]
            return QueryResult(records=records, found=len(records))

        try:
            return store.query(query)
        except RefdocError as e:
            logger.warning(f"Reference list query failed: {e}")
            return QueryResult(query=query)

    def _record(self, item: Union[Record, int]) -> Optional[Record]:
        if isinstance(item, Record):
            return item
        try:
            return self._factory.store.get(item)
        except RefdocError as e:
            logger.warning(f"Reference list could not fetch record {item}: {e}")
            return None

    @property
    def meta(self) -> dict[str, Any]:
        return self._meta

    @property
    def result(self) -> QueryResult:
        return self._result

    def entities(self) -> list[Reference]:
        """References for every record of the result set, in order.

        Not cached: each call resolves through the factory again.
        """
        return self._factory.resolve_many(self._result.records)

    def reference(self) -> Optional[Reference]:
        """The first reference of the list, None when empty."""
        entities = self.entities()
        return entities[0] if entities else None

    def template_data(self) -> dict[str, Any]:
        return {"list": self, **self._meta, "references": self.entities()}

    def render(self, template: str) -> str:
        return self._factory.renderer.render(template, self.template_data())

    def map_render(self, template: Union[str, Mapping[str, str]]) -> str:
        """Render every member and concatenate the output.

        ``template`` is either one template name for all members or a
        mapping of kind to template name; members whose kind is not mapped
        use the first template of the mapping.
        """
        if isinstance(template, Mapping):
            template_map = dict(template)
            default = next(iter(template_map.values()), None)
        else:
            template_map = {}
            default = template

        return "".join(
            reference.render(template_map.get(reference.type, default))
            for reference in self.entities()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self._meta,
            "references": [reference.full_data() for reference in self.entities()],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._meta:
            return self._meta[name]
        return getattr(self._result, name)

    def __iter__(self) -> Iterator[Reference]:
        return iter(self.entities())

    def __len__(self) -> int:
        """Number of members that resolve to references, as iteration yields them.

        ``found`` and ``result`` still describe the raw result set.
        """
        return len(self.entities())
