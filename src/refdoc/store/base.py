"""Record store interface.

The record store is the external content store the reference layer reads
from. It is deliberately small: fetch by id, fetch children of a parent,
follow typed connections in either direction, run a filtered query, and
read metadata and taxonomy terms. Anything beyond that (persistence,
indexing, query planning) belongs to the implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Sequence

from ..models import Direction, Record, Term


@dataclass(frozen=True)
class Query:
    """A filtered, ordered record query.

    Attributes:
        types:   Type tags to include (empty = all).
        ids:     Restrict to these record ids, keeping their order unless
                 ``orderby`` is set.
        parent:  Only children of this record id.
        search:  Case-insensitive substring match on title.
        status:  Publication status filter (None = any).
        orderby: "title", "slug", "id" or None for store order.
        order:   "ASC" or "DESC".
        limit:   Maximum records returned (None = no paging).
        offset:  Records to skip before collecting.
    """

    types: tuple[str, ...] = ()
    ids: tuple[int, ...] = ()
    parent: Optional[int] = None
    search: str = ""
    status: Optional[str] = "publish"
    orderby: Optional[str] = None
    order: str = "ASC"
    limit: Optional[int] = None
    offset: int = 0

    @classmethod
    def from_criteria(cls, criteria: dict) -> "Query":
        """Build a query from loose criteria (``type`` may be a string)."""
        data = dict(criteria)
        for key in ("type", "types"):
            value = data.pop(key, None)
            if value is not None:
                data["types"] = (value,) if isinstance(value, str) else tuple(value)
        if "ids" in data:
            data["ids"] = tuple(int(i) for i in data["ids"])
        return cls(**data)


@dataclass
class QueryResult:
    """An already-run query: the ordered records plus paging information."""

    records: list[Record] = field(default_factory=list)
    found: int = 0
    query: Optional[Query] = None

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def ids(self) -> list[int]:
        return [r.id for r in self.records]

    @property
    def first(self) -> Optional[Record]:
        """The first record of the result, None when empty."""
        return self.records[0] if self.records else None

    def have_records(self) -> bool:
        return bool(self.records)


class RecordStore(ABC):
    """Read-only access to parsed-code records."""

    @abstractmethod
    def get(self, record_id: int) -> Optional[Record]:
        """Fetch a record by id. Returns None when it does not exist."""

    @abstractmethod
    def children(self, parent_id: int, types: Sequence[str] = ()) -> list[Record]:
        """All published records whose parent is ``parent_id``."""

    @abstractmethod
    def connected(
        self,
        record_id: int,
        connection_types: Sequence[str],
        direction: Direction,
        types: Sequence[str] = (),
    ) -> list[Record]:
        """Records connected to ``record_id`` through any of ``connection_types``.

        With ``Direction.FROM`` the record is the source of the connection and
        the targets are returned; with ``Direction.TO`` it is the target and
        the sources are returned. ``types`` filters the returned records.
        """

    @abstractmethod
    def query(self, query: Query) -> QueryResult:
        """Run a filtered, ordered query."""

    @abstractmethod
    def terms(self, record_id: int, taxonomy: str) -> list[Term]:
        """Terms assigned to a record in the given taxonomy, in store order."""

    def meta(self, record_id: int, key: str, default: Any = None) -> Any:
        """Read one metadata value for a record."""
        record = self.get(record_id)
        if record is None:
            return default
        return record.meta.get(key, default)

    def get_many(self, record_ids: Iterable[int]) -> list[Record]:
        """Fetch several records, silently skipping missing ids."""
        records = []
        for record_id in record_ids:
            record = self.get(record_id)
            if record is not None:
                records.append(record)
        return records
