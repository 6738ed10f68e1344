"""In-memory record store.

Keeps records, taxonomy terms and typed connections in dictionaries with
three connection indexes:

    - by type:   all connections of a given connection type
    - outgoing:  connections keyed by source record id
    - incoming:  connections keyed by target record id

Used by tests, by the command line over a JSON export, and as the reference
implementation of the RecordStore contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..logging_config import get_logger
from ..models import Direction, Record, Term
from .base import Query, QueryResult, RecordStore

logger = get_logger(__name__)

_ORDER_KEYS = {
    "title": lambda r: r.title,
    "slug": lambda r: r.slug,
    "id": lambda r: r.id,
}


@dataclass(frozen=True)
class Connection:
    """A typed, directed edge between two records, e.g. functions_to_hooks."""

    type: str
    source: int
    target: int


class MemoryRecordStore(RecordStore):
    """Dictionary-backed RecordStore."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: dict[int, Record] = {}
        self._by_parent: dict[int, list[int]] = {}
        self._terms: dict[tuple[int, str], list[Term]] = {}
        self._connections: list[Connection] = []
        self._by_type: dict[str, list[Connection]] = {}
        self._outgoing: dict[int, list[Connection]] = {}
        self._incoming: dict[int, list[Connection]] = {}
        for record in records:
            self.add(record)

    # -----------------------------------------------------------------
    # Population
    # -----------------------------------------------------------------

    def add(self, record: Record) -> Record:
        """Add or replace a record."""
        previous = self._records.get(record.id)
        if previous is not None and previous.parent in self._by_parent:
            siblings = self._by_parent[previous.parent]
            if record.id in siblings:
                siblings.remove(record.id)
        self._records[record.id] = record
        if record.parent:
            self._by_parent.setdefault(record.parent, []).append(record.id)
        return record

    def add_term(self, record_id: int, term: Term) -> None:
        """Assign a term to a record. The term's taxonomy selects the bucket."""
        self._terms.setdefault((record_id, term.taxonomy), []).append(term)

    def connect(self, connection_type: str, source: int, target: int) -> Connection:
        """Add a typed connection ``source -> target``."""
        connection = Connection(connection_type, source, target)
        self._connections.append(connection)
        self._by_type.setdefault(connection_type, []).append(connection)
        self._outgoing.setdefault(source, []).append(connection)
        self._incoming.setdefault(target, []).append(connection)
        return connection

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def connections(self, connection_type: Optional[str] = None) -> list[Connection]:
        """All connections, optionally of one type."""
        if connection_type is None:
            return list(self._connections)
        return list(self._by_type.get(connection_type, []))

    # -----------------------------------------------------------------
    # RecordStore
    # -----------------------------------------------------------------

    def get(self, record_id: int) -> Optional[Record]:
        try:
            return self._records.get(int(record_id))
        except (TypeError, ValueError):
            return None

    def children(self, parent_id: int, types: Sequence[str] = ()) -> list[Record]:
        children = []
        for child_id in self._by_parent.get(parent_id, []):
            record = self._records[child_id]
            if record.status != "publish":
                continue
            if types and record.type not in types:
                continue
            children.append(record)
        return children

    def connected(
        self,
        record_id: int,
        connection_types: Sequence[str],
        direction: Direction,
        types: Sequence[str] = (),
    ) -> list[Record]:
        if not connection_types:
            return []
        if direction is Direction.FROM:
            edges = self._outgoing.get(record_id, [])
            other_ids = [e.target for e in edges if e.type in connection_types]
        else:
            edges = self._incoming.get(record_id, [])
            other_ids = [e.source for e in edges if e.type in connection_types]

        seen: set[int] = set()
        records = []
        for other_id in other_ids:
            if other_id in seen:
                continue
            seen.add(other_id)
            record = self._records.get(other_id)
            if record is None:
                logger.debug("Dangling connection %s -> %s", record_id, other_id)
                continue
            if types and record.type not in types:
                continue
            records.append(record)
        return records

    def query(self, query: Query) -> QueryResult:
        if query.ids:
            candidates = [self._records[i] for i in query.ids if i in self._records]
        else:
            candidates = list(self._records.values())

        needle = query.search.lower()
        matched = [
            r
            for r in candidates
            if (not query.types or r.type in query.types)
            and (query.parent is None or r.parent == query.parent)
            and (query.status is None or r.status == query.status)
            and (not needle or needle in r.title.lower())
        ]

        if query.orderby:
            key = _ORDER_KEYS.get(query.orderby)
            if key is None:
                logger.warning("Unknown orderby %r, keeping store order", query.orderby)
            else:
                matched.sort(key=key, reverse=query.order.upper() == "DESC")
        elif query.order.upper() == "DESC":
            matched.reverse()

        found = len(matched)
        start = max(query.offset, 0)
        end = None if query.limit is None else start + query.limit
        return QueryResult(records=matched[start:end], found=found, query=query)

    def terms(self, record_id: int, taxonomy: str) -> list[Term]:
        return list(self._terms.get((record_id, taxonomy), []))
