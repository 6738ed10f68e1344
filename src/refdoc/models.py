"""Record model for refdoc.

Records are the raw parsed-code items handed to us by an external parser.
Each one is a function, hook, class or method carrying its doc-comment tags,
argument list, line numbers and taxonomy terms:

    Record (class WP_Query)
        ├── meta["tags"]     @param / @return / @since / @deprecated ...
        ├── meta["args"]     argument list with defaults
        └── terms            namespace chain, since versions, source file

Everything in this module is plain data. The reference layer wraps records
in typed entities but never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

# Well-known metadata keys on a record.
META_TAGS = "tags"
META_ARGS = "args"
META_LINE_NUM = "line_num"
META_END_LINE_NUM = "end_line_num"
META_HOOK_TYPE = "hook_type"
META_SOURCE_CODE = "source_code"

# Taxonomies a record can have terms in.
TAXONOMY_NAMESPACE = "namespace"
TAXONOMY_SINCE = "since"
TAXONOMY_SOURCE_FILE = "source-file"


class EntityKind(Enum):
    """The four kinds of documented code item."""

    FUNCTION = "function"
    HOOK = "hook"
    CLASS = "class"
    METHOD = "method"


class Direction(Enum):
    """Which end of a connection a record sits on."""

    FROM = "from"  # the record is the caller (uses)
    TO = "to"      # the record is the callee (used by)


@dataclass(frozen=True)
class Record:
    """A parsed-code item as stored by the record store.

    Attributes:
        id:      Unique record identifier.
        type:    Type tag, e.g. "function" (mapped to an EntityKind by the factory).
        title:   Display name, e.g. "WP_Query::query" or "get_the_title".
        slug:    URL slug.
        parent:  Parent record id (methods point at their class), 0 for none.
        excerpt: Short description (summary).
        content: Long description body.
        status:  Publication status.
        meta:    Free-form metadata mapping (tags, args, line numbers ...).
    """

    id: int
    type: str
    title: str = ""
    slug: str = ""
    parent: int = 0
    excerpt: str = ""
    content: str = ""
    status: str = "publish"
    meta: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        """Build a record from an export mapping."""
        return cls(
            id=int(data["id"]),
            type=str(data["type"]),
            title=str(data.get("title", "")),
            slug=str(data.get("slug") or data.get("title", "")),
            parent=int(data.get("parent") or 0),
            excerpt=str(data.get("excerpt") or ""),
            content=str(data.get("content") or ""),
            status=str(data.get("status") or "publish"),
            meta=dict(data.get("meta") or {}),
        )


@dataclass(frozen=True)
class Tag:
    """One doc-comment tag, e.g. ``@param string $name Optional. The name.``"""

    name: str
    content: str = ""
    types: tuple[str, ...] = ()
    variable: str = ""
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Tag"]:
        """Normalize a raw tag mapping. Returns None for ill-shaped input."""
        if isinstance(raw, Tag):
            return raw
        if not isinstance(raw, Mapping) or not raw.get("name"):
            return None
        types = raw.get("types") or ()
        if isinstance(types, str):
            types = (types,)
        return cls(
            name=str(raw["name"]),
            content=str(raw.get("content") or ""),
            types=tuple(str(t) for t in types),
            variable=str(raw.get("variable") or ""),
            description=str(raw.get("description") or ""),
        )

    @property
    def type_string(self) -> str:
        """Pipe-joined type list, e.g. ``string|array``."""
        return "|".join(self.types)


@dataclass(frozen=True)
class Arg:
    """One entry of a callable's argument list."""

    name: str
    default: Optional[str] = None
    type: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Arg"]:
        if isinstance(raw, Arg):
            return raw
        if not isinstance(raw, Mapping) or not raw.get("name"):
            return None
        default = raw.get("default")
        return cls(
            name=str(raw["name"]),
            default=None if default is None else str(default),
            type=str(raw.get("type") or ""),
        )

    def to_dict(self) -> dict:
        data: dict = {"name": self.name}
        if self.default is not None:
            data["default"] = self.default
        if self.type:
            data["type"] = self.type
        return data


@dataclass(frozen=True)
class Term:
    """A taxonomy term (namespace segment, since version, source file)."""

    id: int
    name: str
    slug: str = ""
    parent: int = 0
    taxonomy: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], taxonomy: str = "") -> "Term":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            slug=str(data.get("slug") or data.get("name", "")),
            parent=int(data.get("parent") or 0),
            taxonomy=str(data.get("taxonomy") or taxonomy),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "parent": self.parent,
            "taxonomy": self.taxonomy,
        }
