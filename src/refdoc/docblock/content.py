"""Content filter pipelines for summaries and descriptions.

A pipeline is an ordered list of ``str -> str`` filters applied left to
right. Pipelines are plain objects handed to the reference factory, so a
caller can swap in markdown rendering, paragraph wrapping or anything else
without touching the entity code.
"""

from __future__ import annotations

import html
import re
from typing import Callable, Iterable, Iterator

ContentFilter = Callable[[str], str]

_INTERNAL = re.compile(r"\{@internal (.+?)\}\}")


def escape_html(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and both quote characters."""
    return html.escape(text, quote=True)


def remove_inline_internal(content: str) -> str:
    """Strip ``{@internal ...}}`` annotations; they are not meant to be shown."""
    return _INTERNAL.sub("", content)


def fix_parser_markup(text: str) -> str:
    """Undo the ``<strong>`` markup the parser introduces for ``__`` runs."""
    return text.replace("<strong>", "__").replace("</strong>", "__")


class ContentPipeline:
    """An ordered, editable sequence of content filters."""

    def __init__(self, filters: Iterable[ContentFilter] = ()) -> None:
        self._filters: list[ContentFilter] = list(filters)

    def __call__(self, content: str) -> str:
        for content_filter in self._filters:
            content = content_filter(content)
        return content

    def __iter__(self) -> Iterator[ContentFilter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def append(self, content_filter: ContentFilter) -> "ContentPipeline":
        self._filters.append(content_filter)
        return self

    def insert(self, index: int, content_filter: ContentFilter) -> "ContentPipeline":
        self._filters.insert(index, content_filter)
        return self

    def remove(self, content_filter: ContentFilter) -> "ContentPipeline":
        self._filters.remove(content_filter)
        return self

    def copy(self) -> "ContentPipeline":
        return ContentPipeline(self._filters)


def excerpt_pipeline() -> ContentPipeline:
    """Default summary pipeline: escape, then drop internal annotations."""
    return ContentPipeline([escape_html, remove_inline_internal])


def description_pipeline() -> ContentPipeline:
    """Default description pipeline (identity).

    Link resolution and internal-annotation stripping always run after it.
    """
    return ContentPipeline()
