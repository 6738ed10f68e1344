"""Taxonomy-derived fields: namespace chain and changelog."""

from __future__ import annotations

from typing import Any, Iterable

from ..config import RefdocConfig
from ..docblock.tags import filter_tags
from ..models import TAXONOMY_SINCE, Tag, Term


def sort_namespace(terms: Iterable[Term]) -> list[Term]:
    """Order namespace terms root-to-leaf, dropping terms outside the chain.

    Starting from the term whose parent is the root (0), repeatedly take the
    next term whose parent is the last accepted term. Terms that do not fit
    yet are set aside and put back into play after every acceptance.
    """
    pending = list(terms)
    rejected: list[Term] = []
    chain: list[Term] = []
    placed: set[int] = set()
    parent = 0

    while pending:
        term = pending.pop(0)
        if term.parent == parent and term.id not in placed:
            chain.append(term)
            placed.add(term.id)
            parent = term.id
            pending = rejected + pending
            rejected = []
        else:
            rejected.append(term)

    return chain


def build_namespace(terms: Iterable[Term]) -> dict[str, Any]:
    chain = sort_namespace(terms)
    return {
        "text": "\\".join(t.name for t in chain),
        "terms": chain,
    }


def build_changelog(
    since_terms: Iterable[Term], tags: Iterable[Tag], config: RefdocConfig
) -> dict[str, dict[str, str]]:
    """Pair ``since`` terms with ``@since`` tags whose content is the version."""
    since_tags = filter_tags(tags, "since")
    data: dict[str, dict[str, str]] = {}
    for term in since_terms:
        for tag in since_tags:
            if tag.content == term.name:
                data[term.name] = {
                    "version": term.name,
                    "description": tag.description,
                    "url": config.term_url(TAXONOMY_SINCE, term.slug),
                }
    return data
