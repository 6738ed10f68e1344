"""Doc-comment processing: tag parsing, doc links, content pipelines."""

from .content import (
    ContentPipeline,
    description_pipeline,
    escape_html,
    excerpt_pipeline,
    remove_inline_internal,
)
from .links import make_doclink_clickable
from .tags import (
    OPTIONAL,
    REQUIRED,
    args_of,
    filter_tags,
    param_types,
    parse_deprecated,
    parse_hash_params,
    parse_params,
    parse_return,
    strip_default_phrases,
    tags_of,
)

__all__ = [
    "ContentPipeline",
    "excerpt_pipeline",
    "description_pipeline",
    "escape_html",
    "remove_inline_internal",
    "make_doclink_clickable",
    "REQUIRED",
    "OPTIONAL",
    "tags_of",
    "args_of",
    "filter_tags",
    "param_types",
    "parse_return",
    "parse_deprecated",
    "parse_params",
    "parse_hash_params",
    "strip_default_phrases",
]
