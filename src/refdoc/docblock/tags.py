"""Doc-comment tag parsing.

Works on the flat tag list the parser stores per record (``@param``,
``@return``, ``@since``, ``@deprecated`` ...) and turns it into the
structures the reference entities expose:

    param_types()        {"$name": "string|array"} for signature building
    parse_return()       {"type": ..., "description": ...} or {}
    parse_deprecated()   deprecation text or ""
    parse_params()       ordered {"$name": {type, content, required, default?}}
    parse_hash_params()  rows of a hash-notation (``@type``) description

Optionality is inferred from the content prefix. Once a param says
``Optional.`` every later param is treated as optional too unless it says
``Required.`` itself; this matches how long argument lists are documented.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Union

from ..config import RefdocConfig
from ..models import Arg, Tag
from .content import escape_html, fix_parser_markup
from .links import make_doclink_clickable

REQUIRED = "Required"
OPTIONAL = "Optional"

HashRows = list[dict[str, str]]
ParamContent = Union[str, HashRows]


def tags_of(raw: Any) -> list[Tag]:
    """Normalize a raw ``tags`` meta value, dropping ill-shaped entries."""
    if not isinstance(raw, (list, tuple)):
        return []
    tags = []
    for item in raw:
        tag = Tag.from_raw(item)
        if tag is not None:
            tags.append(tag)
    return tags


def args_of(raw: Any) -> list[Arg]:
    """Normalize a raw ``args`` meta value, dropping ill-shaped entries."""
    if not isinstance(raw, (list, tuple)):
        return []
    args = []
    for item in raw:
        arg = Arg.from_raw(item)
        if arg is not None:
            args.append(arg)
    return args


def filter_tags(tags: Iterable[Tag], name: str) -> list[Tag]:
    return [t for t in tags if t.name == name]


def param_types(tags: Iterable[Tag]) -> dict[str, str]:
    """Map each ``@param`` variable to its pipe-joined type list."""
    return {t.variable: t.type_string for t in filter_tags(tags, "param") if t.variable}


def parse_return(tags: Iterable[Tag]) -> dict[str, str]:
    """Type and description of the first ``@return`` tag.

    Returns an empty dict when there is no return tag or it is ``void``.
    """
    returns = filter_tags(tags, "return")
    if not returns:
        return {}
    tag = returns[0]
    if tag.types == ("void",) and not tag.content:
        return {}
    return {
        "type": escape_html(tag.type_string),
        "description": escape_html(tag.content),
    }


def parse_deprecated(tags: Iterable[Tag]) -> str:
    """Text of the first non-empty ``@deprecated`` tag.

    A class may carry a bare ``@deprecated`` followed by a second one with
    the actual notice, so an empty first tag falls through to the second.
    """
    deprecated = filter_tags(tags, "deprecated")
    if not deprecated:
        return ""
    tag = deprecated[0]
    if not tag.content and len(deprecated) > 1:
        tag = deprecated[1]
    return tag.content


def parse_params(
    tags: Iterable[Tag],
    args: Iterable[Arg] = (),
    config: Optional[RefdocConfig] = None,
) -> dict[str, dict[str, Any]]:
    """Build the ordered parameter mapping keyed by variable name.

    The first tag for a variable wins. Content is escaped, doc links are
    resolved, and hash-notation content is decomposed into rows. Known
    default values from the argument list are merged in and the redundant
    "Default X." phrasing is removed from the description.
    """
    params: dict[str, dict[str, Any]] = {}
    encountered_optional = False

    for tag in filter_tags(tags, "param"):
        if not tag.variable:
            continue

        content, required = _split_optionality(fix_parser_markup(tag.content))
        if required == OPTIONAL:
            encountered_optional = True
        if tag.variable in params:
            continue
        if required is None:
            required = OPTIONAL if encountered_optional else REQUIRED

        content = make_doclink_clickable(escape_html(content), config)
        params[tag.variable] = {
            "variable": tag.variable,
            "type": tag.type_string,
            "content": parse_hash_params(content),
            "required": required,
        }

    for arg in args:
        param = params.get(arg.name)
        if param is None or arg.default is None:
            continue
        param["default"] = arg.default
        if not arg.default:
            continue
        # A literal default means the argument can be omitted.
        param["required"] = OPTIONAL
        if isinstance(param["content"], str):
            param["content"] = strip_default_phrases(param["content"], arg.default)

    return params


def _split_optionality(content: str) -> tuple[str, Optional[str]]:
    """Peel an ``Optional.``/``Required.`` prefix off param content.

    Hash-notation content (``{ Optional. ... }``) keeps its opening brace.
    Returns the remaining content and the stated requirement, or None when
    the content states neither.
    """
    if content.startswith("{"):
        body = content[1:].strip()
        rest, required = _split_optionality(body)
        return "{ " + rest, required

    lowered = content.lower()
    for word, required in (("optional", OPTIONAL), ("required", REQUIRED)):
        if lowered.startswith(word):
            rest = content[len(word):]
            if rest[:1].isalnum():
                continue
            if rest[:1] in (".", ",", ":"):
                rest = rest[1:]
            return rest.strip(), required
    return content, None


def parse_hash_params(text: ParamContent) -> ParamContent:
    """Decompose hash-notation param content into ``@type`` rows.

    Each ``@type <type> <name> <description>`` line becomes
    ``{"type", "name", "description"}``. Lines that do not parse as such are
    appended to the previous row's description, except a lone closing brace.
    Text before the first row is dropped. Content that is not hash notation,
    or has no rows at all, is returned untouched.
    """
    if not isinstance(text, str) or not text or text[0] != "{":
        return text

    body = text[1:].rstrip()
    if body.endswith("}"):
        body = body[:-1]
    body = body.strip().replace("@type", "\n@type")

    rows: HashRows = []
    for line in body.split("\n"):
        line = " ".join(line.split())
        if not line:
            continue
        pieces = line.split(" ", 3)
        if len(pieces) == 4 and pieces[0] == "@type":
            rows.append({"type": pieces[1], "name": pieces[2], "description": pieces[3]})
        elif rows and line != "}":
            rows[-1]["description"] = f"{rows[-1]['description']} {line}"

    return rows if rows else text


def strip_default_phrases(content: str, default: str) -> str:
    """Remove a textual default that duplicates a known literal default."""
    escaped = escape_html(default)
    phrases = [f"default is {escaped}.", f"Default {escaped}."]
    if default == "''":
        phrases += ["Default empty.", "Default empty string.", "default is empty string."]
    elif default == "array()":
        phrases += ["Default empty array.", "Default empty."]

    for phrase in phrases:
        content = content.replace(phrase, "")
    return re.sub(r"[ \t]{2,}", " ", content).strip()
