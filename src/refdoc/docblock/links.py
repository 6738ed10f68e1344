"""Make phpDoc ``@see`` and ``@link`` references clickable.

Handles these six forms:

    {@link http://en.wikipedia.org/wiki/ISO_8601}
    {@link http://codex.wordpress.org/The_Loop Use new WordPress Loop}
    {@see WP_Rewrite::$index}        left as plain text, nothing to link to
    {@see WP_Query::query()}         class archive + WP_Query/query
    {@see 'pre_get_search_form'}     hook archive + pre_get_search_form
    {@see esc_attr()}                function archive + esc_attr

@see and @link mean different things in phpDoc but are used
interchangeably in practice, so both are handled identically.
"""

from __future__ import annotations

import html
import re
from typing import Optional

from ..config import DEFAULT_CONFIG, RefdocConfig

_DOCLINK = re.compile(r"\{@(?:link|see) ([^}]+)\}")
_ANCHOR = re.compile(r"""^<a .*href=['"]([^'"]+)['"]>(.*)</a>(.*)$""")

_OPEN_QUOTE = r"(?:&#8216;|‘|'|&#x27;|&#039;)"
_CLOSE_QUOTE = r"(?:&#8217;|’|'|&#x27;|&#039;)"
_HOOK = re.compile(rf"^{_OPEN_QUOTE}(\w+){_CLOSE_QUOTE}$")


def make_doclink_clickable(content: str, config: Optional[RefdocConfig] = None) -> str:
    """Rewrite ``{@link ...}`` and ``{@see ...}`` references into anchors.

    Content without either marker is returned unchanged.
    """
    if "{@link " not in content and "{@see " not in content:
        return content

    config = config or DEFAULT_CONFIG
    return _DOCLINK.sub(lambda m: _resolve(m.group(1), config), content)


def _resolve(link: str, config: RefdocConfig) -> str:
    # Undo links made clickable during initial parsing
    if link.startswith("<a "):
        match = _ANCHOR.match(link)
        if match:
            link = match.group(1)
            trailing = match.group(3).strip()
            if trailing:
                link = f"{link} {trailing}"

    if link.startswith("http"):
        parts = link.split(" ", 1)
        if len(parts) == 1:
            return _anchor(link, link)
        return _anchor(parts[0], parts[1])

    if "::$" in link:
        return link

    if "::" in link:
        target = link.replace("::", "/").replace("()", "")
        return _anchor(config.archive_url("class") + target, link)

    hook = _HOOK.match(link)
    if hook:
        return _anchor(config.archive_url("hook") + hook.group(1), link)

    return _anchor(config.archive_url("function") + link.replace("()", ""), link)


def _anchor(href: str, label: str) -> str:
    # Content may already be escaped; unescape first so both are escaped once.
    return f'<a href="{html.escape(html.unescape(href), quote=True)}">{html.escape(html.unescape(label))}</a>'
