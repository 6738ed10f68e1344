"""Signature builders.

The default builder covers functions, methods and classes: the record's
argument list with types merged in from matching ``@param`` tags. Hooks
have no argument list of their own; their signature comes from the
``@param`` tags plus the hook type and whether the hook name is dynamic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..docblock.tags import filter_tags, param_types
from ..models import META_HOOK_TYPE

if TYPE_CHECKING:
    from .entity import Reference


def default_signature(reference: Reference) -> dict[str, Any]:
    types = param_types(reference.tags)
    args = []
    for arg in reference.args:
        data = arg.to_dict()
        if types.get(arg.name):
            data["type"] = types[arg.name]
        args.append(data)

    return {
        "name": reference.title,
        "args": args,
        "return": reference.returns.get("type", ""),
    }


def hook_signature(reference: Reference) -> dict[str, Any]:
    args = [
        {"type": tag.type_string, "name": tag.variable}
        for tag in filter_tags(reference.tags, "param")
    ]
    name = reference.title
    return {
        "name": name,
        "args": args,
        "hook_type": hook_type_for(reference.meta(META_HOOK_TYPE, "")),
        "dynamic": "$" in name,
    }


def hook_type_for(stored: Any) -> str:
    """Map the stored hook type onto the function that fires the hook.

    ``action`` -> do_action, ``action_reference`` -> do_action_ref_array,
    ``filter`` -> apply_filters, ``filter_reference`` -> apply_filters_ref_array.
    Anything that is not an action is treated as a filter.
    """
    stored = stored if isinstance(stored, str) else ""
    if "action" in stored:
        return "do_action_ref_array" if stored == "action_reference" else "do_action"
    return "apply_filters_ref_array" if stored == "filter_reference" else "apply_filters"
