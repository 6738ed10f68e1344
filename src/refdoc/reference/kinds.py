"""Per-kind behaviour table.

Every reference shares one implementation (``Reference``); the handful of
things that differ between functions, hooks, classes and methods live in a
``KindSpec``:

    kind       callable  uses  used_by  methods  source  signature
    function   yes       yes   yes      -        yes     default
    method     yes       yes   yes      -        yes     default
    hook       -         -     yes      -        -       hook
    class      -         -     -        yes      yes     default

Connection types name the typed edges in the record store, e.g.
``functions_to_hooks`` runs from a function to a hook it fires.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ..models import EntityKind
from .signature import default_signature, hook_signature

if TYPE_CHECKING:
    from .entity import Reference

SignatureBuilder = Callable[["Reference"], dict[str, Any]]


@dataclass(frozen=True)
class KindSpec:
    """Behaviour that varies by kind.

    Attributes:
        kind:           The entity kind.
        callable:       Whether the item can be called.
        uses_types:     Connection types followed (``from`` this record) for uses.
        uses_kinds:     Kinds returned as uses.
        used_by_types:  Connection types followed (``to`` this record) for used-by.
        used_by_kinds:  Kinds returned as used-by.
        signature:      Signature builder.
        has_methods:    Whether the kind aggregates child methods.
        template:       Default template name for rendering.
    """

    kind: EntityKind
    callable: bool = False
    uses_types: tuple[str, ...] = ()
    uses_kinds: tuple[EntityKind, ...] = (EntityKind.FUNCTION, EntityKind.METHOD, EntityKind.HOOK)
    used_by_types: tuple[str, ...] = ()
    used_by_kinds: tuple[EntityKind, ...] = (EntityKind.FUNCTION, EntityKind.METHOD)
    signature: SignatureBuilder = default_signature
    has_methods: bool = False
    template: str = "reference-item"

    @property
    def has_uses(self) -> bool:
        return bool(self.uses_types)

    @property
    def has_used_by(self) -> bool:
        return bool(self.used_by_types)


FUNCTION = KindSpec(
    kind=EntityKind.FUNCTION,
    callable=True,
    uses_types=("functions_to_functions", "functions_to_methods", "functions_to_hooks"),
    used_by_types=("functions_to_functions", "methods_to_functions"),
)

METHOD = KindSpec(
    kind=EntityKind.METHOD,
    callable=True,
    uses_types=("methods_to_functions", "methods_to_methods", "methods_to_hooks"),
    used_by_types=("functions_to_methods", "methods_to_methods"),
)

# Hooks use nothing, but functions and methods fire them.
HOOK = KindSpec(
    kind=EntityKind.HOOK,
    used_by_types=("functions_to_hooks", "methods_to_hooks"),
    signature=hook_signature,
)

# Classes take part in neither relation; they aggregate methods instead.
CLASS = KindSpec(
    kind=EntityKind.CLASS,
    has_methods=True,
)

DEFAULT_KINDS: dict[str, KindSpec] = {
    "function": FUNCTION,
    "hook": HOOK,
    "class": CLASS,
    "method": METHOD,
}
