"""Identifier tree model: nodes, sentinels, kinds, and positions."""

from __future__ import annotations

from .identifier import (
    EmptyIdentifier,
    Identifier,
    TopScopeIdentifier,
    belongs_to_tree,
    debug_label,
    iter_identifiers,
    shift_positions,
)
from .kinds import (
    CALLABLE_KINDS,
    CONTAINER_KINDS,
    GROUPING_KINDS,
    LEAF_KINDS,
    KindClass,
    classify_kind,
    has_kind_class,
    token_kind,
)
from .positions import Position

__all__ = [
    "CALLABLE_KINDS",
    "CONTAINER_KINDS",
    "GROUPING_KINDS",
    "LEAF_KINDS",
    "EmptyIdentifier",
    "Identifier",
    "KindClass",
    "Position",
    "TopScopeIdentifier",
    "belongs_to_tree",
    "classify_kind",
    "debug_label",
    "has_kind_class",
    "iter_identifiers",
    "shift_positions",
    "token_kind",
]
