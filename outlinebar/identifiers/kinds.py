"""Identifier kind vocabulary and classification.

Outline providers hand over free-form kind strings. The navigation logic only
cares which *class* of kind it is looking at, so every string is classified
into a closed ``KindClass`` while the string itself stays open-ended.
"""

from __future__ import annotations

from enum import Enum


class KindClass(Enum):
    """Structural role of a kind string."""

    GROUPING = "grouping"
    CONTAINER = "container"
    CALLABLE = "callable"
    LEAF = "leaf"
    TOKEN = "token"
    OTHER = "other"


GROUPING_KINDS = frozenset({"file", "module", "namespace", "package"})
CONTAINER_KINDS = frozenset({"class", "enum", "interface"})
CALLABLE_KINDS = frozenset({"function", "method", "constructor"})
LEAF_KINDS = frozenset(
    {
        "property",
        "field",
        "variable",
        "constant",
        "string",
        "number",
        "boolean",
        "array",
    }
)

TOKEN_KIND_PREFIX = "tt-"
TOKEN_KINDS = frozenset(
    {
        "keyword",
        "class-name",
        "constructor",
        "method",
        "param",
        "string",
        "whitespace",
        "plain",
        "type",
    }
)

UNKNOWN_KIND = "unknown"
PARAM_KIND = "param"
EMPTY_KIND = "dummy"


def token_kind(kind: str | None) -> str:
    """Return the ``tt-`` prefixed tag for an inline text-token kind."""
    return f"{TOKEN_KIND_PREFIX}{kind or 'plain'}"


def classify_kind(kind: str | None) -> KindClass:
    """Map a provider kind string to its structural role.

    Missing kinds count as ``unknown`` which, like any unrecognized string,
    classifies as ``OTHER``.
    """
    if not kind:
        return KindClass.OTHER
    if kind in GROUPING_KINDS:
        return KindClass.GROUPING
    if kind in CONTAINER_KINDS:
        return KindClass.CONTAINER
    if kind in CALLABLE_KINDS:
        return KindClass.CALLABLE
    if kind in LEAF_KINDS:
        return KindClass.LEAF
    if kind.startswith(TOKEN_KIND_PREFIX):
        return KindClass.TOKEN
    return KindClass.OTHER


def has_kind_class(kinds: list[str], kind_class: KindClass) -> bool:
    """Return whether any tag in ``kinds`` classifies as ``kind_class``."""
    return any(classify_kind(kind) is kind_class for kind in kinds)
