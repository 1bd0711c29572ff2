"""Generic, language-agnostic outline shapes handed over by outline sources.

Sources may return these dataclasses or plain mappings with the same fields
(camelCase or snake_case keys); the translator reads both.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..identifiers.positions import Position


@dataclass(frozen=True)
class TextToken:
    """One inline token of a tokenized outline label."""

    kind: str
    value: str


@dataclass
class OutlineNode:
    """One entry of an outline tree.

    ``kind`` may be ``None`` (treated as ``unknown``). A node names itself via
    ``plain_text`` or ``representative_name``, or carries ``tokenized_text``
    instead of structured children.
    """

    kind: str | None = None
    plain_text: str | None = None
    start_position: Position | None = None
    end_position: Position | None = None
    children: list[OutlineNode] = field(default_factory=list)
    representative_name: str | None = None
    tokenized_text: list[TextToken] | None = None


@dataclass
class OutlineTree:
    """Top-level outline: a list of root entries."""

    children: list[OutlineNode] = field(default_factory=list)
