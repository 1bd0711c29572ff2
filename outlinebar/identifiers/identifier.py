"""Identifier tree nodes.

An ``Identifier`` is one navigable structural entity of a document (class,
method, field, token, ...). Parents own their children list; ``parent`` is a
plain back-reference used for upward traversal and id derivation only.

Two synthetic variants exist:

- ``TopScopeIdentifier``: the root of one document's tree, scope level ``-1``.
- ``EmptyIdentifier``: the "end of container" insertion point shown first in
  a children list. It points at its container but is never stored as a child.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .kinds import EMPTY_KIND
from .positions import Position


class Identifier:
    """One node of the identifier tree.

    ``document`` is required: it scopes the id and the tree lifetime. All other
    fields are optional. ``kind`` is an ordered tag set; adding an existing tag
    is a no-op.
    """

    def __init__(
        self,
        *,
        document: object,
        name: str = "",
        kind: Iterable[str] | None = None,
        start_position: object = None,
        end_position: object = None,
        parent: Identifier | None = None,
        additional_data: dict[str, object] | None = None,
    ) -> None:
        if document is None:
            raise ValueError("Identifier requires the document it was found in.")
        self._document = document
        self._name = name or ""
        self._kind: list[str] = []
        for key in kind or ():
            self.add_kind(key)
        self._start_position = Position.coerce(start_position)
        self._end_position = Position.coerce(end_position)
        self._parent = parent
        self._children: list[Identifier] = []
        self._additional_data: dict[str, object] = dict(additional_data or {})
        self._id: str | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name!r}, kind={self._kind!r})"

    @property
    def document(self) -> object:
        return self._document

    @property
    def id(self) -> str:
        """Stable key for equality and lookup, computed once on first access."""
        if self._id is None:
            self._id = self._derive_id()
        return self._id

    def _derive_id(self) -> str:
        doc_id = getattr(self._document, "doc_id", id(self._document))
        start = self._start_position
        if start is None:
            # Without a position the name alone is ambiguous across scopes.
            prefix = self._parent.id + "/" if self._parent is not None else f"doc{doc_id}|"
            base = f"{prefix}{self.display_name}|{{x:x}}"
        else:
            base = f"doc{doc_id}|{self.display_name}|{{{start.row}:{start.column}}}"
        ordinal = self._sibling_ordinal()
        return base if ordinal == 0 else f"{base}#{ordinal}"

    def _sibling_ordinal(self) -> int:
        """Count earlier siblings sharing display name and start position."""
        if self._parent is None:
            return 0
        ordinal = 0
        for sibling in self._parent._children:
            if sibling is self:
                return ordinal
            if sibling.display_name == self.display_name and sibling._start_position == self._start_position:
                ordinal += 1
        return 0

    @staticmethod
    def are_equal(first: Identifier, second: Identifier) -> bool:
        """Return whether both identifiers carry the same id."""
        return first.id == second.id

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> Identifier:
        self._name = name or ""
        return self

    @property
    def display_name(self) -> str:
        """Text shown for the identifier in a selector list."""
        return self._name

    @property
    def kind(self) -> list[str]:
        return list(self._kind)

    def add_kind(self, key: str) -> Identifier:
        if key and key not in self._kind:
            self._kind.append(key)
        return self

    def remove_kind(self, key: str) -> Identifier:
        if key in self._kind:
            self._kind.remove(key)
        return self

    def is_kind(self, key: str) -> bool:
        return key in self._kind

    @property
    def start_position(self) -> Position | None:
        return self._start_position

    @property
    def end_position(self) -> Position | None:
        return self._end_position

    def set_positions(self, start: object, end: object = None) -> Identifier:
        """Set the source range; a missing end collapses onto the start."""
        self._start_position = Position.coerce(start)
        coerced_end = Position.coerce(end)
        self._end_position = coerced_end if coerced_end is not None else self._start_position
        return self

    @property
    def parent(self) -> Identifier | None:
        return self._parent

    @property
    def scope_level(self) -> int:
        """Nesting depth; the root sits at ``-1`` so its children are at ``0``."""
        if self._parent is None:
            return -1
        return self._parent.scope_level + 1

    @property
    def additional_data(self) -> dict[str, object]:
        """Open map for provider metadata not covered by other fields."""
        return self._additional_data

    @property
    def children(self) -> tuple[Identifier, ...]:
        return tuple(self._children)

    def has_children(self) -> bool:
        return bool(self._children)

    def num_children(self) -> int:
        return len(self._children)

    def child_at(self, index: int) -> Identifier | None:
        """Return the child at insertion ``index`` or ``None`` when out of range."""
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def add_child(self, child: Identifier) -> Identifier:
        """Append ``child`` in source order.

        Raises ``ValueError`` for ``None``, for ``EmptyIdentifier`` sentinels,
        and for children already owned by a different parent.
        """
        if child is None:
            raise ValueError('"child" must be an Identifier instance.')
        if isinstance(child, EmptyIdentifier):
            raise ValueError("EmptyIdentifier is never stored as a child.")
        if child._parent is None:
            child._parent = self
        elif child._parent is not self:
            raise ValueError("child already belongs to another identifier.")
        if not any(existing is child for existing in self._children):
            self._children.append(child)
        return self

    def remove_child(self, child: Identifier) -> Identifier:
        for index, existing in enumerate(self._children):
            if existing is child:
                del self._children[index]
                break
        return self

    def remove_all_children(self) -> Identifier:
        self._children.clear()
        return self


class TopScopeIdentifier(Identifier):
    """Root identifier representing a whole document.

    Its range spans the document; ``reset`` drops every child and re-reads the
    range so one instance can host each regenerated tree.
    """

    def __init__(self, document: object) -> None:
        super().__init__(document=document)
        self._refresh_range()

    def _refresh_range(self) -> None:
        first = getattr(self._document, "first_position", None)
        end = getattr(self._document, "end_position", None)
        self._start_position = Position.coerce(first()) if callable(first) else Position(0, 0)
        self._end_position = Position.coerce(end()) if callable(end) else None

    def _derive_id(self) -> str:
        doc_id = getattr(self._document, "doc_id", id(self._document))
        return f"doc{doc_id}|^"

    def reset(self) -> TopScopeIdentifier:
        self.remove_all_children()
        self._refresh_range()
        return self


class EmptyIdentifier(Identifier):
    """Insertion point at the end of ``container``.

    Always freshly built per query; start and end both sit at the container's
    end position.
    """

    def __init__(self, container: Identifier) -> None:
        if not isinstance(container, Identifier):
            raise ValueError("EmptyIdentifier requires an Identifier container.")
        end = container.end_position
        super().__init__(
            document=container.document,
            name="",
            kind=[EMPTY_KIND],
            start_position=end,
            end_position=end,
            parent=container,
        )

    def _derive_id(self) -> str:
        return f"{self._parent.id}|$"


def iter_identifiers(root: Identifier) -> Iterator[Identifier]:
    """Yield ``root`` and its descendants in preorder (source order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node._children))


def belongs_to_tree(identifier: Identifier, root: Identifier) -> bool:
    """Return whether ``identifier`` is reachable from ``root`` right now.

    Walks the parent chain and checks each hop is still owned by its parent,
    so references kept across a rebuild are reported as stale.
    """
    node = identifier
    if isinstance(node, EmptyIdentifier):
        node = node.parent
    while node is not None:
        if node is root:
            return True
        parent = node.parent
        if parent is None or not any(child is node for child in parent._children):
            return False
        node = parent
    return False


def shift_positions(root: Identifier, from_row: int, delta_rows: int) -> int:
    """Move every position at or after ``from_row`` by ``delta_rows``.

    Best-effort adjustment for live edits between rebuilds; ids are memoized
    and therefore keep their original start position. Returns the number of
    identifiers touched.
    """
    if delta_rows == 0:
        return 0
    touched = 0
    for node in iter_identifiers(root):
        if isinstance(node, TopScopeIdentifier):
            continue
        moved = False
        start = node._start_position
        end = node._end_position
        if start is not None and start.row >= from_row:
            node._start_position = start.shifted(delta_rows)
            moved = True
        if end is not None and end.row >= from_row:
            node._end_position = end.shifted(delta_rows)
            moved = True
        if moved:
            touched += 1
    return touched


def debug_label(identifier: Identifier) -> str:
    """Describe ``identifier`` with kinds, extra data, and source range."""
    kinds = " ".join(f"[{kind}]" for kind in identifier.kind)
    extras = " ".join(f"{{{key}={value}}}" for key, value in identifier.additional_data.items())
    start = identifier.start_position
    end = identifier.end_position
    span = f"<{start if start is not None else 'x:x'}-{end if end is not None else 'x:x'}>"
    parts = [part for part in (kinds, identifier.display_name, extras, span) if part]
    return " ".join(parts)
