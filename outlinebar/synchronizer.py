"""Derivation of the two selector lists and their selected indices.

The left ("parent") list holds the document root followed by the top-level
entries that can own members. The right ("children") list holds an
end-of-container sentinel followed by the members of the current anchor.
Both indices are resolved by id, never by position, so any reorder of either
list must be followed by ``relocate_selection``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .identifiers.identifier import EmptyIdentifier, Identifier, TopScopeIdentifier, belongs_to_tree
from .identifiers.kinds import PARAM_KIND, KindClass, classify_kind, has_kind_class
from .locator import PositionLocator

logger = logging.getLogger(__name__)

IdentifierPredicate = Callable[[Identifier], bool]


@dataclass
class DropdownBoxesUpdate:
    """Mutable selector state handed through ``will-update-dropdown-boxes``."""

    parent_identifiers: list[Identifier] = field(default_factory=list)
    children_identifiers: list[Identifier] = field(default_factory=list)
    parent_selected_index: int = 0
    children_selected_index: int = 0

    def selected_parent(self) -> Identifier | None:
        if 0 <= self.parent_selected_index < len(self.parent_identifiers):
            return self.parent_identifiers[self.parent_selected_index]
        return None

    def selected_child(self) -> Identifier | None:
        if 0 <= self.children_selected_index < len(self.children_identifiers):
            return self.children_identifiers[self.children_selected_index]
        return None


def default_can_be_parent(identifier: Identifier) -> bool:
    """Containers, plus inline text tokens which only ever sit at the top."""
    return has_kind_class(identifier.kind, KindClass.CONTAINER) or has_kind_class(identifier.kind, KindClass.TOKEN)


def default_can_be_child(identifier: Identifier) -> bool:
    """Every real member except tokens and top-level containers.

    Top-level containers already have their own entry in the parent list.
    """
    kinds = identifier.kind
    if not kinds:
        return False
    if all(classify_kind(kind) is KindClass.TOKEN for kind in kinds):
        return False
    if has_kind_class(kinds, KindClass.CONTAINER) and isinstance(identifier.parent, TopScopeIdentifier):
        return False
    return True


def find_index_by_id(items: list[Identifier], target: Identifier | None) -> int:
    """Return the index of the entry sharing ``target``'s id, or ``-1``."""
    if target is None:
        return -1
    target_id = target.id
    for index, item in enumerate(items):
        if item.id == target_id:
            return index
    return -1


def _is_pinned(identifier: Identifier) -> bool:
    return isinstance(identifier, (TopScopeIdentifier, EmptyIdentifier))


def sort_by_name(items: list[Identifier]) -> list[Identifier]:
    """Return ``items`` ordered by name.

    Sentinels stay in front and ``param`` entries keep their slots; the rest
    fill the remaining slots in name order, stable for equal names.
    """
    pinned = [item for item in items if _is_pinned(item)]
    rest = [item for item in items if not _is_pinned(item)]
    movable = sorted((item for item in rest if not item.is_kind(PARAM_KIND)), key=lambda item: item.name)
    moved = iter(movable)
    ordered = [item if item.is_kind(PARAM_KIND) else next(moved) for item in rest]
    return pinned + ordered


class SelectionSynchronizer:
    """Compute selector lists and indices for one identifier tree.

    Stateless between calls apart from the tree itself; ``can_be_parent`` and
    ``can_be_child`` decide which identifiers populate each list.
    """

    def __init__(
        self,
        root: TopScopeIdentifier,
        can_be_parent: IdentifierPredicate = default_can_be_parent,
        can_be_child: IdentifierPredicate = default_can_be_child,
        locator: PositionLocator | None = None,
    ) -> None:
        if root is None:
            raise ValueError("SelectionSynchronizer requires the tree root.")
        self.root = root
        self.can_be_parent = can_be_parent
        self.can_be_child = can_be_child
        self.locator = locator or PositionLocator()

    def parent_identifiers(self, scope: Identifier | None = None) -> list[Identifier]:
        """Root first, then the members of ``scope`` (the root by default) that can be parents."""
        scope = self.root if scope is None else scope
        return [self.root, *(child for child in scope.children if self.can_be_parent(child))]

    def resolve_anchor(self, selection: Identifier | None) -> Identifier:
        """Return the identifier whose members fill the children list."""
        if selection is None:
            return self.root
        if isinstance(selection, EmptyIdentifier):
            return selection.parent
        if isinstance(selection, TopScopeIdentifier):
            return selection
        kinds = selection.kind
        if has_kind_class(kinds, KindClass.CALLABLE):
            return selection.parent or self.root
        if has_kind_class(kinds, KindClass.CONTAINER) or selection.has_children():
            return selection
        return selection.parent or self.root

    def children_identifiers(self, selection: Identifier | None = None) -> list[Identifier]:
        """A fresh end sentinel for the anchor, then its members that can be children."""
        anchor = self.resolve_anchor(selection)
        return [EmptyIdentifier(anchor), *(child for child in anchor.children if self.can_be_child(child))]

    def resolve_selection(self, selection: Identifier | None, position: object = None) -> Identifier:
        """Return a selection that belongs to the current tree.

        Missing selections default to the root. A reference kept from an
        earlier tree is replaced by the identifier at ``position`` (or the
        root when no position is known).
        """
        if selection is None:
            return self.root
        if belongs_to_tree(selection, self.root):
            return selection
        logger.info("event=selection_stale identifier=%r", selection)
        if position is None:
            return self.root
        return self.locator.locate(self.root, position)

    def resolve_indices(
        self,
        selection: Identifier,
        parents: list[Identifier],
        children: list[Identifier],
    ) -> tuple[int, int]:
        """Return ``(parent_index, children_index)`` for ``selection``.

        Lookup is by id. Inconsistencies fall back to index ``0`` and are
        logged rather than raised.
        """
        parent_index = find_index_by_id(parents, selection)
        if parent_index != -1:
            return parent_index, 0

        parent = selection.parent
        if parent is None:
            logger.warning("event=selection_without_parent identifier=%r", selection)
            parent_index = 0
        else:
            parent_index = find_index_by_id(parents, parent)
            if parent_index == -1:
                logger.warning(
                    "event=selection_parent_not_listed identifier=%r parent=%r",
                    selection,
                    parent,
                )
                parent_index = 0

        children_index = find_index_by_id(children, selection)
        if children_index != -1:
            return parent_index, children_index
        if isinstance(selection, EmptyIdentifier):
            return parent_index, 0
        if children and children[0].parent is selection:
            # Nested container selected: its own members are listed.
            return parent_index, 0
        logger.warning("event=selection_not_in_children identifier=%r", selection)
        return parent_index, 0

    def build(self, selection: Identifier | None = None, position: object = None) -> DropdownBoxesUpdate:
        """Build both lists and resolve the selected indices for ``selection``."""
        selection = self.resolve_selection(selection, position)
        parents = self.parent_identifiers()
        children = self.children_identifiers(selection)
        parent_index, children_index = self.resolve_indices(selection, parents, children)
        return DropdownBoxesUpdate(
            parent_identifiers=parents,
            children_identifiers=children,
            parent_selected_index=parent_index,
            children_selected_index=children_index,
        )


def relocate_selection(
    update: DropdownBoxesUpdate,
    selected_parent: Identifier | None,
    selected_child: Identifier | None,
) -> DropdownBoxesUpdate:
    """Point both indices back at the previously selected entries, by id."""
    if selected_parent is not None:
        index = find_index_by_id(update.parent_identifiers, selected_parent)
        if index == -1:
            logger.warning("event=relocate_missing list=parent identifier=%r", selected_parent)
            index = 0
        update.parent_selected_index = index
    if selected_child is not None:
        index = find_index_by_id(update.children_identifiers, selected_child)
        if index == -1:
            logger.warning("event=relocate_missing list=children identifier=%r", selected_child)
            index = 0
        update.children_selected_index = index
    return update


def sort_preserving_selection(
    update: DropdownBoxesUpdate,
    sort_parents: bool,
    sort_children: bool,
) -> DropdownBoxesUpdate:
    """Sort the requested lists by name and keep the same entries selected."""
    selected_parent = update.selected_parent()
    selected_child = update.selected_child()
    if sort_parents:
        update.parent_identifiers[:] = sort_by_name(update.parent_identifiers)
    if sort_children:
        update.children_identifiers[:] = sort_by_name(update.children_identifiers)
    return relocate_selection(
        update,
        selected_parent if sort_parents else None,
        selected_child if sort_children else None,
    )
