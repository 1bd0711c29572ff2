"""Pluggable navigation bar behaviors."""

from __future__ import annotations

from .base import (
    DID_CHANGE_ACTIVE_DOCUMENT,
    DID_CHANGE_CURSOR_POSITION,
    DID_CHANGE_SELECTED_IDENTIFIER,
    DID_GENERATE_IDENTIFIERS,
    ActiveDocumentChangedEvent,
    Behavior,
    BehaviorManager,
    CursorPositionChangedEvent,
    SelectedIdentifierChangedEvent,
)
from .display import (
    DID_UPDATE_DROPDOWN_BOXES,
    WILL_UPDATE_DROPDOWN_BOXES,
    DisplayIdentifiersOnDropdownBoxes,
    DropdownBoxesView,
    render_identifier,
)
from .jump import JumpToIdentifierWhenSelected
from .select_at_cursor import SelectIdentifierAtCursorPosition
from .sort import SortIdentifiersOnDropdownBoxes


def register_default_behaviors(
    manager: BehaviorManager,
    view: DropdownBoxesView | None = None,
    *,
    left_mode: str | None = None,
    right_mode: str | None = None,
    display_debug_information: bool | None = None,
) -> list[Behavior]:
    """Register the standard behavior set on ``manager`` and return it."""
    display = DisplayIdentifiersOnDropdownBoxes(manager, view, display_debug_information)
    behaviors: list[Behavior] = [
        display,
        SortIdentifiersOnDropdownBoxes(manager, display, left_mode, right_mode),
        SelectIdentifierAtCursorPosition(manager),
        JumpToIdentifierWhenSelected(manager),
    ]
    for behavior in behaviors:
        manager.register_behavior(behavior)
    return behaviors


__all__ = [
    "DID_CHANGE_ACTIVE_DOCUMENT",
    "DID_CHANGE_CURSOR_POSITION",
    "DID_CHANGE_SELECTED_IDENTIFIER",
    "DID_GENERATE_IDENTIFIERS",
    "DID_UPDATE_DROPDOWN_BOXES",
    "WILL_UPDATE_DROPDOWN_BOXES",
    "ActiveDocumentChangedEvent",
    "Behavior",
    "BehaviorManager",
    "CursorPositionChangedEvent",
    "DisplayIdentifiersOnDropdownBoxes",
    "DropdownBoxesView",
    "JumpToIdentifierWhenSelected",
    "SelectIdentifierAtCursorPosition",
    "SelectedIdentifierChangedEvent",
    "SortIdentifiersOnDropdownBoxes",
    "register_default_behaviors",
    "render_identifier",
]
