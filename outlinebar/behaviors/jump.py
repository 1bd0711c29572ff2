"""Move the cursor to an identifier the user picked."""

from __future__ import annotations

from ..bus import Subscription
from ..identifiers.identifier import EmptyIdentifier
from ..identifiers.positions import Position
from .base import Behavior, SelectedIdentifierChangedEvent


class JumpToIdentifierWhenSelected(Behavior):
    """Jump to the start of a user-selected identifier.

    The end-of-container sentinel jumps to the container's end instead.
    Selections made by code (e.g. following the cursor) are ignored.
    """

    behavior_id = "jump-to-identifier"
    title = "Jump to identifier when it is selected on dropdown box"

    def register_listeners(self) -> list[Subscription]:
        return [
            self.manager.on_did_change_selected_identifier(
                self._on_selected,
                self,
                {"after": ["display-identifiers"]},
            )
        ]

    async def _on_selected(self, event: SelectedIdentifierChangedEvent) -> Position | None:
        if self.is_disposed or not self.is_active:
            return None
        if not event.selected_by_user or event.selected_identifier is None:
            return None
        identifier = event.selected_identifier
        position = identifier.end_position if isinstance(identifier, EmptyIdentifier) else identifier.start_position
        if position is None:
            return None
        await self.manager.navigation_bar.set_cursor_position(position)
        return position
