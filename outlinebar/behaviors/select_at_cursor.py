"""Follow the cursor: select the identifier enclosing it."""

from __future__ import annotations

from ..bus import Subscription
from ..identifiers.identifier import Identifier
from .base import Behavior, CursorPositionChangedEvent


class SelectIdentifierAtCursorPosition(Behavior):
    """Select the innermost identifier around the cursor.

    Runs on cursor moves, on document switches before the boxes are drawn,
    and after each tree rebuild.
    """

    behavior_id = "select-at-cursor"
    title = "Select identifier at cursor position"

    def register_listeners(self) -> list[Subscription]:
        return [
            self.manager.on_did_change_cursor_position(self._on_cursor_moved, self),
            self.manager.on_did_change_active_document(
                self._on_document_changed,
                self,
                {"before": "display-identifiers"},
            ),
            self.manager.on_did_generate_identifiers(
                self._on_document_changed,
                self,
                {"before": "display-identifiers"},
            ),
        ]

    async def on_activated(self) -> None:
        await self.select_identifier_at_position()

    async def _on_cursor_moved(self, event: CursorPositionChangedEvent) -> None:
        await self.select_identifier_at_position(event.position)

    async def _on_document_changed(self, _event: object) -> None:
        await self.select_identifier_at_position()

    async def select_identifier_at_position(self, position: object = None) -> Identifier | None:
        """Resolve and select the identifier at ``position`` (default: the cursor)."""
        if self.is_disposed or not self.is_active:
            return None
        bar = self.manager.navigation_bar
        provider = bar.active_provider()
        if provider is None:
            return None
        if position is None:
            position = bar.cursor_position
        identifier = provider.get_identifier_for_position(position)
        await bar.set_selected_identifier(identifier)
        return identifier
