"""Host-facing navigation bar model.

The host reports document switches, cursor moves, saves, grammar changes and
user picks; the bar keeps the current selection and relays each change to its
behaviors through the ``BehaviorManager``.
"""

from __future__ import annotations

import logging

from .behaviors.base import (
    DID_CHANGE_ACTIVE_DOCUMENT,
    DID_CHANGE_CURSOR_POSITION,
    DID_CHANGE_SELECTED_IDENTIFIER,
    DID_GENERATE_IDENTIFIERS,
    ActiveDocumentChangedEvent,
    BehaviorManager,
    CursorPositionChangedEvent,
    SelectedIdentifierChangedEvent,
)
from .bus import Subscription
from .identifiers.identifier import Identifier, shift_positions
from .identifiers.positions import Position
from .outline.sources import OutlineSourceRegistry
from .provider import GeneratedIdentifiersEvent, IdentifiersProvider, ProviderPool

logger = logging.getLogger(__name__)

NAVIGATION_BAR_TAG = "navigation-bar"


class NavigationBar:
    """State of the bar for the active document."""

    def __init__(self, pool: ProviderPool | None = None, registry: OutlineSourceRegistry | None = None) -> None:
        self.pool = pool if pool is not None else ProviderPool(registry)
        self.behavior_manager = BehaviorManager(self)
        self._active_document = None
        self._cursor_position = Position(0, 0)
        self._selected_identifier: Identifier | None = None
        self._generated_subscription: Subscription | None = None

    @property
    def active_document(self):
        return self._active_document

    @property
    def cursor_position(self) -> Position:
        return self._cursor_position

    @property
    def selected_identifier(self) -> Identifier | None:
        return self._selected_identifier

    def active_provider(self) -> IdentifiersProvider | None:
        return self.pool.cached(self._active_document)

    def resolved_selection(self, provider: IdentifiersProvider) -> Identifier:
        """Current selection, re-resolved from the cursor when it went stale."""
        selection = provider.synchronizer.resolve_selection(self._selected_identifier, self._cursor_position)
        self._selected_identifier = selection
        return selection

    async def set_active_document(self, document, cursor_position: object = None) -> IdentifiersProvider | None:
        """Switch to ``document`` (or to none), building its tree on first use."""
        if document is self._active_document:
            return self.active_provider()
        if self._generated_subscription is not None:
            self._generated_subscription.dispose()
            self._generated_subscription = None

        self._active_document = document
        self._selected_identifier = None
        self._cursor_position = Position.coerce(cursor_position) or Position(0, 0)

        provider = None
        if document is not None:
            provider = await self.pool.provider_for(document)
            self._generated_subscription = provider.on_did_generate_identifiers(
                self._forward_generated_identifiers,
                NAVIGATION_BAR_TAG,
            )
        logger.info("event=active_document_changed document=%s", getattr(document, "doc_id", None))
        await self.behavior_manager.emit(DID_CHANGE_ACTIVE_DOCUMENT, ActiveDocumentChangedEvent(document))
        return provider

    async def _forward_generated_identifiers(self, event: GeneratedIdentifiersEvent) -> None:
        if event.provider.document is not self._active_document:
            return
        await self.behavior_manager.emit(DID_GENERATE_IDENTIFIERS, event)

    async def set_cursor_position(self, position: object) -> Position:
        target = Position.coerce(position)
        if target is None:
            raise ValueError("position must be a (row, column) pair or Position.")
        self._cursor_position = target
        await self.behavior_manager.emit(
            DID_CHANGE_CURSOR_POSITION,
            CursorPositionChangedEvent(self._active_document, target),
        )
        return target

    async def set_selected_identifier(self, identifier: Identifier | None, selected_by_user: bool = False) -> None:
        self._selected_identifier = identifier
        await self.behavior_manager.emit(
            DID_CHANGE_SELECTED_IDENTIFIER,
            SelectedIdentifierChangedEvent(identifier, selected_by_user),
        )

    async def refresh(self) -> None:
        """Rebuild the active document's tree from its outline source."""
        provider = self.active_provider()
        if provider is None:
            return
        await provider.generate_identifiers()

    async def notify_saved(self) -> None:
        await self.refresh()

    async def notify_grammar_changed(self, language: str | None = None) -> None:
        document = self._active_document
        if document is None:
            return
        if language is not None:
            document.set_language(language)
        await self.refresh()

    def notify_lines_shifted(self, from_row: int, delta_rows: int) -> int:
        """Move the active tree's positions for lines inserted or removed since the last rebuild."""
        provider = self.active_provider()
        if provider is None:
            return 0
        return shift_positions(provider.get_top_scope_identifier(), from_row, delta_rows)

    async def notify_document_closed(self, document) -> None:
        if document is self._active_document:
            await self.set_active_document(None)
        self.pool.forget(document)

    def dispose(self) -> None:
        if self._generated_subscription is not None:
            self._generated_subscription.dispose()
            self._generated_subscription = None
        self.behavior_manager.dispose()
        self.pool.dispose()
