"""Populate the two dropdown boxes from the active provider."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Protocol

from ..bus import OrderedEventBus, Subscription
from ..identifiers.identifier import EmptyIdentifier, Identifier, TopScopeIdentifier, debug_label
from ..identifiers.kinds import KindClass, has_kind_class
from ..synchronizer import DropdownBoxesUpdate
from .base import Behavior, BehaviorManager, Constraints

logger = logging.getLogger(__name__)

WILL_UPDATE_DROPDOWN_BOXES = "will-update-dropdown-boxes"
DID_UPDATE_DROPDOWN_BOXES = "did-update-dropdown-boxes"

TOP_SCOPE_LABEL = "(top scope)"
EMPTY_LABEL = "(end of scope)"


class DropdownBoxesView(Protocol):
    """Sink receiving the final lists; a widget or a text renderer."""

    def update_dropdown_boxes(
        self,
        update: DropdownBoxesUpdate,
        render_item: Callable[[Identifier], str],
    ) -> None: ...


def render_identifier(identifier: Identifier, with_debug: bool = False) -> str:
    """Label shown for one list entry.

    Callables get ``()`` appended; debug mode adds kinds, extra data
    and the source range.
    """
    if isinstance(identifier, TopScopeIdentifier):
        name = TOP_SCOPE_LABEL
    elif isinstance(identifier, EmptyIdentifier):
        name = EMPTY_LABEL
    else:
        name = identifier.display_name
        if has_kind_class(identifier.kind, KindClass.CALLABLE):
            name += "()"
    if not with_debug:
        return name
    return f"{name}  {debug_label(identifier)}"


class DisplayIdentifiersOnDropdownBoxes(Behavior):
    """Rebuild both boxes when the document, tree, or selection changes.

    Before handing the lists to the view it publishes the mutable
    ``DropdownBoxesUpdate`` on ``will-update-dropdown-boxes`` so other
    behaviors can reorder entries; whatever the payload holds afterwards is
    what the view shows.
    """

    behavior_id = "display-identifiers"
    title = "Display identifiers on dropdown boxes"

    def __init__(
        self,
        manager: BehaviorManager,
        view: DropdownBoxesView | None = None,
        display_debug_information: bool | None = None,
    ) -> None:
        super().__init__(manager)
        self.view = view
        self._debug_override = display_debug_information
        self._bus = OrderedEventBus()
        self.last_update: DropdownBoxesUpdate | None = None

    def register_listeners(self) -> list[Subscription]:
        return [
            self.manager.on_did_change_selected_identifier(self._on_change, self),
            self.manager.on_did_change_active_document(self._on_change, self),
            self.manager.on_did_generate_identifiers(self._on_change, self, {"after": "select-at-cursor"}),
        ]

    async def _on_change(self, _event: object) -> None:
        await self.update_dropdown_boxes()

    async def on_activated(self) -> None:
        await self.update_dropdown_boxes()

    async def settings_changed(self) -> None:
        if self.is_active:
            await self.update_dropdown_boxes()

    def on_will_update_dropdown_boxes(
        self,
        callback: Callable[[DropdownBoxesUpdate], object],
        owner: object,
        constraints: Constraints = None,
    ) -> Subscription:
        if self.is_disposed:
            raise RuntimeError("display behavior is disposed.")
        return self._bus.subscribe(WILL_UPDATE_DROPDOWN_BOXES, callback, owner, constraints)

    def on_did_update_dropdown_boxes(
        self,
        callback: Callable[[DropdownBoxesUpdate], object],
        owner: object,
        constraints: Constraints = None,
    ) -> Subscription:
        if self.is_disposed:
            raise RuntimeError("display behavior is disposed.")
        return self._bus.subscribe(DID_UPDATE_DROPDOWN_BOXES, callback, owner, constraints)

    @property
    def display_debug_information(self) -> bool:
        if self._debug_override is not None:
            return self._debug_override
        return bool(self.current_settings()["display_debug_information"])

    async def update_dropdown_boxes(self) -> DropdownBoxesUpdate | None:
        """Compute, publish, and display the lists for the current selection."""
        if self.is_disposed or not self.is_active:
            return None

        with_debug = self.display_debug_information
        bar = self.manager.navigation_bar
        provider = bar.active_provider()
        if provider is None:
            update = DropdownBoxesUpdate()
        else:
            selection = bar.resolved_selection(provider)
            update = provider.synchronizer.build(selection)

        await self._bus.publish(WILL_UPDATE_DROPDOWN_BOXES, update)
        if self.view is not None:
            self.view.update_dropdown_boxes(update, partial(render_identifier, with_debug=with_debug))
        self.last_update = update
        logger.debug(
            "event=dropdown_boxes_updated parents=%s children=%s parent_index=%s children_index=%s",
            len(update.parent_identifiers),
            len(update.children_identifiers),
            update.parent_selected_index,
            update.children_selected_index,
        )
        await self._bus.publish(DID_UPDATE_DROPDOWN_BOXES, update)
        return update

    def settings(self) -> dict[str, object]:
        return {
            "name": self.title,
            "config": {
                "display_debug_information": {
                    "title": "Display debug information",
                    "description": "Show kinds, extra data and source range next to each entry.",
                    "type": "boolean",
                    "default": False,
                },
            },
        }

    def dispose(self) -> None:
        super().dispose()
        self._bus.dispose()
