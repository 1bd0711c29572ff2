"""Behavior contract and the manager that feeds behaviors bar events.

Behaviors are independent observers of the navigation bar. They subscribe to
manager events under their ``behavior_id`` tag and may declare that they must
run before or after other behaviors' tags.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ..bus import OrderConstraints, OrderedEventBus, Subscription
from ..identifiers.identifier import Identifier
from ..identifiers.positions import Position
from ..runtime.config import load_behavior_settings, save_behavior_setting

logger = logging.getLogger(__name__)

DID_CHANGE_ACTIVE_DOCUMENT = "did-change-active-document"
DID_GENERATE_IDENTIFIERS = "did-generate-identifiers"
DID_CHANGE_SELECTED_IDENTIFIER = "did-change-selected-identifier"
DID_CHANGE_CURSOR_POSITION = "did-change-cursor-position"

Constraints = OrderConstraints | Mapping[str, object] | None


@dataclass(frozen=True)
class ActiveDocumentChangedEvent:
    document: object


@dataclass(frozen=True)
class SelectedIdentifierChangedEvent:
    selected_identifier: Identifier | None
    selected_by_user: bool = False


@dataclass(frozen=True)
class CursorPositionChangedEvent:
    document: object
    position: Position


class BehaviorManager:
    """Relays navigation bar events to registered behaviors in declared order."""

    def __init__(self, navigation_bar) -> None:
        self._navigation_bar = navigation_bar
        self._bus = OrderedEventBus()
        self._behaviors: list[Behavior] = []
        self._disposed = False

    @property
    def navigation_bar(self):
        return self._navigation_bar

    @property
    def behaviors(self) -> tuple[Behavior, ...]:
        return tuple(self._behaviors)

    def get_behavior(self, behavior_id: str) -> Behavior | None:
        for behavior in self._behaviors:
            if behavior.behavior_id == behavior_id:
                return behavior
        return None

    def register_behavior(self, behavior: Behavior) -> Behavior:
        if self._disposed:
            raise RuntimeError("cannot register behaviors on a disposed manager.")
        if not isinstance(behavior, Behavior):
            raise TypeError("behavior must be a Behavior instance.")
        if behavior not in self._behaviors:
            self._behaviors.append(behavior)
            logger.debug("event=behavior_registered behavior=%s", behavior.behavior_id)
        return behavior

    def unregister_behavior(self, behavior: Behavior) -> bool:
        if behavior in self._behaviors:
            self._behaviors.remove(behavior)
            behavior.deactivate()
            return True
        return False

    async def activate_all(self) -> None:
        for behavior in list(self._behaviors):
            await behavior.activate()

    def _subscribe(self, event_name: str, callback: Callable, owner: object, constraints: Constraints) -> Subscription:
        if owner is None:
            raise ValueError("owner must be the behavior the callback belongs to.")
        return self._bus.subscribe(event_name, callback, owner, constraints)

    def on_did_change_active_document(self, callback, owner, constraints: Constraints = None) -> Subscription:
        return self._subscribe(DID_CHANGE_ACTIVE_DOCUMENT, callback, owner, constraints)

    def on_did_generate_identifiers(self, callback, owner, constraints: Constraints = None) -> Subscription:
        return self._subscribe(DID_GENERATE_IDENTIFIERS, callback, owner, constraints)

    def on_did_change_selected_identifier(self, callback, owner, constraints: Constraints = None) -> Subscription:
        return self._subscribe(DID_CHANGE_SELECTED_IDENTIFIER, callback, owner, constraints)

    def on_did_change_cursor_position(self, callback, owner, constraints: Constraints = None) -> Subscription:
        return self._subscribe(DID_CHANGE_CURSOR_POSITION, callback, owner, constraints)

    async def emit(self, event_name: str, payload: object) -> object:
        if self._disposed:
            return payload
        logger.debug("event=behavior_dispatch name=%s order=%s", event_name, self._bus.subscriber_tags(event_name))
        return await self._bus.publish(event_name, payload)

    def dispose(self) -> None:
        if self._disposed:
            return
        for behavior in list(self._behaviors):
            behavior.dispose()
        self._behaviors.clear()
        self._bus.dispose()
        self._disposed = True


class Behavior:
    """Base class for pluggable navigation bar behaviors.

    Subclasses set ``behavior_id`` (the ordering tag) and ``title``, return
    their subscriptions from ``register_listeners`` and describe their
    settings in ``settings()``. A disposed behavior can no longer activate.
    """

    behavior_id = ""
    title = ""

    def __init__(self, manager: BehaviorManager) -> None:
        if manager is None:
            raise ValueError("behavior requires a BehaviorManager.")
        self._manager = manager
        self._active = False
        self._disposed = False
        self._subscriptions: list[Subscription] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.behavior_id!r})"

    @property
    def manager(self) -> BehaviorManager:
        return self._manager

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    async def activate(self) -> None:
        if self._disposed or self._active:
            return
        self._active = True
        self._subscriptions = list(self.register_listeners())
        logger.debug("event=behavior_activated behavior=%s", self.behavior_id)
        await self.on_activated()

    def deactivate(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions = []
        if self._active:
            logger.debug("event=behavior_deactivated behavior=%s", self.behavior_id)
        self._active = False

    def dispose(self) -> None:
        self.deactivate()
        self._disposed = True

    def register_listeners(self) -> list[Subscription]:
        return []

    async def on_activated(self) -> None:
        pass

    def settings(self) -> dict[str, object]:
        """Settings schema: ``{"name": ..., "config": {key: {"type", "default", ...}}}``."""
        return {"name": self.title, "config": {}}

    def current_settings(self) -> dict[str, object]:
        """Schema defaults overlaid with persisted values that pass validation."""
        schema = self.settings().get("config", {})
        stored = load_behavior_settings(self.behavior_id)
        values: dict[str, object] = {}
        for key, option in schema.items():
            value = stored.get(key, option.get("default"))
            allowed = option.get("enum")
            if allowed is not None and value not in allowed:
                value = option.get("default")
            if option.get("type") == "boolean" and not isinstance(value, bool):
                value = option.get("default")
            values[key] = value
        return values

    def save_setting(self, key: str, value: object) -> None:
        if key not in self.settings().get("config", {}):
            raise KeyError(f"{self.behavior_id} has no setting {key!r}")
        save_behavior_setting(self.behavior_id, key, value)

    async def settings_changed(self) -> None:
        pass
