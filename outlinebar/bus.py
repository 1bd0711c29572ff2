"""Ordered, sequential pub/sub used to coordinate behaviors.

Subscribers are ``(owner, callback)`` pairs per event name. Each owner carries
a stable tag (a string, or the ``behavior_id`` attribute of an object) and may
declare that it must run before or after owners with other tags. The list for
an event is re-ordered on every insertion so all declared constraints hold,
with registration order as the tie-break.

``publish`` awaits every callback in turn before starting the next one. The
payload is shared by reference, so later callbacks see earlier mutations.
"""

from __future__ import annotations

import heapq
import inspect
import itertools
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class OrderingCycleError(ValueError):
    """Raised when order constraints for one event contradict each other."""


def _tag_tuple(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        tags: list[str] = []
        for item in value:
            tags.append(owner_tag(item))
        return tuple(tags)
    return (owner_tag(value),)


@dataclass(frozen=True)
class OrderConstraints:
    """Tags this owner's callbacks must run ``before`` / ``after``."""

    before: tuple[str, ...] = ()
    after: tuple[str, ...] = ()

    @classmethod
    def coerce(cls, value: object) -> OrderConstraints:
        """Accept ``None``, an ``OrderConstraints``, or a ``before``/``after`` mapping.

        Mapping values may be a single tag, a tagged owner, or an iterable of
        either.
        """
        if value is None:
            return cls()
        if isinstance(value, OrderConstraints):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"before", "after"}
            if unknown:
                raise ValueError(f"unknown order constraint keys: {sorted(unknown)}")
            return cls(before=_tag_tuple(value.get("before")), after=_tag_tuple(value.get("after")))
        raise TypeError("order constraints must be None, OrderConstraints, or a mapping.")


def owner_tag(owner: object) -> str:
    """Resolve the ordering tag of ``owner``.

    Strings are their own tag; objects must expose a non-empty ``behavior_id``.
    """
    tag = owner if isinstance(owner, str) else getattr(owner, "behavior_id", None)
    if not isinstance(tag, str) or not tag.strip():
        raise ValueError("owner must be a non-empty tag or expose a non-empty behavior_id.")
    return tag


class Subscription:
    """Disposable handle for one subscription. Disposing twice is a no-op."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release = release
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._release()


@dataclass(eq=False)
class _Subscriber:
    owner: object
    tag: str
    callback: Callable[[object], object]
    constraints: OrderConstraints
    sequence: int
    handle: Subscription | None = field(default=None, repr=False)


def _order_subscribers(entries: list[_Subscriber]) -> list[_Subscriber]:
    """Return ``entries`` in an order satisfying every before/after constraint.

    Builds the precedence graph, then fills the result from the back: among
    entries whose successors are all placed, the most recently registered goes
    last. Unconstrained entries therefore keep registration order and only
    entries named by a constraint move.
    """
    count = len(entries)
    successors: list[set[int]] = [set() for _ in range(count)]
    predecessors: list[set[int]] = [set() for _ in range(count)]

    def add_edge(first: int, second: int) -> None:
        successors[first].add(second)
        predecessors[second].add(first)

    for i, entry in enumerate(entries):
        for j, other in enumerate(entries):
            if i == j or other.tag == entry.tag:
                continue
            if other.tag in entry.constraints.before:
                add_edge(i, j)
            if other.tag in entry.constraints.after:
                add_edge(j, i)

    remaining = [len(successors[i]) for i in range(count)]
    ready = [(-entries[i].sequence, i) for i in range(count) if remaining[i] == 0]
    heapq.heapify(ready)
    reversed_order: list[_Subscriber] = []
    while ready:
        _, index = heapq.heappop(ready)
        reversed_order.append(entries[index])
        for pred in predecessors[index]:
            remaining[pred] -= 1
            if remaining[pred] == 0:
                heapq.heappush(ready, (-entries[pred].sequence, pred))

    if len(reversed_order) != count:
        stuck = sorted({entries[i].tag for i in range(count) if remaining[i] > 0})
        raise OrderingCycleError(f"order constraints form a cycle between: {', '.join(stuck)}")
    reversed_order.reverse()
    return reversed_order


class OrderedEventBus:
    """Per-event ordered subscriber lists with sequential async dispatch."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Subscriber]] = {}
        self._sequence = itertools.count()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(
        self,
        event_name: str,
        callback: Callable[[object], object],
        owner: object,
        constraints: OrderConstraints | Mapping[str, object] | None = None,
    ) -> Subscription:
        """Register ``callback`` for ``event_name`` on behalf of ``owner``.

        Re-subscribing the same ``(owner, callback)`` pair returns the existing
        handle. Invalid arguments raise immediately; contradictory constraints
        raise ``OrderingCycleError`` and leave the list unchanged.
        """
        if self._disposed:
            raise RuntimeError("cannot subscribe to a disposed event bus.")
        if not isinstance(event_name, str) or not event_name:
            raise ValueError("event_name must be a non-empty string.")
        if not callable(callback):
            raise TypeError("callback must be callable.")
        if owner is None:
            raise ValueError("owner is required to subscribe.")
        tag = owner_tag(owner)
        order = OrderConstraints.coerce(constraints)

        subscribers = self._subscribers.setdefault(event_name, [])
        for existing in subscribers:
            if existing.owner == owner and existing.callback == callback:
                return existing.handle

        entry = _Subscriber(
            owner=owner,
            tag=tag,
            callback=callback,
            constraints=order,
            sequence=next(self._sequence),
        )
        subscribers[:] = _order_subscribers([*subscribers, entry])
        entry.handle = Subscription(lambda: self._remove(event_name, entry))
        logger.debug(
            "event=bus_subscribe name=%s owner=%s order=%s",
            event_name,
            tag,
            [item.tag for item in subscribers],
        )
        return entry.handle

    def _remove(self, event_name: str, entry: _Subscriber) -> None:
        subscribers = self._subscribers.get(event_name)
        if not subscribers:
            return
        for index, existing in enumerate(subscribers):
            if existing is entry:
                del subscribers[index]
                logger.debug("event=bus_unsubscribe name=%s owner=%s", event_name, entry.tag)
                break
        if not subscribers:
            self._subscribers.pop(event_name, None)

    async def publish(self, event_name: str, payload: object = None) -> object:
        """Invoke subscribers of ``event_name`` one at a time, in order.

        Each callback (and anything it awaits) settles before the next starts.
        Exceptions propagate to the caller and skip the remaining callbacks.
        Returns ``payload`` so callers can read the final mutated value.
        """
        if not isinstance(event_name, str) or not event_name:
            raise ValueError("event_name must be a non-empty string.")
        if self._disposed:
            return payload
        for entry in list(self._subscribers.get(event_name, ())):
            if entry.handle is not None and entry.handle.disposed:
                continue
            result = entry.callback(payload)
            if inspect.isawaitable(result):
                await result
        return payload

    def subscriber_tags(self, event_name: str) -> list[str]:
        """Return owner tags for ``event_name`` in dispatch order."""
        return [entry.tag for entry in self._subscribers.get(event_name, ())]

    def dispose(self) -> None:
        if self._disposed:
            return
        for subscribers in self._subscribers.values():
            for entry in subscribers:
                if entry.handle is not None:
                    entry.handle._disposed = True
        self._subscribers.clear()
        self._disposed = True
