"""Cursor position to identifier resolution."""

from __future__ import annotations

import logging

from .identifiers.identifier import Identifier
from .identifiers.kinds import KindClass, has_kind_class
from .identifiers.positions import Position

logger = logging.getLogger(__name__)


class PositionLocator:
    """Find the innermost identifier whose range contains a position.

    Callables are atomic: the search never descends into them. Children with
    an inverted range are reported and skipped. When no child matches, the
    node searched is the answer, so the root is the worst case.
    """

    def locate(self, node: Identifier, position: object) -> Identifier:
        if node is None:
            raise ValueError("locate requires a node to search from.")
        target = Position.coerce(position)
        if target is None:
            return node

        current = node
        while True:
            if has_kind_class(current.kind, KindClass.CALLABLE):
                return current
            match = self._matching_child(current, target)
            if match is None:
                return current
            if not match.has_children():
                return match
            current = match

    def _matching_child(self, node: Identifier, position: Position) -> Identifier | None:
        for child in node.children:
            start = child.start_position
            end = child.end_position
            if start is None or end is None:
                continue
            if start > end:
                logger.warning(
                    "event=locator_malformed_range identifier=%r start=%s end=%s",
                    child,
                    start,
                    end,
                )
                continue
            if start <= position <= end:
                return child
        return None
