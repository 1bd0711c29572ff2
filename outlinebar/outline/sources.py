"""Outline sources and the registry that picks one per document."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class OutlineSource(Protocol):
    """Anything that can hand over a generic outline for a document."""

    name: str
    priority: int

    def supports(self, document) -> bool: ...

    async def get_outline(self, document) -> object | None: ...


class StaticOutlineSource:
    """Serve a fixed in-memory outline.

    ``documents`` restricts which handles it answers for; ``None`` means all.
    """

    def __init__(self, outline: object, name: str = "static", priority: int = 0, documents=None) -> None:
        self.outline = outline
        self.name = name
        self.priority = priority
        self._documents = None if documents is None else list(documents)

    def supports(self, document) -> bool:
        if self._documents is None:
            return True
        return any(candidate is document for candidate in self._documents)

    async def get_outline(self, document) -> object | None:
        return self.outline


class OutlineSourceRegistry:
    """Explicitly constructed set of outline sources.

    ``source_for`` returns the highest-priority source supporting a document;
    among equal priorities the earliest registered wins.
    """

    def __init__(self, sources=()) -> None:
        self._sources: list[OutlineSource] = []
        for source in sources:
            self.add_source(source)

    @property
    def sources(self) -> tuple[OutlineSource, ...]:
        return tuple(self._sources)

    def add_source(self, source: OutlineSource) -> OutlineSource:
        if source is None:
            raise ValueError("source is required.")
        if not any(existing is source for existing in self._sources):
            self._sources.append(source)
            logger.debug("event=outline_source_added name=%s priority=%s", source.name, source.priority)
        return source

    def remove_source(self, source: OutlineSource) -> bool:
        for index, existing in enumerate(self._sources):
            if existing is source:
                del self._sources[index]
                logger.debug("event=outline_source_removed name=%s", source.name)
                return True
        return False

    def source_for(self, document) -> OutlineSource | None:
        best: OutlineSource | None = None
        for source in self._sources:
            if not source.supports(document):
                continue
            if best is None or source.priority > best.priority:
                best = source
        return best
