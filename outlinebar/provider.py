"""Per-document identifier providers.

A provider owns one document's identifier tree: it asks the outline source
registry for an outline, rebuilds the tree through the translator, and
announces the new tree on its own event bus.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .bus import OrderConstraints, OrderedEventBus, Subscription
from .identifiers.identifier import Identifier, TopScopeIdentifier, iter_identifiers
from .outline.sources import OutlineSourceRegistry
from .outline.translator import OutlineTranslator
from .synchronizer import SelectionSynchronizer

logger = logging.getLogger(__name__)

DID_GENERATE_IDENTIFIERS = "did-generate-identifiers"


@dataclass(frozen=True)
class GeneratedIdentifiersEvent:
    provider: IdentifiersProvider
    identifiers: TopScopeIdentifier


class IdentifiersProvider:
    """Identifier tree plus selector queries for one document."""

    def __init__(self, document, registry: OutlineSourceRegistry | None = None) -> None:
        if document is None:
            raise ValueError("IdentifiersProvider requires a document.")
        self.document = document
        self.registry = registry if registry is not None else OutlineSourceRegistry()
        self._top_scope = TopScopeIdentifier(document)
        self._translator = OutlineTranslator(document)
        self.synchronizer = SelectionSynchronizer(self._top_scope)
        self._bus = OrderedEventBus()
        self.outline: object = None
        self.source_name: str | None = None

    async def generate_identifiers(self) -> TopScopeIdentifier:
        """Rebuild the tree from the best outline source and publish it.

        Without a supporting source the tree is left empty, which still yields
        valid (sentinel-only) selector lists.
        """
        source = self.registry.source_for(self.document)
        self.source_name = getattr(source, "name", None)
        self.outline = None
        if source is None:
            logger.info("event=outline_source_missing document=%s", getattr(self.document, "doc_id", None))
        else:
            self.outline = await source.get_outline(self.document)

        self._translator.translate(self.outline, root=self._top_scope)
        logger.debug(
            "event=identifiers_generated document=%s source=%s identifiers=%s",
            getattr(self.document, "doc_id", None),
            self.source_name,
            sum(1 for _ in iter_identifiers(self._top_scope)) - 1,
        )
        await self._bus.publish(DID_GENERATE_IDENTIFIERS, GeneratedIdentifiersEvent(self, self._top_scope))
        return self._top_scope

    def get_top_scope_identifier(self) -> TopScopeIdentifier:
        return self._top_scope

    def get_identifiers_for_parents_dropbox(self, identifier: Identifier | None = None) -> list[Identifier]:
        return self.synchronizer.parent_identifiers(identifier)

    def get_identifiers_for_children_dropbox(self, identifier: Identifier | None = None) -> list[Identifier]:
        return self.synchronizer.children_identifiers(identifier)

    def get_identifier_for_position(self, position: object) -> Identifier:
        return self.synchronizer.locator.locate(self._top_scope, position)

    def on_did_generate_identifiers(
        self,
        callback: Callable[[GeneratedIdentifiersEvent], object],
        owner: object,
        constraints: OrderConstraints | Mapping[str, object] | None = None,
    ) -> Subscription:
        return self._bus.subscribe(DID_GENERATE_IDENTIFIERS, callback, owner, constraints)

    def dispose(self) -> None:
        self._bus.dispose()


ProviderFactory = Callable[[object, OutlineSourceRegistry], IdentifiersProvider]


class ProviderPool:
    """One cached provider per open document."""

    def __init__(
        self,
        registry: OutlineSourceRegistry | None = None,
        provider_factory: ProviderFactory = IdentifiersProvider,
    ) -> None:
        self.registry = registry if registry is not None else OutlineSourceRegistry()
        self._provider_factory = provider_factory
        self._providers: dict[object, IdentifiersProvider] = {}

    def cached(self, document) -> IdentifiersProvider | None:
        return self._providers.get(document) if document is not None else None

    async def provider_for(self, document, generate: bool = True) -> IdentifiersProvider | None:
        """Return the document's provider, creating and populating it on first use."""
        if document is None:
            return None
        provider = self._providers.get(document)
        if provider is not None:
            return provider
        provider = self._provider_factory(document, self.registry)
        self._providers[document] = provider
        if generate:
            await provider.generate_identifiers()
        return provider

    def forget(self, document) -> bool:
        """Drop and dispose the provider of a closed document."""
        provider = self._providers.pop(document, None)
        if provider is None:
            return False
        provider.dispose()
        return True

    def dispose(self) -> None:
        for provider in self._providers.values():
            provider.dispose()
        self._providers.clear()
