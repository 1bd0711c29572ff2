"""Translation of a generic outline into an identifier tree.

The outline is whatever an outline source returned: ``OutlineTree`` and
``OutlineNode`` dataclasses, or mappings shaped like them with camelCase or
snake_case keys. Each node is classified by kind:

- grouping kinds are transparent, their children land in the current parent;
- containers become a node and recurse;
- callables become a node and stop, so locals never surface;
- anything else becomes a leaf tagged with the literal kind.

Nodes carrying ``tokenized_text`` expand into one leaf per token instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..identifiers.identifier import Identifier, TopScopeIdentifier, iter_identifiers
from ..identifiers.kinds import UNKNOWN_KIND, KindClass, classify_kind, token_kind

logger = logging.getLogger(__name__)

UNNAMED = "unnamed"


def _field(node: object, *names: str) -> object:
    """Read the first present field among ``names`` from a mapping or object."""
    if isinstance(node, Mapping):
        for name in names:
            value = node.get(name)
            if value is not None:
                return value
        return None
    for name in names:
        value = getattr(node, name, None)
        if value is not None:
            return value
    return None


def _outline_roots(outline: object) -> Sequence[object]:
    if outline is None:
        return ()
    if isinstance(outline, Sequence) and not isinstance(outline, (str, bytes)):
        return outline
    roots = _field(outline, "outlineTrees", "outline_trees", "children")
    return roots or ()


def _node_name(node: object) -> str:
    for key in (("plainText", "plain_text"), ("name",), ("representativeName", "representative_name")):
        value = _field(node, *key)
        if isinstance(value, str) and value:
            return value
    return UNNAMED


class OutlineTranslator:
    """Rebuild a document's identifier tree from an outline.

    ``translate`` resets the given root (or a fresh ``TopScopeIdentifier``)
    and repopulates it in preorder, children in source order.
    """

    def __init__(self, document: object) -> None:
        if document is None:
            raise ValueError("OutlineTranslator requires the document outlines belong to.")
        self._document = document

    def translate(self, outline: object, root: TopScopeIdentifier | None = None) -> TopScopeIdentifier:
        if root is None:
            root = TopScopeIdentifier(self._document)
        else:
            root.reset()

        if outline is None:
            logger.debug("event=outline_translate_skipped reason=no_outline")
            return root

        for node in _outline_roots(outline):
            self._translate_node(node, root)

        missing = self.nodes_without_kind(root)
        if missing:
            logger.warning("event=outline_missing_kind count=%s first=%r", len(missing), missing[0])
        logger.debug("event=outline_translated identifiers=%s", sum(1 for _ in iter_identifiers(root)) - 1)
        return root

    @staticmethod
    def nodes_without_kind(root: Identifier) -> list[Identifier]:
        """Return real identifiers under ``root`` that carry no kind tag."""
        return [node for node in iter_identifiers(root) if node is not root and not node.kind]

    def _new_child(self, parent: Identifier, node: object) -> Identifier:
        identifier = Identifier(document=self._document, parent=parent)
        identifier.set_positions(
            _field(node, "startPosition", "start_position"),
            _field(node, "endPosition", "end_position"),
        )
        parent.add_child(identifier)
        return identifier

    def _translate_node(self, node: object, parent: Identifier) -> None:
        if node is None:
            logger.warning("event=outline_node_missing parent=%r", parent)
            return

        tokens = _field(node, "tokenizedText", "tokenized_text")
        if tokens:
            for token in tokens:
                leaf = self._new_child(parent, node)
                value = _field(token, "value")
                leaf.set_name(value if isinstance(value, str) else "")
                leaf.add_kind(token_kind(_field(token, "kind")))
            return

        kind = _field(node, "kind")
        if not isinstance(kind, str) or not kind:
            kind = UNKNOWN_KIND
        kind_class = classify_kind(kind)
        children = _field(node, "children") or ()

        if kind_class is KindClass.GROUPING:
            for child in children:
                self._translate_node(child, parent)
            return

        identifier = self._new_child(parent, node)
        identifier.set_name(_node_name(node))
        identifier.add_kind(kind)

        if kind_class is KindClass.CONTAINER:
            for child in children:
                self._translate_node(child, identifier)
