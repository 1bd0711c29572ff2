"""Outline extraction from source text.

Uses Tree-sitter when a grammar loads and regex fallbacks otherwise. Both
paths produce a nested ``OutlineTree`` the translator consumes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from functools import lru_cache

from ..identifiers.positions import Position
from .languages import (
    CALLABLE_NODE_TYPES,
    CONSTRUCTOR_NAMES,
    CONSTRUCTOR_NODE_TYPES,
    CONTAINER_NODE_KINDS,
    DECORATED_NODE_TYPES,
    FALLBACK_PATTERNS_BY_LANGUAGE,
    FIELD_NODE_KINDS,
    GENERIC_FALLBACK_PATTERNS,
    GROUPING_NODE_KINDS,
    IDENTIFIER_NODE_TYPES,
    MAX_OUTLINE_NODES,
    METHOD_NODE_TYPES,
    MISSING_PARSER_ERROR,
)
from .model import OutlineNode, OutlineTree

logger = logging.getLogger(__name__)

ParserLoader = Callable[[str], tuple[object | None, str | None]]


def _normalize_whitespace(text: str) -> str:
    """Collapse internal whitespace to single spaces for stable labels."""
    return re.sub(r"\s+", " ", text).strip()


@lru_cache(maxsize=32)
def _load_parser(language_name: str):
    """Load a Tree-sitter parser using supported provider packages.

    Tries ``tree_sitter_languages`` first, then ``tree_sitter_language_pack``.
    Returns ``(parser, error_message)``.
    """
    errors: list[str] = []

    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    if errors:
        return None, errors[0]

    return None, MISSING_PARSER_ERROR


def _node_text(source_bytes: bytes, node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _name_from_node(source_bytes: bytes, node) -> str:
    """Extract the display name of a definition node."""
    for field_name in ("name", "declarator"):
        child = node.child_by_field_name(field_name)
        if child is None:
            continue
        nested = child.child_by_field_name("name")
        if nested is not None:
            return _normalize_whitespace(_node_text(source_bytes, nested))
        return _normalize_whitespace(_node_text(source_bytes, child))

    for child in node.named_children:
        if child.type in IDENTIFIER_NODE_TYPES:
            return _normalize_whitespace(_node_text(source_bytes, child))

    return _normalize_whitespace(_node_text(source_bytes, node))


def _callable_kind(node_type: str, name: str, inside_container: bool) -> str:
    if node_type in CONSTRUCTOR_NODE_TYPES or name in CONSTRUCTOR_NAMES:
        return "constructor"
    if inside_container or node_type in METHOD_NODE_TYPES:
        return "method"
    return "function"


def _assignment_target(node):
    """Return the assigned identifier of a Python ``x = ...`` statement."""
    if node.type != "expression_statement":
        return None
    for child in node.named_children:
        if child.type != "assignment":
            continue
        left = child.child_by_field_name("left")
        if left is not None and left.type == "identifier":
            return left
    return None


def _point(point) -> Position:
    row, column = point
    return Position(int(row), int(column))


def collect_outline_tree_sitter(tree, source_bytes: bytes, max_nodes: int = MAX_OUTLINE_NODES) -> OutlineTree:
    """Build a nested outline from a parsed Tree-sitter tree.

    Containers keep their members as children. Callables are emitted without
    descending into their bodies. Grouping constructs (namespaces, modules)
    are kept as grouping nodes for the translator to splice away.
    """
    count = 0

    def emit(target: list[OutlineNode], node, kind: str, name: str) -> OutlineNode:
        nonlocal count
        entry = OutlineNode(
            kind=kind,
            plain_text=name,
            start_position=_point(node.start_point),
            end_position=_point(node.end_point),
        )
        target.append(entry)
        count += 1
        return entry

    def walk(node, target: list[OutlineNode], inside_container: bool) -> None:
        if count >= max_nodes:
            return

        if node.type in DECORATED_NODE_TYPES:
            definition = node.child_by_field_name("definition")
            if definition is not None:
                walk(definition, target, inside_container)
                return

        container_kind = CONTAINER_NODE_KINDS.get(node.type)
        if container_kind is not None:
            entry = emit(target, node, container_kind, _name_from_node(source_bytes, node))
            for child in node.named_children:
                walk(child, entry.children, True)
            return

        if node.type in CALLABLE_NODE_TYPES:
            name = _name_from_node(source_bytes, node)
            emit(target, node, _callable_kind(node.type, name, inside_container), name)
            return

        field_kind = FIELD_NODE_KINDS.get(node.type)
        if field_kind is not None:
            emit(target, node, field_kind, _name_from_node(source_bytes, node))
            return

        grouping_kind = GROUPING_NODE_KINDS.get(node.type)
        if grouping_kind is not None:
            entry = emit(target, node, grouping_kind, _name_from_node(source_bytes, node))
            for child in node.named_children:
                walk(child, entry.children, False)
            return

        target_name = _assignment_target(node)
        if target_name is not None:
            name = _normalize_whitespace(_node_text(source_bytes, target_name))
            emit(target, node, "property" if inside_container else "variable", name)
            return

        for child in node.named_children:
            walk(child, target, inside_container)

    roots: list[OutlineNode] = []
    for child in tree.root_node.named_children:
        walk(child, roots, False)
    return OutlineTree(children=roots)


def leading_indent_columns(text: str) -> int:
    """Return leading indentation width where tabs count as four columns."""
    count = 0
    for ch in text:
        if ch == " ":
            count += 1
            continue
        if ch == "\t":
            count += 4
            continue
        break
    return count


def _last_content_position(lines: list[str], before_row: int, floor_row: int) -> Position:
    """Return the end of the last non-blank line in ``[floor_row, before_row)``."""
    row = min(before_row, len(lines)) - 1
    while row > floor_row and not lines[row].strip():
        row -= 1
    row = max(row, floor_row)
    return Position(row, len(lines[row].rstrip()) if 0 <= row < len(lines) else 0)


def collect_outline_fallback(source: str, language_name: str | None, max_nodes: int = MAX_OUTLINE_NODES) -> OutlineTree:
    """Collect an outline via regex patterns, nested by indentation.

    Each match closes every open entry indented at or deeper than itself; a
    closed entry ends at the last non-blank line before the closing match.
    """
    patterns = FALLBACK_PATTERNS_BY_LANGUAGE.get(language_name or "", GENERIC_FALLBACK_PATTERNS)
    lines = source.splitlines()
    roots: list[OutlineNode] = []
    stack: list[tuple[OutlineNode, int]] = []
    count = 0

    def close(row: int) -> None:
        entry, _indent = stack.pop()
        entry.end_position = _last_content_position(lines, row, entry.start_position.row)

    for line_idx, line in enumerate(lines):
        if count >= max_nodes:
            break
        for kind, pattern in patterns:
            match = pattern.match(line)
            if match is None:
                continue
            name = _normalize_whitespace(match.group("name"))
            if not name:
                continue
            indent = leading_indent_columns(line)
            while stack and indent <= stack[-1][1]:
                close(line_idx)
            parent = stack[-1][0] if stack else None
            if kind == "function":
                inside_container = parent is not None and parent.kind in {"class", "interface", "enum"}
                kind = _callable_kind("", name, inside_container)
            entry = OutlineNode(
                kind=kind,
                plain_text=name,
                start_position=Position(line_idx, len(line) - len(line.lstrip())),
            )
            (parent.children if parent is not None else roots).append(entry)
            stack.append((entry, indent))
            count += 1
            break

    while stack:
        close(len(lines))
    return OutlineTree(children=roots)


class TreeSitterOutlineSource:
    """Outline source backed by Tree-sitter grammars with a regex fallback."""

    name = "tree-sitter"

    def __init__(
        self,
        priority: int = 1,
        max_nodes: int = MAX_OUTLINE_NODES,
        load_parser: ParserLoader | None = None,
    ) -> None:
        self.priority = priority
        self.max_nodes = max_nodes
        self._load_parser = load_parser or _load_parser
        self.last_error: str | None = None

    def supports(self, document) -> bool:
        return getattr(document, "language", None) is not None

    async def get_outline(self, document) -> OutlineTree:
        return self.build_outline(document.text, document.language)

    def build_outline(self, source: str, language_name: str | None) -> OutlineTree:
        """Parse ``source`` and return its outline.

        Parser load or parse failures fall back to regex patterns; the reason
        is kept in ``last_error`` when the fallback finds nothing either.
        """
        self.last_error = None
        parser, parser_error = (None, MISSING_PARSER_ERROR) if language_name is None else self._load_parser(language_name)
        source_bytes = source.encode("utf-8", errors="replace")

        if parser is not None:
            try:
                tree = parser.parse(source_bytes)
            except Exception as exc:
                parser_error = f"Tree-sitter parse failed: {exc}"
            else:
                outline = collect_outline_tree_sitter(tree, source_bytes, max_nodes=self.max_nodes)
                logger.debug(
                    "event=outline_parsed source=tree-sitter language=%s roots=%s",
                    language_name,
                    len(outline.children),
                )
                return outline

        logger.info("event=outline_fallback language=%s reason=%s", language_name, parser_error)
        outline = collect_outline_fallback(source, language_name, max_nodes=self.max_nodes)
        if not outline.children:
            self.last_error = parser_error
        return outline
