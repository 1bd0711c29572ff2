"""Outline shapes, sources, and translation into identifier trees."""

from __future__ import annotations

from .languages import detect_language
from .model import OutlineNode, OutlineTree, TextToken
from .sources import OutlineSource, OutlineSourceRegistry, StaticOutlineSource
from .translator import OutlineTranslator
from .treesitter import TreeSitterOutlineSource

__all__ = [
    "OutlineNode",
    "OutlineSource",
    "OutlineSourceRegistry",
    "OutlineTranslator",
    "OutlineTree",
    "StaticOutlineSource",
    "TextToken",
    "TreeSitterOutlineSource",
    "detect_language",
]
