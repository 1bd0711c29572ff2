"""Command-line front door for outlinebar.

Builds the identifier tree of one file, selects the identifier at the given
cursor position, and prints both dropdown boxes with their selections.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from .behaviors import register_default_behaviors
from .documents import DocumentHandle
from .identifiers.identifier import Identifier
from .identifiers.positions import Position
from .navigation_bar import NavigationBar
from .outline.sources import OutlineSourceRegistry
from .outline.treesitter import TreeSitterOutlineSource
from .runtime.config import SORTING_MODES
from .synchronizer import DropdownBoxesUpdate

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


class TextDropdownBoxesView:
    """Keeps the last rendered lists so they can be printed."""

    def __init__(self) -> None:
        self.left: list[str] = []
        self.right: list[str] = []
        self.left_index = 0
        self.right_index = 0

    def update_dropdown_boxes(self, update: DropdownBoxesUpdate, render_item: Callable[[Identifier], str]) -> None:
        self.left = [render_item(item) for item in update.parent_identifiers]
        self.right = [render_item(item) for item in update.children_identifiers]
        self.left_index = update.parent_selected_index
        self.right_index = update.children_selected_index

    def render(self) -> str:
        out: list[str] = []
        for title, items, selected in (
            ("left", self.left, self.left_index),
            ("right", self.right, self.right_index),
        ):
            out.append(f"{title}:\n")
            for index, label in enumerate(items):
                marker = ">" if index == selected else " "
                out.append(f"{marker} {label}\n")
        return "".join(out)


async def build_navigation_view(
    path: Path,
    position: Position,
    left_mode: str | None = None,
    right_mode: str | None = None,
    debug_labels: bool | None = None,
) -> TextDropdownBoxesView:
    """Run the standard behaviors for ``path`` with the cursor at ``position``."""
    document = DocumentHandle.from_path(path)
    bar = NavigationBar(registry=OutlineSourceRegistry([TreeSitterOutlineSource()]))
    view = TextDropdownBoxesView()
    register_default_behaviors(
        bar.behavior_manager,
        view,
        left_mode=left_mode,
        right_mode=right_mode,
        display_debug_information=debug_labels,
    )
    try:
        await bar.behavior_manager.activate_all()
        await bar.set_active_document(document, position)
    finally:
        bar.dispose()
    return view


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print the navigation boxes for a file."""
    parser = argparse.ArgumentParser(
        description="Print the class and member dropdowns of a source file's navigation bar."
    )
    parser.add_argument("path", help="Path to a source file.")
    parser.add_argument("--line", type=_positive_int, default=1, help="Cursor line, 1-based (default: 1).")
    parser.add_argument("--column", type=_positive_int, default=1, help="Cursor column, 1-based (default: 1).")
    parser.add_argument("--sort-left", choices=SORTING_MODES, default=None, help="Sorting of the left box.")
    parser.add_argument("--sort-right", choices=SORTING_MODES, default=None, help="Sorting of the right box.")
    parser.add_argument("--debug-labels", action="store_true", help="Append kinds and ranges to every entry.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging threshold.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s %(message)s")

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")

    view = asyncio.run(
        build_navigation_view(
            path,
            Position(args.line - 1, args.column - 1),
            left_mode=args.sort_left,
            right_mode=args.sort_right,
            debug_labels=True if args.debug_labels else None,
        )
    )
    sys.stdout.write(view.render())


if __name__ == "__main__":
    main()
