"""Optional alphabetical ordering of the dropdown boxes."""

from __future__ import annotations

from ..bus import Subscription
from ..runtime.config import SORT_BY_ALPHABET, SORT_BY_POSITION, SORTING_MODES
from ..synchronizer import DropdownBoxesUpdate, sort_preserving_selection
from .base import Behavior, BehaviorManager
from .display import DisplayIdentifiersOnDropdownBoxes


def _mode_schema(title: str) -> dict[str, object]:
    return {
        "title": title,
        "type": "string",
        "default": SORT_BY_POSITION,
        "enum": list(SORTING_MODES),
        "group": "Sort:",
    }


class SortIdentifiersOnDropdownBoxes(Behavior):
    """Reorder the pending lists per side, then re-point both selections.

    Listens to the display behavior's ``will-update-dropdown-boxes`` so the
    view only ever sees sorted lists. Explicit ``left_mode``/``right_mode``
    take precedence over persisted settings.
    """

    behavior_id = "sort-identifiers"
    title = "Sort identifiers"

    def __init__(
        self,
        manager: BehaviorManager,
        display: DisplayIdentifiersOnDropdownBoxes,
        left_mode: str | None = None,
        right_mode: str | None = None,
    ) -> None:
        super().__init__(manager)
        if display is None:
            raise ValueError("sorting requires the display behavior it reorders.")
        for mode in (left_mode, right_mode):
            if mode is not None and mode not in SORTING_MODES:
                raise ValueError(f"sorting mode must be one of {SORTING_MODES}, got {mode!r}")
        self._display = display
        self._left_mode = left_mode
        self._right_mode = right_mode

    def register_listeners(self) -> list[Subscription]:
        return [self._display.on_will_update_dropdown_boxes(self.sort_identifiers, self)]

    def sorting_modes(self) -> tuple[str, str]:
        settings = self.current_settings()
        left = self._left_mode or settings["sorting_mode_left"]
        right = self._right_mode or settings["sorting_mode_right"]
        return left, right

    def sort_identifiers(self, update: DropdownBoxesUpdate) -> None:
        if self.is_disposed or not self.is_active:
            return
        if not isinstance(update, DropdownBoxesUpdate):
            return
        if update.selected_parent() is None or update.selected_child() is None:
            return
        left, right = self.sorting_modes()
        sort_preserving_selection(
            update,
            sort_parents=left == SORT_BY_ALPHABET,
            sort_children=right == SORT_BY_ALPHABET,
        )

    def settings(self) -> dict[str, object]:
        return {
            "name": self.title,
            "config": {
                "sorting_mode_left": _mode_schema("left:"),
                "sorting_mode_right": _mode_schema("right:"),
            },
        }

    async def settings_changed(self) -> None:
        if self.is_active:
            await self._display.update_dropdown_boxes()
