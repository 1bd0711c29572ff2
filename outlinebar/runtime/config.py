"""Persistent JSON config helpers.

Stores per-behavior settings (sorting modes, debug labels) keyed by behavior
id. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "outlinebar"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

BEHAVIORS_KEY = "behaviors"
SORT_BEHAVIOR_ID = "sort-identifiers"
DISPLAY_BEHAVIOR_ID = "display-identifiers"

SORT_BY_POSITION = "File position"
SORT_BY_ALPHABET = "Alphabet"
SORTING_MODES = (SORT_BY_POSITION, SORT_BY_ALPHABET)
SORTING_SIDES = ("left", "right")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_behavior_settings(behavior_id: str) -> dict[str, object]:
    """Return the persisted settings object of one behavior, or ``{}``."""
    behaviors = load_config().get(BEHAVIORS_KEY)
    if not isinstance(behaviors, dict):
        return {}
    settings = behaviors.get(behavior_id)
    return dict(settings) if isinstance(settings, dict) else {}


def save_behavior_setting(behavior_id: str, key: str, value: object) -> None:
    """Persist one setting of one behavior, keeping everything else."""
    config = load_config()
    behaviors = config.get(BEHAVIORS_KEY)
    if not isinstance(behaviors, dict):
        behaviors = {}
    settings = behaviors.get(behavior_id)
    if not isinstance(settings, dict):
        settings = {}
    settings[key] = value
    behaviors[behavior_id] = settings
    config[BEHAVIORS_KEY] = behaviors
    save_config(config)


def _sorting_key(side: str) -> str:
    if side not in SORTING_SIDES:
        raise ValueError(f"side must be one of {SORTING_SIDES}, got {side!r}")
    return f"sorting_mode_{side}"


def load_sorting_mode(side: str) -> str:
    """Return the persisted sorting mode for the ``left`` or ``right`` list.

    Unknown or missing values fall back to ``File position``.
    """
    value = load_behavior_settings(SORT_BEHAVIOR_ID).get(_sorting_key(side))
    return value if value in SORTING_MODES else SORT_BY_POSITION


def save_sorting_mode(side: str, mode: str) -> None:
    """Persist a sorting mode; values outside ``SORTING_MODES`` are ignored."""
    key = _sorting_key(side)
    if mode not in SORTING_MODES:
        return
    save_behavior_setting(SORT_BEHAVIOR_ID, key, mode)


def load_debug_information() -> bool:
    """Return whether list entries should carry debug labels.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_behavior_settings(DISPLAY_BEHAVIOR_ID).get("display_debug_information")
    return bool(value) if isinstance(value, bool) else False


def save_debug_information(enabled: bool) -> None:
    save_behavior_setting(DISPLAY_BEHAVIOR_ID, "display_debug_information", bool(enabled))
