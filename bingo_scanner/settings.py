"""
Settings Module for Bingo Sheet Scanner

Provides persistent storage for user preferences and detection
thresholds using JSON. Settings are stored in config.json in the
working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Overlay opacity bounds (matches the UI slider)
MIN_OPACITY = 0.1
MAX_OPACITY = 1.0

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "engine_name": "tesseract",
    "tesseract_cmd": None,
    "show_overlay": True,
    "overlay_opacity": 0.8,
    # Detection thresholds (pixels / token counts)
    "row_tolerance": 20,
    "max_row_gap": 100,
    "min_row_tokens": 3,
    "max_row_tokens": 6,
    "min_card_rows": 3,
    "card_padding": 10,
}


def clamp_opacity(value: Any) -> float:
    """
    Coerce an opacity setting into the slider range.

    Args:
        value: Raw setting value

    Returns:
        Opacity between MIN_OPACITY and MAX_OPACITY (default if unparsable)
    """
    try:
        opacity = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SETTINGS["overlay_opacity"]
    return max(MIN_OPACITY, min(MAX_OPACITY, opacity))


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file (defaults to SETTINGS_FILE)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = path or SETTINGS_FILE
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError(f"expected a JSON object, got {type(settings).__name__}")

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
        result["overlay_opacity"] = clamp_opacity(result["overlay_opacity"])
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file (defaults to SETTINGS_FILE)
    """
    path = path or SETTINGS_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
