"""
Test script for persistent settings

Usage:
    python tests/test_settings.py
    pytest tests/
"""

import sys
import json
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bingo_scanner.settings import (
    DEFAULT_SETTINGS,
    clamp_opacity,
    load_settings,
    save_settings,
)
from bingo_scanner.detection import DetectionConfig


def test_missing_file():
    print("\n" + "="*60)
    print("TEST: Missing Settings File")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        settings = load_settings(Path(tmp) / "config.json")
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS

    print("  [PASS] Missing file tests")


def test_round_trip_and_merge():
    """Saved keys override defaults; keys missing from the file keep defaults."""
    print("\n" + "="*60)
    print("TEST: Save and Load")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        path.write_text(json.dumps({"row_tolerance": 30, "overlay_opacity": 5}), encoding="utf-8")

        settings = load_settings(path)
        assert settings["row_tolerance"] == 30
        assert settings["max_row_gap"] == DEFAULT_SETTINGS["max_row_gap"]
        assert settings["overlay_opacity"] == 1.0

        settings["debug_enabled"] = True
        save_settings(settings, path)
        assert load_settings(path)["debug_enabled"] is True

    print("  [PASS] Save and load tests")


def test_invalid_file():
    print("\n" + "="*60)
    print("TEST: Invalid Settings File")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.json"
        for content in ("{not json", "[1, 2, 3]"):
            path.write_text(content, encoding="utf-8")
            assert load_settings(path) == DEFAULT_SETTINGS

    print("  [PASS] Invalid file tests")


def test_clamp_opacity():
    assert clamp_opacity(0.5) == 0.5
    assert clamp_opacity(0) == 0.1
    assert clamp_opacity("2") == 1.0
    assert clamp_opacity("opaque") == DEFAULT_SETTINGS["overlay_opacity"]


def test_detection_config_defaults():
    """Default settings produce the default detection thresholds."""
    assert DetectionConfig.from_settings(DEFAULT_SETTINGS) == DetectionConfig()


def main():
    """Run all settings tests."""
    tests = [
        test_missing_file,
        test_round_trip_and_merge,
        test_invalid_file,
        test_clamp_opacity,
        test_detection_config_defaults,
    ]
    for test in tests:
        test()
    print(f"\nAll {len(tests)} settings tests passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
