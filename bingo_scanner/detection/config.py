"""
Detection Config Module - Thresholds for the card detection pipeline.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DetectionConfig:
    """
    Pixel thresholds and row heuristics used during card detection.

    These depend on print layout and photo resolution, so they are
    loaded from settings rather than hardcoded.

    Attributes:
        row_tolerance: Y-bucket size used to group tokens into rows (px)
        max_row_gap: Rows closer than this belong to the same card (px)
        min_row_tokens: Fewest numeric tokens a row may have to count
        max_row_tokens: Most numeric tokens a row may have to count
        min_card_rows: Fewest valid rows needed to build a card
        card_padding: Margin added around the card's token bounding box (px)
    """
    row_tolerance: int = 20
    max_row_gap: int = 100
    min_row_tokens: int = 3
    max_row_tokens: int = 6
    min_card_rows: int = 3
    card_padding: int = 10

    def __post_init__(self):
        if self.row_tolerance <= 0:
            raise ValueError(f"row_tolerance must be positive, got {self.row_tolerance}")
        if self.max_row_gap <= 0:
            raise ValueError(f"max_row_gap must be positive, got {self.max_row_gap}")
        if not 1 <= self.min_row_tokens <= self.max_row_tokens:
            raise ValueError(
                f"Invalid row token window: {self.min_row_tokens}-{self.max_row_tokens}"
            )
        if self.min_card_rows < 1:
            raise ValueError(f"min_card_rows must be at least 1, got {self.min_card_rows}")
        if self.card_padding < 0:
            raise ValueError(f"card_padding must not be negative, got {self.card_padding}")

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'DetectionConfig':
        """
        Build a config from the settings dictionary.

        Keys missing from settings fall back to the dataclass defaults.

        Args:
            settings: Settings dictionary (see settings.DEFAULT_SETTINGS)

        Returns:
            DetectionConfig instance

        Raises:
            ValueError: If a threshold is not a valid integer or out of range
        """
        defaults = cls()
        values = {}
        for name in ("row_tolerance", "max_row_gap", "min_row_tokens",
                     "max_row_tokens", "min_card_rows", "card_padding"):
            raw = settings.get(name, getattr(defaults, name))
            try:
                values[name] = int(raw)
            except (TypeError, ValueError):
                raise ValueError(f"Setting '{name}' must be an integer, got {raw!r}")
        return cls(**values)
