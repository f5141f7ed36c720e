"""
Card Segmentation Module - Splits the row list into per-card candidates.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config import DetectionConfig
from .tokens import NumericToken, Row

logger = logging.getLogger(__name__)


@dataclass
class CardCandidate:
    """
    Rows believed to belong to one physical card, top to bottom.

    Attributes:
        rows: Accepted rows in scan order
    """
    rows: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def tokens(self) -> List[NumericToken]:
        """Every token of every row, flattened in row order."""
        return [token for row in self.rows for token in row.tokens]

    def is_card(self, min_rows: int = 3) -> bool:
        """Enough rows to be treated as a card."""
        return self.row_count >= min_rows


def is_valid_row(row: Row, config: DetectionConfig) -> bool:
    """A bingo row has 5 numbers; partial reads of 3-6 are tolerated by default."""
    return config.min_row_tokens <= len(row) <= config.max_row_tokens


def segment_rows(rows: List[Row], config: Optional[DetectionConfig] = None) -> List[CardCandidate]:
    """
    Group consecutive valid rows into card candidates.

    Rows with too few or too many tokens are skipped entirely. A valid
    row joins the current candidate when its y is less than max_row_gap
    below the previous valid row; otherwise it starts a new candidate.

    Candidates are returned regardless of size; callers drop those
    with fewer than min_card_rows rows.

    Args:
        rows: Rows ordered top to bottom
        config: Detection thresholds (defaults if None)

    Returns:
        List of CardCandidate in scan order
    """
    config = config or DetectionConfig()
    candidates: List[CardCandidate] = []
    current: Optional[CardCandidate] = None
    last_y: Optional[int] = None

    for row in rows:
        if not is_valid_row(row, config):
            logger.debug(f"Skipping row at y={row.y} with {len(row)} tokens")
            continue

        if current is None or (row.y - last_y) < config.max_row_gap:
            if current is None:
                current = CardCandidate()
                candidates.append(current)
            current.rows.append(row)
        else:
            logger.debug(f"Gap {row.y - last_y}px at y={row.y}, starting new candidate")
            current = CardCandidate(rows=[row])
            candidates.append(current)
        last_y = row.y

    logger.debug(
        f"Segmented {len(rows)} rows into {len(candidates)} candidates: "
        f"{[c.row_count for c in candidates]}"
    )
    return candidates
