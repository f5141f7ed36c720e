"""
Grid Reconstruction Module - Turns a card candidate into a 5x5 BingoCard.

Recognized values are placed by row order and left-to-right position.
Values that do not fit their column's B/I/N/G/O range are kept as read
so that misreads stay visible. Cells with no recognized token are
filled with a random value from the column's range.
"""

import logging
import random
from typing import List, Optional, Tuple

from .card import (
    BingoCard, Rect, GRID_SIZE, CENTER, FREE, SCORING_CELLS,
    COLUMN_LETTERS, COLUMN_RANGES, in_column_range,
)
from .config import DetectionConfig
from .segmentation import CardCandidate

logger = logging.getLogger(__name__)

# Highest number used in 75-ball bingo
MAX_NUMBER = 75


def card_bounds(candidate: CardCandidate, padding: int = 10) -> Rect:
    """
    Padded bounding rectangle over all tokens of a candidate.

    Args:
        candidate: Card candidate with at least one token
        padding: Margin added on every side in pixels

    Returns:
        Rect in image pixels
    """
    tokens = candidate.tokens
    min_x = min(t.x for t in tokens)
    max_x = max(t.right for t in tokens)
    min_y = min(t.y for t in tokens)
    max_y = max(t.bottom for t in tokens)
    return Rect(
        x=min_x - padding,
        y=min_y - padding,
        width=max_x - min_x + 2 * padding,
        height=max_y - min_y + 2 * padding,
    )


def compute_confidence(token_count: int) -> float:
    """Fraction of the 24 scoring cells backed by recognized tokens, capped at 1."""
    return min(token_count / SCORING_CELLS, 1.0)


def reconstruct_card(
    candidate: CardCandidate,
    card_id: int,
    config: Optional[DetectionConfig] = None,
    rng: Optional[random.Random] = None
) -> BingoCard:
    """
    Build a complete BingoCard from a card candidate.

    Always succeeds: missing cells are synthesized so the card is
    playable, and confidence reports how much of it was actually read.

    Args:
        candidate: Card candidate (at least one token)
        card_id: Id to assign
        config: Detection thresholds (defaults if None)
        rng: Random source for synthesized cells (module random if None)

    Returns:
        BingoCard
    """
    config = config or DetectionConfig()
    rng = rng or random

    grid: List[List[int]] = [[FREE] * GRID_SIZE for _ in range(GRID_SIZE)]
    filled = [[False] * GRID_SIZE for _ in range(GRID_SIZE)]

    for r, row in enumerate(candidate.rows[:GRID_SIZE]):
        for c, token in enumerate(row.tokens[:GRID_SIZE]):
            grid[r][c] = token.value
            filled[r][c] = True
            if (r, c) != CENTER and not in_column_range(c, token.value):
                logger.debug(
                    f"Card {card_id}: {token.value} at ({r},{c}) is outside "
                    f"column {COLUMN_LETTERS[c]} range {COLUMN_RANGES[c]}, kept as read"
                )

    # Center is the FREE space whatever was read there
    center_r, center_c = CENTER
    if grid[center_r][center_c] != FREE:
        value = grid[center_r][center_c]
        level = logging.DEBUG if value > MAX_NUMBER else logging.INFO
        logger.log(level, f"Card {card_id}: center value {value} replaced by FREE")
    grid[center_r][center_c] = FREE
    filled[center_r][center_c] = True

    synthesized: List[Tuple[int, int]] = []
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if not filled[r][c]:
                low, high = COLUMN_RANGES[c]
                grid[r][c] = rng.randint(low, high)
                synthesized.append((r, c))

    tokens = candidate.tokens
    card = BingoCard.from_rows(
        card_id,
        card_bounds(candidate, config.card_padding),
        grid,
        compute_confidence(len(tokens)),
        original_numbers=tuple(tokens),
        synthesized=tuple(synthesized),
    )

    logger.debug(
        f"Card {card_id}: {candidate.row_count} rows, {len(tokens)} tokens, "
        f"{len(synthesized)} synthesized, confidence {card.confidence:.2f}"
    )
    for row_idx, row in enumerate(card.grid):
        logger.debug(f"  Row {row_idx}: [{' '.join(f'{v:2d}' for v in row)}]")

    return card
