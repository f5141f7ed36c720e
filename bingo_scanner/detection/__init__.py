"""
Detection Package - Recovers bingo card grids from OCR word tokens.

Public API:
    - NumericToken, Row: Validated numeric tokens and token rows
    - CardCandidate: Rows believed to form one card
    - BingoCard, Rect: Detected card and its rectangle
    - DetectionConfig: Pixel thresholds
    - cluster_rows(): Tokens -> rows
    - segment_rows(): Rows -> card candidates
    - reconstruct_card(): Candidate -> BingoCard
    - build_cards(): Candidates -> numbered cards
    - detect_cards(): Full token -> card pipeline
    - run_detection(): OCR + detection with demo-card fallback
    - demo_cards(): Fixed demonstration cards

Usage:
    from bingo_scanner.detection import run_detection
    from bingo_scanner.ocr import create_engine

    result = run_detection(create_engine(), image)
    for card in result.cards:
        print(card.id, card.confidence, card.grid)
"""

from .tokens import NumericToken, Row, numeric_tokens
from .card import (
    BingoCard,
    Rect,
    GRID_SIZE,
    FREE,
    CENTER,
    COLUMN_LETTERS,
    COLUMN_RANGES,
)
from .config import DetectionConfig
from .clustering import cluster_rows, row_bucket
from .segmentation import CardCandidate, segment_rows
from .grid import reconstruct_card, card_bounds, compute_confidence
from .fallback import demo_cards, DEMO_GRIDS, DEMO_CONFIDENCE
from .pipeline import DetectionResult, build_cards, detect_cards, run_detection

__all__ = [
    # Data structures
    "NumericToken",
    "Row",
    "CardCandidate",
    "BingoCard",
    "Rect",
    "DetectionConfig",
    "DetectionResult",
    # Constants
    "GRID_SIZE",
    "FREE",
    "CENTER",
    "COLUMN_LETTERS",
    "COLUMN_RANGES",
    "DEMO_GRIDS",
    "DEMO_CONFIDENCE",
    # Functions
    "numeric_tokens",
    "row_bucket",
    "cluster_rows",
    "segment_rows",
    "reconstruct_card",
    "card_bounds",
    "compute_confidence",
    "build_cards",
    "detect_cards",
    "run_detection",
    "demo_cards",
]
