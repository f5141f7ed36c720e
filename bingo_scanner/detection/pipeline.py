"""
Detection Pipeline Module - OCR tokens to bingo cards in one pass.

    words -> cluster_rows -> segment_rows -> reconstruct_card -> cards

run_detection() adds the OCR call in front and substitutes the
demonstration cards when recognition fails or finds no words.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from PIL import Image

from bingo_scanner.ocr.base import OCREngine
from bingo_scanner.ocr.result import WordToken

from .card import BingoCard
from .clustering import cluster_rows
from .config import DetectionConfig
from .fallback import demo_cards
from .grid import reconstruct_card
from .segmentation import CardCandidate, segment_rows

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]


@dataclass
class DetectionResult:
    """
    Outcome of one detection run.

    Attributes:
        cards: Detected (or demonstration) cards
        text: Raw OCR text, empty when OCR failed
        words: OCR word tokens received (kept for diagnostics)
        used_fallback: True if the demonstration cards were substituted
        error: OCR failure message, if any
        processing_time_ms: Total time for OCR and detection
    """
    cards: List[BingoCard] = field(default_factory=list)
    text: str = ""
    words: List[WordToken] = field(default_factory=list)
    used_fallback: bool = False
    error: Optional[str] = None
    processing_time_ms: float = 0.0

    @property
    def card_count(self) -> int:
        return len(self.cards)

    @property
    def word_count(self) -> int:
        return len(self.words)


def detect_cards(
    words: Iterable[WordToken],
    text: str = "",
    config: Optional[DetectionConfig] = None,
    rng: Optional[random.Random] = None
) -> List[BingoCard]:
    """
    Recover bingo cards from OCR word tokens.

    Args:
        words: OCR word tokens with pixel bounding boxes
        text: Raw OCR text (diagnostics only)
        config: Detection thresholds (defaults if None)
        rng: Random source for synthesized cells

    Returns:
        Cards numbered from 1 in top-to-bottom discovery order
    """
    config = config or DetectionConfig()

    rows = cluster_rows(words, config.row_tolerance, text)
    cards = build_cards(segment_rows(rows, config), config, rng)

    logger.info(f"Detected {len(cards)} cards from {len(rows)} rows")
    return cards


def build_cards(
    candidates: Iterable[CardCandidate],
    config: Optional[DetectionConfig] = None,
    rng: Optional[random.Random] = None
) -> List[BingoCard]:
    """
    Reconstruct every candidate with enough rows, numbering cards from 1.

    Args:
        candidates: Card candidates in scan order
        config: Detection thresholds (defaults if None)
        rng: Random source for synthesized cells

    Returns:
        Cards in candidate order
    """
    config = config or DetectionConfig()
    cards: List[BingoCard] = []
    for candidate in candidates:
        if not candidate.is_card(config.min_card_rows):
            logger.debug(f"Discarding candidate with {candidate.row_count} rows")
            continue
        cards.append(reconstruct_card(candidate, len(cards) + 1, config, rng))
    return cards


def run_detection(
    engine: OCREngine,
    image: Image.Image,
    config: Optional[DetectionConfig] = None,
    rng: Optional[random.Random] = None,
    progress: Optional[ProgressCallback] = None
) -> DetectionResult:
    """
    Run OCR on an image and detect its bingo cards.

    Never raises for OCR problems: an engine error, or a result with
    no words, yields the two demonstration cards instead.

    Args:
        engine: OCR engine to use
        image: Sheet image
        config: Detection thresholds (defaults if None)
        rng: Random source for synthesized cells
        progress: Optional callback receiving (percent, message)

    Returns:
        DetectionResult
    """
    def report(percent: int, message: str) -> None:
        if progress:
            progress(percent, message)

    start_time = time.perf_counter()
    report(5, "Initializing OCR...")

    try:
        report(25, f"Recognizing text ({engine.name})...")
        ocr_result = engine.recognize(image)
    except Exception as e:
        logger.warning(f"OCR failed, using demonstration cards: {e}")
        report(100, "OCR failed, using demo cards")
        return DetectionResult(
            cards=demo_cards(image.width),
            used_fallback=True,
            error=str(e),
            processing_time_ms=(time.perf_counter() - start_time) * 1000
        )

    report(85, "Analyzing results...")

    if not ocr_result.words:
        logger.warning("OCR returned no words, using demonstration cards")
        cards = demo_cards(image.width)
        used_fallback = True
    else:
        cards = detect_cards(ocr_result.words, ocr_result.text, config, rng)
        used_fallback = False

    report(100, f"Detection complete: {len(cards)} cards found")
    return DetectionResult(
        cards=cards,
        text=ocr_result.text,
        words=list(ocr_result.words),
        used_fallback=used_fallback,
        processing_time_ms=(time.perf_counter() - start_time) * 1000
    )
