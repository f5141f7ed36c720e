"""
OCR Debug Utilities

Functions for saving annotated debug images and managing debug output.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from .result import WordToken

if TYPE_CHECKING:
    from bingo_scanner.detection.card import BingoCard

logger = logging.getLogger(__name__)


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

# Confidence thresholds for coloring
HIGH_CONFIDENCE = 0.95
MEDIUM_CONFIDENCE = 0.80


def _confidence_name(confidence: Optional[float]) -> str:
    if confidence is None:
        return "blue"
    if confidence >= HIGH_CONFIDENCE:
        return "green"
    elif confidence >= MEDIUM_CONFIDENCE:
        return "yellow"
    return "red"


def save_debug_image(
    image: Image.Image,
    words: Iterable[WordToken],
    cards: Sequence['BingoCard'],
    path: str,
    summary: str = ""
) -> None:
    """
    Save an annotated debug image showing OCR tokens and detected cards.

    Annotations include:
    - Box around every OCR word, colored by word confidence
    - Card rectangles colored by card confidence, with card id
    - Synthesized cells outlined in orange
    - Summary line

    Args:
        image: Original PIL Image
        words: OCR word tokens
        cards: Detected cards
        path: Output file path
        summary: Extra text appended to the summary line
    """
    DEBUG_DIR.mkdir(parents=True, exist_ok=True)

    debug_img = image.convert("RGB").copy()
    draw = ImageDraw.Draw(debug_img)

    # Try to load a font, fall back to default
    try:
        font = ImageFont.truetype("arial.ttf", 14)
        small_font = ImageFont.truetype("arial.ttf", 10)
    except OSError:
        font = ImageFont.load_default()
        small_font = font

    words = list(words)
    for word in words:
        box = word.bbox
        color = _confidence_name(word.confidence)
        draw.rectangle([box.x0, box.y0, box.x1, box.y1], outline=color, width=1)
        draw.text((box.x0, box.y1 + 1), word.text, fill=color, font=small_font)

    for card in cards:
        pos = card.position
        color = _confidence_name(card.confidence)
        draw.rectangle([pos.x, pos.y, pos.right, pos.bottom], outline=color, width=3)
        draw.text((pos.x, pos.y - 16), f"Card {card.id} ({card.confidence * 100:.0f}%)",
                  fill=color, font=font)

        cell_w = pos.width / 5
        cell_h = pos.height / 5
        for r, c in card.synthesized:
            x = pos.x + c * cell_w
            y = pos.y + r * cell_h
            draw.rectangle([x + 2, y + 2, x + cell_w - 2, y + cell_h - 2],
                           outline="orange", width=2)

    info_text = f"Words: {len(words)}, Cards: {len(cards)}"
    if summary:
        info_text = f"{info_text}, {summary}"
    draw.text((10, 10), info_text, fill="blue", font=font)

    debug_img.save(path, "PNG")
    logger.debug(f"Debug image written: {path}")

    _cleanup_debug_images()


def _cleanup_debug_images() -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not DEBUG_DIR.exists():
        return

    debug_files = sorted(
        DEBUG_DIR.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.debug(f"Could not remove {old_file}: {e}")


def get_confidence_color(confidence: float) -> str:
    """
    Get color code for confidence level.

    Args:
        confidence: Confidence value 0.0-1.0

    Returns:
        Hex color code string
    """
    if confidence >= HIGH_CONFIDENCE:
        return "#4CAF50"  # Green
    elif confidence >= MEDIUM_CONFIDENCE:
        return "#FFC107"  # Yellow
    else:
        return "#d32f2f"  # Red
