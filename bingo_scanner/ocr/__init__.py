"""
OCR Module for Bingo Sheet Scanner

Pluggable OCR architecture returning word tokens with pixel bounding boxes.

Usage:
    from bingo_scanner.ocr import create_engine

    # Create an OCR engine (Tesseract)
    engine = create_engine()

    # Recognize an image
    result = engine.recognize(image)

    # Word tokens with bounding boxes
    for word in result.words:
        print(word.text, word.bbox)

Example with a custom Tesseract location:
    engine = create_engine("tesseract", tesseract_cmd="C:/Tesseract/tesseract.exe")
"""

# Public API - Result types
from .result import (
    BoundingBox,
    WordToken,
    OCRResult,
)

# Public API - Base class for custom engines
from .base import OCREngine, OCRError

# Public API - Factory functions
from .factory import (
    create_engine,
    register_engine,
    available_engines,
)

# Debug utilities
from .debug import DEBUG_DIR, save_debug_image, get_confidence_color

__all__ = [
    # Result types
    "BoundingBox",
    "WordToken",
    "OCRResult",
    # Base class
    "OCREngine",
    "OCRError",
    # Factory
    "create_engine",
    "register_engine",
    "available_engines",
    # Debug
    "DEBUG_DIR",
    "save_debug_image",
    "get_confidence_color",
]
