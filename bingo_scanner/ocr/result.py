"""
OCR Result Dataclasses

Shared data structures returned by OCR engines.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class BoundingBox:
    """Word bounding box in image pixels (x0, y0) top-left, (x1, y1) bottom-right."""
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0


@dataclass(frozen=True)
class WordToken:
    """One OCR detection as reported by the engine."""
    text: str
    bbox: BoundingBox
    confidence: Optional[float] = None  # 0.0-1.0, diagnostics only


@dataclass
class OCRResult:
    """Complete OCR result for one image."""
    text: str                                             # Raw recognized text blob
    words: List[WordToken] = field(default_factory=list)  # Word-level detections
    processing_time_ms: float = 0.0                       # Time taken
