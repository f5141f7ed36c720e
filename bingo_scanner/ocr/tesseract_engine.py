"""
Tesseract OCR Engine

OCR implementation backed by the Tesseract binary through pytesseract.
Returns word-level tokens with pixel bounding boxes for card detection.
"""

import logging
import time
from typing import Dict, List, Optional

import cv2
import numpy as np
import pytesseract
from pytesseract import Output
from PIL import Image

from .base import OCREngine, OCRError
from .result import BoundingBox, OCRResult, WordToken

logger = logging.getLogger(__name__)


# Bingo sheets only carry digits and the column header letters
DEFAULT_WHITELIST = "0123456789BINGO"

# psm 6 = assume a single uniform block of text, oem 1 = LSTM only
DEFAULT_PSM = 6
DEFAULT_OEM = 1

# Tesseract "level" value for word entries in image_to_data output
WORD_LEVEL = 5


def _safe_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def words_from_data(data: Dict[str, List]) -> List[WordToken]:
    """
    Convert pytesseract image_to_data output into word tokens.

    Entries that are not words, have empty text, or carry a negative
    confidence (layout-only rows) are skipped.

    Args:
        data: Dictionary from image_to_data(output_type=Output.DICT)

    Returns:
        List of WordToken in the order Tesseract reported them
    """
    words = []
    count = len(data.get("text", []))
    levels = data.get("level", [WORD_LEVEL] * count)

    for i in range(count):
        text = str(data["text"][i] or "").strip()
        if not text or int(levels[i]) != WORD_LEVEL:
            continue

        conf = _safe_float(data.get("conf", ["-1"] * count)[i])
        if np.isnan(conf) or conf < 0:
            continue

        left = int(data["left"][i])
        top = int(data["top"][i])
        bbox = BoundingBox(
            x0=left,
            y0=top,
            x1=left + int(data["width"][i]),
            y1=top + int(data["height"][i]),
        )
        words.append(WordToken(text=text, bbox=bbox, confidence=conf / 100.0))

    return words


def text_from_data(data: Dict[str, List]) -> str:
    """Rebuild the raw text blob from image_to_data output, one line per Tesseract line."""
    lines: Dict[tuple, List[str]] = {}
    count = len(data.get("text", []))
    for i in range(count):
        text = str(data["text"][i] or "").strip()
        if not text:
            continue
        key = (
            int(data.get("block_num", [0] * count)[i]),
            int(data.get("par_num", [0] * count)[i]),
            int(data.get("line_num", [0] * count)[i]),
        )
        lines.setdefault(key, []).append(text)
    return "\n".join(" ".join(tokens) for _, tokens in sorted(lines.items()))


class TesseractOCREngine(OCREngine):
    """
    OCR engine using Tesseract.

    The image is converted to grayscale with OpenCV; no resizing is done
    so that returned bounding boxes stay in source image pixels.
    """

    def __init__(self):
        self._psm = DEFAULT_PSM
        self._oem = DEFAULT_OEM
        self._whitelist = DEFAULT_WHITELIST
        self._tesseract_cmd: Optional[str] = None

    @property
    def name(self) -> str:
        return "tesseract"

    def configure(self, **kwargs) -> None:
        """
        Configure engine parameters.

        Args:
            tesseract_cmd: Path to the tesseract executable
            psm: Page segmentation mode
            oem: OCR engine mode
            whitelist: Allowed characters
        """
        if kwargs.get("tesseract_cmd"):
            self._tesseract_cmd = str(kwargs["tesseract_cmd"])
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        if "psm" in kwargs:
            self._psm = int(kwargs["psm"])
        if "oem" in kwargs:
            self._oem = int(kwargs["oem"])
        if "whitelist" in kwargs:
            self._whitelist = str(kwargs["whitelist"])

    def _config_string(self) -> str:
        return (
            f"--oem {self._oem} --psm {self._psm} "
            f"-c tessedit_char_whitelist={self._whitelist}"
        )

    def recognize(self, image: Image.Image) -> OCRResult:
        start_time = time.perf_counter()

        gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)

        try:
            data = pytesseract.image_to_data(
                gray,
                output_type=Output.DICT,
                config=self._config_string()
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OCRError(f"Tesseract is not installed or not on PATH: {e}") from e
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            raise OCRError(f"Tesseract recognition failed: {e}") from e

        words = words_from_data(data)
        text = text_from_data(data)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(f"Tesseract found {len(words)} words in {elapsed_ms:.1f}ms")
        return OCRResult(text=text, words=words, processing_time_ms=elapsed_ms)
