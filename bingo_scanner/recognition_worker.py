"""
Recognition Worker Module for Bingo Sheet Scanner

Provides a background QThread worker that loads a sheet image, runs OCR
and card detection, and reports the result to the UI via Qt signals.
"""

import logging
from datetime import datetime
from typing import Optional

from PIL import Image, ImageOps
from PyQt5.QtCore import QThread, pyqtSignal

from bingo_scanner.detection import DetectionConfig, DetectionResult, run_detection
from bingo_scanner.ocr import OCREngine
from bingo_scanner.ocr.debug import save_debug_image, DEBUG_DIR


# Configure module logger
logger = logging.getLogger(__name__)


def load_sheet_image(path: str) -> Image.Image:
    """
    Load an image file as upright RGB.

    Phone photos carry their rotation in EXIF; applying it keeps OCR
    coordinates aligned with what the user sees.

    Args:
        path: Image file path

    Returns:
        RGB PIL Image

    Raises:
        OSError: If the file cannot be read or decoded
    """
    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        return img.convert("RGB")


class RecognitionWorker(QThread):
    """
    Background worker for one detection run.

    Every signal carries the run id the worker was created with so the
    receiver can drop results from a superseded run.

    Signals:
        progress_changed(int, int, str): run id, percent 0-100, status text
        image_loaded(int, object): run id, PIL Image
        cards_ready(int, object): run id, DetectionResult
        error_occurred(int, str): run id, message

    Example:
        worker = RecognitionWorker(run_id, "sheet.jpg", engine)
        worker.cards_ready.connect(on_cards_ready)
        worker.start()
    """

    progress_changed = pyqtSignal(int, int, str)
    image_loaded = pyqtSignal(int, object)
    cards_ready = pyqtSignal(int, object)
    error_occurred = pyqtSignal(int, str)

    def __init__(
        self,
        run_id: int,
        image_path: str,
        engine: OCREngine,
        config: Optional[DetectionConfig] = None,
        debug_mode: bool = False
    ):
        """
        Initialize the recognition worker.

        Args:
            run_id: Session run id for this image
            image_path: Path of the image to process
            engine: OCR engine to use
            config: Detection thresholds
            debug_mode: Save an annotated debug image after detection
        """
        super().__init__()
        self.run_id = run_id
        self.image_path = image_path
        self._engine = engine
        self._config = config
        self._debug_mode = debug_mode
        self._cancelled = False

    def run(self):
        """Load the image, run detection, emit the result."""
        logger.info(f"Run {self.run_id}: processing {self.image_path}")
        self.progress_changed.emit(self.run_id, 0, "Loading image...")

        try:
            image = load_sheet_image(self.image_path)
        except (OSError, ValueError) as e:
            logger.error(f"Run {self.run_id}: failed to load image: {e}")
            self.error_occurred.emit(self.run_id, f"Could not load image: {e}")
            return

        if self._cancelled:
            return
        self.image_loaded.emit(self.run_id, image)

        result = run_detection(
            self._engine,
            image,
            self._config,
            progress=self._report_progress
        )

        if self._cancelled:
            logger.debug(f"Run {self.run_id}: cancelled, dropping {result.card_count} cards")
            return

        if self._debug_mode:
            self._save_debug_image(image, result)

        self.cards_ready.emit(self.run_id, result)

    def _report_progress(self, percent: int, message: str) -> None:
        if not self._cancelled:
            self.progress_changed.emit(self.run_id, percent, message)

    def request_stop(self):
        """
        Suppress any further signals from this run.

        OCR cannot be interrupted mid-call; the thread finishes its
        current step and exits without emitting a result.
        """
        logger.debug(f"Run {self.run_id}: stop requested")
        self._cancelled = True

    def _save_debug_image(self, image: Image.Image, result: DetectionResult) -> Optional[str]:
        """
        Save the image annotated with OCR tokens and detected cards.

        Returns:
            Path to saved file, or None on failure
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        filepath = DEBUG_DIR / f"debug_{timestamp}.png"

        summary = f"Time: {result.processing_time_ms:.0f}ms"
        if result.used_fallback:
            summary += " (demo cards)"

        try:
            save_debug_image(image, result.words, result.cards, str(filepath), summary)
        except OSError as e:
            logger.warning(f"Failed to save debug image: {e}")
            return None

        logger.info(f"Debug image saved: {filepath}")
        return str(filepath)
