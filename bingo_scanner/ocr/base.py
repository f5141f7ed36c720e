"""
OCR Engine Base Interface

Abstract base class defining the OCR engine contract.
"""

from abc import ABC, abstractmethod
from PIL import Image

from .result import OCRResult


class OCRError(RuntimeError):
    """Raised when an OCR engine is unavailable or recognition fails."""


class OCREngine(ABC):
    """
    Abstract base class for OCR engines.

    All OCR implementations must inherit from this class and implement
    the recognize() method to extract word tokens from an image.
    """

    @abstractmethod
    def recognize(self, image: Image.Image) -> OCRResult:
        """
        Recognize text in an image.

        Args:
            image: PIL Image of the bingo sheet

        Returns:
            OCRResult containing:
            - text: str - raw recognized text
            - words: List[WordToken] - word tokens with pixel bounding boxes
            - processing_time_ms: float - processing duration

        Raises:
            OCRError: If the engine is unavailable or recognition fails
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Engine identifier.

        Returns:
            String name identifying this engine type (e.g., "tesseract")
        """
        pass

    def configure(self, **kwargs) -> None:
        """
        Configure engine parameters.

        Override in subclasses to support runtime configuration.
        Default implementation does nothing.

        Args:
            **kwargs: Engine-specific configuration options
        """
        pass
