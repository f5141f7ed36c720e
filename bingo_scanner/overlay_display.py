"""
Overlay Display Module for Bingo Sheet Scanner

Renders the loaded sheet image with card overlays: card outlines and
labels, FREE spaces, and called numbers. Geometry comes from
overlay_layout; this module only scales it to the widget and paints.
"""

import logging
import threading
from typing import List, Optional, Tuple

from PIL import Image

from PyQt5.QtWidgets import QWidget, QSizePolicy
from PyQt5.QtCore import Qt, QRectF, QPointF
from PyQt5.QtGui import QPainter, QColor, QPen, QFont, QImage, QPixmap

from bingo_scanner.overlay_layout import CardLayout, CellState

# Configure module logger
logger = logging.getLogger(__name__)


# Color constants - card outline and label (green)
OUTLINE_COLOR = QColor(0, 255, 0, 204)
LABEL_COLOR = QColor(0, 255, 0, 230)

# Cell fills (alpha comes from the opacity setting)
FREE_RGB = (255, 0, 0)       # Red
MARKED_RGB = (0, 100, 255)   # Blue
SYNTHESIZED_COLOR = QColor(255, 165, 0, 220)  # Orange, debug only
TEXT_COLOR = QColor(255, 255, 255)

BORDER_THICKNESS = 3                          # Card outline width in image pixels
CELL_INSET = 2                                # Gap between cell fill and cell edge
LABEL_FONT_PX = 16
FREE_FONT_PX = 12
NUMBER_FONT_PX = 14


def pil_to_qimage(image: Image.Image) -> QImage:
    """
    Convert a PIL image to a QImage that owns its pixel data.

    Args:
        image: PIL Image (any mode)

    Returns:
        QImage in RGBA8888 format
    """
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    # copy() detaches from the Python bytes buffer
    return qimage.copy()


def fit_transform(
    image_size: Tuple[int, int],
    widget_size: Tuple[int, int]
) -> Tuple[float, float, float]:
    """
    Scale and offset that fit an image inside a widget, keeping aspect ratio.

    Args:
        image_size: (width, height) of the image
        widget_size: (width, height) of the widget

    Returns:
        (scale, offset_x, offset_y)
    """
    img_w, img_h = image_size
    widget_w, widget_h = widget_size
    if img_w <= 0 or img_h <= 0:
        return 1.0, 0.0, 0.0
    scale = min(widget_w / img_w, widget_h / img_h)
    offset_x = (widget_w - img_w * scale) / 2
    offset_y = (widget_h - img_h * scale) / 2
    return scale, offset_x, offset_y


class SheetView(QWidget):
    """
    Widget showing the sheet image with the card overlay on top.

    The image is scaled to fit; the painter is transformed so that all
    overlay geometry is drawn in image pixel coordinates.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._pixmap: Optional[QPixmap] = None
        self._layouts: List[CardLayout] = []
        self._opacity: float = 0.8
        self._debug_mode: bool = False
        self._lock = threading.Lock()

        self.setMinimumSize(400, 300)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    def set_image(self, image: Optional[Image.Image]):
        """
        Set the sheet image.

        Args:
            image: PIL Image, or None to clear
        """
        with self._lock:
            self._pixmap = QPixmap.fromImage(pil_to_qimage(image)) if image is not None else None
            self._layouts = []
        self.update()

    def set_layouts(self, layouts: List[CardLayout], opacity: float):
        """
        Set the overlay to draw.

        Args:
            layouts: Card layouts (empty list hides the overlay)
            opacity: Fill opacity 0.1-1.0
        """
        with self._lock:
            self._layouts = list(layouts)
            self._opacity = opacity
        self.update()

    def set_debug_mode(self, enabled: bool):
        """Outline synthesized cells when enabled."""
        self._debug_mode = enabled
        self.update()

    def paintEvent(self, event):
        """Paint the image and overlay."""
        with self._lock:
            pixmap = self._pixmap
            layouts = self._layouts
            opacity = self._opacity

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        if pixmap is None:
            painter.setPen(QColor(120, 120, 120))
            painter.drawText(self.rect(), Qt.AlignCenter, "Load a bingo sheet image to begin")
            painter.end()
            return

        scale, offset_x, offset_y = fit_transform(
            (pixmap.width(), pixmap.height()),
            (self.width(), self.height())
        )
        painter.translate(offset_x, offset_y)
        painter.scale(scale, scale)
        painter.drawPixmap(0, 0, pixmap)

        for layout in layouts:
            self._paint_card(painter, layout, opacity)

        painter.end()

    def _paint_card(self, painter: QPainter, layout: CardLayout, opacity: float):
        """Draw one card's outline, label and cell fills."""
        outline = QRectF(*layout.outline.as_tuple())

        pen = QPen(OUTLINE_COLOR)
        pen.setWidth(BORDER_THICKNESS)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(outline)

        painter.setPen(LABEL_COLOR)
        painter.setFont(self._font(LABEL_FONT_PX))
        painter.drawText(QPointF(*layout.label_anchor), layout.label)

        alpha = int(round(opacity * 255))
        for cell in layout.cells:
            rect = QRectF(*cell.rect.as_tuple()).adjusted(
                CELL_INSET, CELL_INSET, -CELL_INSET, -CELL_INSET
            )

            if cell.state is CellState.FREE:
                painter.fillRect(rect, QColor(*FREE_RGB, alpha))
                painter.setPen(TEXT_COLOR)
                painter.setFont(self._font(FREE_FONT_PX))
                painter.drawText(rect, Qt.AlignCenter, "FREE")
            elif cell.state is CellState.MARKED:
                painter.fillRect(rect, QColor(*MARKED_RGB, alpha))
                painter.setPen(TEXT_COLOR)
                painter.setFont(self._font(NUMBER_FONT_PX))
                painter.drawText(rect, Qt.AlignCenter, str(cell.value))

            if self._debug_mode and cell.synthesized:
                dashed = QPen(SYNTHESIZED_COLOR)
                dashed.setWidth(2)
                dashed.setStyle(Qt.DashLine)
                painter.setPen(dashed)
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(rect)

    @staticmethod
    def _font(pixel_size: int) -> QFont:
        font = QFont("Arial")
        font.setBold(True)
        font.setPixelSize(pixel_size)
        return font
