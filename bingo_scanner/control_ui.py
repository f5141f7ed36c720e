"""
Control UI Module for Bingo Sheet Scanner

Provides a PyQt5-based main window: image loading, number calling,
overlay controls, card status, a diagnostics panel, and the sheet view.
"""

from typing import List

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QLineEdit, QCheckBox, QSlider, QProgressBar, QListWidget, QListWidgetItem,
    QPlainTextEdit, QFileDialog, QSplitter
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QFont, QColor, QIntValidator

from bingo_scanner.game import CardStatus, MIN_NUMBER, MAX_NUMBER
from bingo_scanner.ocr.debug import get_confidence_color
from bingo_scanner.overlay_display import SheetView

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.tif *.tiff *.webp);;All files (*)"

WINNER_BACKGROUND = QColor("#e8f5e9")


class ControlWindow(QMainWindow):
    """
    Main window for the Bingo Sheet Scanner application.

    Emits signals for every user action; the Application controller
    owns the session and pushes state back through the set_* methods.
    """

    # Signals for the application controller
    load_requested = pyqtSignal(str)       # Image path chosen by the user
    number_submitted = pyqtSignal(str)     # Raw text from the number entry
    clear_requested = pyqtSignal()
    overlay_toggled = pyqtSignal(bool)
    opacity_changed = pyqtSignal(float)
    debug_toggled = pyqtSignal(bool)
    shutdown_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self._init_ui()

    def _init_ui(self):
        """Initialize the user interface components."""
        self.setWindowTitle("Bingo Sheet Scanner")
        self.resize(1200, 800)

        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        controls = QWidget()
        controls.setMinimumWidth(300)
        controls.setMaximumWidth(380)
        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(15, 15, 15, 15)
        controls.setLayout(layout)

        # Status label
        self.status_label = QLabel("Status: No image")
        status_font = QFont()
        status_font.setPointSize(10)
        status_font.setBold(True)
        self.status_label.setFont(status_font)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        # Load button
        self.load_button = QPushButton("LOAD BINGO SHEET")
        self.load_button.setMinimumHeight(45)
        button_font = QFont()
        button_font.setPointSize(11)
        button_font.setBold(True)
        self.load_button.setFont(button_font)
        self.load_button.clicked.connect(self._on_load_clicked)
        layout.addWidget(self.load_button)

        # Progress bar (hidden unless processing)
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        layout.addSpacing(5)

        # Number calling
        call_layout = QHBoxLayout()
        self.number_input = QLineEdit()
        self.number_input.setPlaceholderText(f"Number ({MIN_NUMBER}-{MAX_NUMBER})")
        self.number_input.setValidator(QIntValidator(0, 99, self))
        self.number_input.returnPressed.connect(self._on_toggle_clicked)
        call_layout.addWidget(self.number_input, 1)

        self.toggle_button = QPushButton("Toggle")
        self.toggle_button.clicked.connect(self._on_toggle_clicked)
        call_layout.addWidget(self.toggle_button)

        self.clear_button = QPushButton("Clear")
        self.clear_button.setObjectName("clearButton")
        self.clear_button.clicked.connect(self.clear_requested.emit)
        call_layout.addWidget(self.clear_button)
        layout.addLayout(call_layout)

        self.called_label = QLabel("Called: None")
        self.called_label.setWordWrap(True)
        layout.addWidget(self.called_label)

        # Overlay controls
        self.overlay_checkbox = QCheckBox("Show Overlay")
        self.overlay_checkbox.setChecked(True)
        self.overlay_checkbox.toggled.connect(self.overlay_toggled.emit)
        layout.addWidget(self.overlay_checkbox)

        opacity_layout = QHBoxLayout()
        opacity_layout.addWidget(QLabel("Opacity:"))
        self.opacity_slider = QSlider(Qt.Horizontal)
        self.opacity_slider.setRange(1, 10)  # tenths, 0.1-1.0
        self.opacity_slider.setValue(8)
        self.opacity_slider.valueChanged.connect(self._on_opacity_changed)
        opacity_layout.addWidget(self.opacity_slider, 1)
        self.opacity_label = QLabel("80%")
        opacity_layout.addWidget(self.opacity_label)
        layout.addLayout(opacity_layout)

        self.debug_checkbox = QCheckBox("Debug")
        self.debug_checkbox.toggled.connect(self._on_debug_toggled)
        layout.addWidget(self.debug_checkbox)

        # Card status
        cards_title = QLabel("Card Status")
        cards_title.setFont(button_font)
        layout.addWidget(cards_title)
        self.card_list = QListWidget()
        layout.addWidget(self.card_list, 1)

        # Diagnostics panel (debug log + raw OCR text)
        self.debug_panel = QPlainTextEdit()
        self.debug_panel.setReadOnly(True)
        self.debug_panel.setFont(QFont("Courier New", 8))
        self.debug_panel.setVisible(False)
        layout.addWidget(self.debug_panel, 1)

        splitter.addWidget(controls)

        self.sheet_view = SheetView()
        splitter.addWidget(self.sheet_view)
        splitter.setStretchFactor(1, 1)

        self.set_cards_available(False)
        self._apply_styles()

    def _apply_styles(self):
        """Apply clean, minimal styling to the window."""
        style = """
            QMainWindow {
                background-color: #f5f5f5;
            }
            QPushButton {
                background-color: #4CAF50;
                color: white;
                border: none;
                border-radius: 5px;
                padding: 8px;
            }
            QPushButton:hover {
                background-color: #45a049;
            }
            QPushButton:pressed {
                background-color: #3d8b40;
            }
            QPushButton:disabled {
                background-color: #cccccc;
                color: #666666;
            }
            QPushButton#clearButton {
                background-color: #757575;
            }
            QLabel {
                color: #333333;
            }
        """
        self.setStyleSheet(style)

    def _on_load_clicked(self):
        """Ask for an image file and request loading it."""
        path, _ = QFileDialog.getOpenFileName(self, "Open Bingo Sheet", "", IMAGE_FILTER)
        if path:
            self.load_requested.emit(path)

    def _on_toggle_clicked(self):
        """Submit the entered number and clear the entry."""
        self.number_submitted.emit(self.number_input.text())
        self.number_input.clear()

    def _on_opacity_changed(self, value: int):
        self.opacity_label.setText(f"{value * 10}%")
        self.opacity_changed.emit(value / 10.0)

    def _on_debug_toggled(self, enabled: bool):
        self.debug_panel.setVisible(enabled)
        self.debug_toggled.emit(enabled)

    def set_status(self, status: str):
        """
        Update the status label.

        Args:
            status: Status text to display (e.g., "Ready", "Error: message")
        """
        self.status_label.setText(f"Status: {status}")

        if status.lower().startswith("error"):
            self.status_label.setStyleSheet("color: #d32f2f;")
        elif status.lower().startswith("bingo"):
            self.status_label.setStyleSheet("color: #4CAF50;")
        else:
            self.status_label.setStyleSheet("color: #333333;")

    def set_progress(self, percent: int, message: str):
        """
        Show detection progress.

        Args:
            percent: 0-100
            message: Progress text
        """
        self.progress_bar.setValue(percent)
        if message:
            self.set_status(message)

    def set_processing(self, processing: bool):
        """
        Toggle the processing state.

        Args:
            processing: True while a detection run is active
        """
        self.progress_bar.setVisible(processing)
        if processing:
            self.progress_bar.setValue(0)
            self.set_cards_available(False)

    def set_cards_available(self, available: bool):
        """Enable the game controls only when there are cards to play."""
        for widget in (self.number_input, self.toggle_button, self.clear_button):
            widget.setEnabled(available)

    def set_overlay_settings(self, visible: bool, opacity: float):
        """Initialize the overlay controls from saved settings."""
        self.overlay_checkbox.setChecked(visible)
        self.opacity_slider.setValue(int(round(opacity * 10)))

    def set_debug_enabled(self, enabled: bool):
        """Initialize the debug checkbox and panel from settings."""
        self.debug_checkbox.setChecked(enabled)
        self.debug_panel.setVisible(enabled)

    def set_called_numbers(self, numbers: List[int]):
        """
        Show the called numbers.

        Args:
            numbers: Called numbers in ascending order
        """
        text = ", ".join(str(n) for n in numbers) if numbers else "None"
        self.called_label.setText(f"Called: {text}")

    def set_card_status(self, statuses: List[CardStatus]):
        """
        Rebuild the card status list.

        Args:
            statuses: One CardStatus per card
        """
        self.card_list.clear()
        for status in statuses:
            lines = [
                f"Card #{status.card_id}" + ("   BINGO!" if status.is_winner else ""),
                f"Confidence: {round(status.confidence * 100)}%",
                f"Marked: {status.marked_count}/25",
            ]
            if status.is_winner:
                lines.append(f"Win: {status.win.value}")

            item = QListWidgetItem("\n".join(lines))
            item.setForeground(QColor(get_confidence_color(status.confidence)))
            if status.is_winner:
                item.setBackground(WINNER_BACKGROUND)
                item.setForeground(QColor("#2e7d32"))
            self.card_list.addItem(item)

    def append_debug(self, message: str):
        """Append a line to the diagnostics panel."""
        self.debug_panel.appendPlainText(message)

    def clear_debug(self):
        self.debug_panel.clear()

    def closeEvent(self, event):
        """
        Handle window close event.

        Emits shutdown_requested signal before closing to allow
        graceful cleanup of worker threads.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()
