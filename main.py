"""
Bingo Sheet Scanner - Entry Point

Launches the main window, runs card detection in a worker thread,
and keeps the overlay and card status in sync with called numbers.

Example:
    python main.py
    python main.py sheet.jpg --debug   # Load an image at start, save debug images
"""

import sys
import logging
import argparse
from typing import List, Optional

from PyQt5.QtWidgets import QApplication

from bingo_scanner.control_ui import ControlWindow
from bingo_scanner.recognition_worker import RecognitionWorker
from bingo_scanner.detection import DetectionConfig, DetectionResult
from bingo_scanner.game import GameSession
from bingo_scanner.ocr import OCREngine, create_engine, available_engines
from bingo_scanner.overlay_layout import compute_layouts
from bingo_scanner.settings import load_settings, save_settings, clamp_opacity


logger = logging.getLogger(__name__)


def setup_logging(debug: bool) -> None:
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("scanner.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Main application controller.

    Owns the game session and connects the window to the recognition
    worker. All session mutation happens here, on the UI thread.
    """

    def __init__(self, engine_name: Optional[str] = None, debug_mode: bool = False):
        """
        Initialize the application.

        Args:
            engine_name: OCR engine to use (overrides saved setting)
            debug_mode: Enable debug mode via CLI (overrides saved setting)
        """
        self.cli_debug_override = debug_mode
        self.window: Optional[ControlWindow] = None
        self.worker: Optional[RecognitionWorker] = None
        # Superseded workers still finishing their OCR call
        self._retired_workers: List[RecognitionWorker] = []
        self.session = GameSession()

        # Load persistent settings
        self.settings = load_settings()

        if self.cli_debug_override:
            self.debug_mode = True
        else:
            self.debug_mode = self.settings.get("debug_enabled", False)

        self.engine_name = engine_name or self.settings.get("engine_name", "tesseract")
        self.show_overlay = bool(self.settings.get("show_overlay", True))
        self.overlay_opacity = clamp_opacity(self.settings.get("overlay_opacity", 0.8))

        try:
            self.config = DetectionConfig.from_settings(self.settings)
        except ValueError as e:
            logger.warning(f"Invalid detection settings ({e}), using defaults")
            self.config = DetectionConfig()

        self.engine = self._create_engine()

    def _create_engine(self) -> OCREngine:
        """Create the configured OCR engine, falling back to the default type."""
        engine_config = {}
        if self.settings.get("tesseract_cmd"):
            engine_config["tesseract_cmd"] = self.settings["tesseract_cmd"]
        try:
            return create_engine(self.engine_name, **engine_config)
        except ValueError as e:
            logger.warning(f"{e}; using tesseract")
            return create_engine("tesseract", **engine_config)

    def setup(self):
        """Set up the UI and connect signals."""
        self.window = ControlWindow()

        self.window.load_requested.connect(self.load_image)
        self.window.number_submitted.connect(self._on_number_submitted)
        self.window.clear_requested.connect(self._on_clear)
        self.window.overlay_toggled.connect(self._on_overlay_toggled)
        self.window.opacity_changed.connect(self._on_opacity_changed)
        self.window.debug_toggled.connect(self._on_debug_toggled)
        self.window.shutdown_requested.connect(self._on_shutdown)

        # Initialize UI state from settings
        self.window.set_overlay_settings(self.show_overlay, self.overlay_opacity)
        self.window.set_debug_enabled(self.debug_mode)
        self.window.sheet_view.set_debug_mode(self.debug_mode)

        logger.info(f"Application initialized, OCR engine: {self.engine.name} "
                    f"(available: {', '.join(available_engines())})")

    def load_image(self, path: str):
        """
        Start a detection run for a new image.

        Any run still in flight is superseded and the called numbers
        are reset.
        """
        self._stop_worker()

        run_id = self.session.start_run()
        logger.info(f"Loading {path} (run {run_id})")

        self.window.set_processing(True)
        self.window.clear_debug()
        self.window.append_debug(f"File selected: {path}")
        self.window.sheet_view.set_image(None)
        self._refresh()

        self.worker = RecognitionWorker(
            run_id, path, self.engine, self.config, debug_mode=self.debug_mode
        )
        self.worker.progress_changed.connect(self._on_progress)
        self.worker.image_loaded.connect(self._on_image_loaded)
        self.worker.cards_ready.connect(self._on_cards_ready)
        self.worker.error_occurred.connect(self._on_worker_error)
        self.worker.start()

    def _stop_worker(self):
        """Detach from the current worker; its late results are ignored."""
        if self.worker is None:
            return
        self.worker.request_stop()
        for signal in (self.worker.progress_changed, self.worker.image_loaded,
                       self.worker.cards_ready, self.worker.error_occurred):
            signal.disconnect()
        if self.worker.isRunning():
            # Keep a reference until the thread exits; Qt aborts if a running QThread is destroyed
            logger.debug(f"Run {self.worker.run_id} still running, result will be dropped")
            retired = self.worker
            self._retired_workers.append(retired)
            retired.finished.connect(lambda: self._release_worker(retired))
        self.worker = None

    def _release_worker(self, worker: RecognitionWorker):
        if worker in self._retired_workers:
            self._retired_workers.remove(worker)

    def _on_progress(self, run_id: int, percent: int, message: str):
        if not self.session.is_current(run_id):
            return
        self.window.set_progress(percent, message)
        self.window.append_debug(f"[{percent:3d}%] {message}")

    def _on_image_loaded(self, run_id: int, image):
        if not self.session.is_current(run_id):
            return
        self.window.sheet_view.set_image(image)
        self.window.append_debug(f"Image dimensions: {image.width}x{image.height}")

    def _on_cards_ready(self, run_id: int, result: DetectionResult):
        """Install detected cards if the run is still current."""
        if not self.session.apply_detection(run_id, result.cards):
            return

        self.window.set_processing(False)
        self.window.set_cards_available(bool(result.cards))

        if result.used_fallback:
            reason = result.error or "no words recognized"
            self.window.set_status(f"OCR unavailable ({reason}), showing demo cards")
        else:
            self.window.set_status(f"Detected {result.card_count} bingo cards")

        self.window.append_debug(
            f"OCR: {result.word_count} words, {result.card_count} cards, "
            f"{result.processing_time_ms:.0f}ms"
        )
        for card in result.cards:
            self.window.append_debug(
                f"Card {card.id}: confidence {card.confidence * 100:.0f}%, "
                f"{len(card.synthesized)} synthesized cells"
            )
            for row in card.grid:
                self.window.append_debug("  " + " ".join(f"{v:2d}" for v in row))
        if result.text:
            self.window.append_debug("--- OCR text ---")
            self.window.append_debug(result.text)

        self._refresh()

    def _on_worker_error(self, run_id: int, message: str):
        if not self.session.is_current(run_id):
            return
        logger.error(f"Worker error: {message}")
        self.window.set_processing(False)
        self.window.set_status(f"Error: {message}")
        self.window.append_debug(f"Error: {message}")

    def _on_number_submitted(self, text: str):
        if self.session.toggle_number(text):
            self._refresh()

    def _on_clear(self):
        self.session.clear()
        self._refresh()

    def _on_overlay_toggled(self, visible: bool):
        self.show_overlay = visible
        self.settings["show_overlay"] = visible
        save_settings(self.settings)
        self._refresh()

    def _on_opacity_changed(self, opacity: float):
        self.overlay_opacity = clamp_opacity(opacity)
        self.settings["overlay_opacity"] = self.overlay_opacity
        save_settings(self.settings)
        self._refresh()

    def _on_debug_toggled(self, enabled: bool):
        """Handle debug checkbox toggle from UI."""
        logger.info(f"Debug mode toggled: {enabled}")
        self.debug_mode = enabled
        self.window.sheet_view.set_debug_mode(enabled)

        # Save to persistent settings (only if not CLI override)
        if not self.cli_debug_override:
            self.settings["debug_enabled"] = enabled
            save_settings(self.settings)

    def _refresh(self):
        """Push session state to the overlay, card list and labels."""
        marked = self.session.marked
        layouts = compute_layouts(self.session.cards, marked, self.show_overlay)
        self.window.sheet_view.set_layouts(layouts, self.overlay_opacity)

        self.window.set_card_status(self.session.card_status())
        self.window.set_called_numbers(self.session.called_numbers())

        winners = self.session.winners()
        if winners:
            names = ", ".join(f"#{s.card_id} ({s.win.value})" for s in winners)
            self.window.set_status(f"BINGO! Card {names}")

    def _on_shutdown(self):
        """Handle window close."""
        logger.info("Shutdown requested")
        self._stop_worker()
        for worker in list(self._retired_workers):
            if not worker.wait(2000):
                logger.warning(f"Run {worker.run_id} did not stop gracefully, terminating")
                worker.terminate()
                worker.wait()

    def run(self, image_path: Optional[str] = None) -> int:
        """
        Show the window.

        Args:
            image_path: Image to load immediately, if any

        Returns:
            Exit code
        """
        self.window.show()
        if image_path:
            self.load_image(image_path)
        return 0


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Bingo Sheet Scanner - Detect bingo cards in a photo and mark called numbers"
    )
    parser.add_argument(
        "image",
        nargs="?",
        help="Image to load at start"
    )
    parser.add_argument(
        "--engine", "-e",
        default=None,
        help="OCR engine to use (default: saved setting, tesseract)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode (verbose log, annotated debug images)"
    )
    return parser.parse_args()


def main():
    """Initialize and run the Bingo Sheet Scanner application."""
    args = parse_args()
    setup_logging(args.debug)

    app = QApplication(sys.argv)

    application = Application(engine_name=args.engine, debug_mode=args.debug)
    application.setup()
    application.run(args.image)

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
