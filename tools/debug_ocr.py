"""
Diagnostic script to analyze card detection on a sheet image.
Prints the numeric rows, card candidates and reconstructed grids so
threshold problems (rows split or merged, cards joined) are visible.

Usage:
    python tools/debug_ocr.py sheet.jpg
    python tools/debug_ocr.py sheet.jpg --tolerance 25 --max-gap 120 --save
"""

import sys
import argparse
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bingo_scanner.detection import (
    DetectionConfig,
    cluster_rows,
    segment_rows,
    build_cards,
    COLUMN_LETTERS,
)
from bingo_scanner.ocr import create_engine, save_debug_image, OCRError, DEBUG_DIR
from bingo_scanner.recognition_worker import load_sheet_image


def analyze_image(image_path: str, config: DetectionConfig, engine_name: str, save: bool) -> int:
    """Run OCR and every detection stage on one image, printing each stage."""
    print(f"\n{'='*60}")
    print(f"Analyzing: {image_path}")
    print(f"{'='*60}")

    image = load_sheet_image(image_path)
    print(f"Image size: {image.width}x{image.height}")

    engine = create_engine(engine_name)
    try:
        ocr_result = engine.recognize(image)
    except OCRError as e:
        print(f"OCR failed: {e}")
        return 1

    print(f"OCR: {len(ocr_result.words)} words in {ocr_result.processing_time_ms:.0f}ms")

    rows = cluster_rows(ocr_result.words, config.row_tolerance, ocr_result.text)
    print(f"\n--- Rows ({len(rows)}) ---")
    print(f"{'Bucket':>6} {'Y':>6} {'N':>3}  Values")
    for row in rows:
        valid = config.min_row_tokens <= len(row) <= config.max_row_tokens
        flag = "" if valid else "  <-- skipped"
        print(f"{row.bucket:>6} {row.y:>6} {len(row):>3}  {row.values}{flag}")

    candidates = segment_rows(rows, config)
    print(f"\n--- Candidates ({len(candidates)}) ---")
    for index, candidate in enumerate(candidates):
        status = "card" if candidate.is_card(config.min_card_rows) else "discarded"
        ys = [row.y for row in candidate.rows]
        print(f"  {index}: {candidate.row_count} rows at y={ys} -> {status}")

    cards = build_cards(candidates, config)

    print(f"\n--- Cards ({len(cards)}) ---")
    for card in cards:
        pos = card.position
        print(f"Card {card.id}: confidence {card.confidence * 100:.0f}%, "
              f"position ({pos.x}, {pos.y}) {pos.width}x{pos.height}")
        print("   " + "  ".join(f"{letter:>2}" for letter in COLUMN_LETTERS))
        synthesized = set(card.synthesized)
        for r, row in enumerate(card.grid):
            cells = []
            for c, value in enumerate(row):
                mark = "*" if (r, c) in synthesized else " "
                cells.append(f"{value:>2}{mark}")
            print("   " + " ".join(cells))
        if synthesized:
            print("   (* = synthesized)")

    if save:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = DEBUG_DIR / f"debug_{timestamp}_{Path(image_path).stem}.png"
        save_debug_image(image, ocr_result.words, cards, str(output_path))
        print(f"\nDebug image saved: {output_path}")

    return 0


def main():
    parser = argparse.ArgumentParser(description="Analyze bingo card detection on an image")
    parser.add_argument("image", help="Sheet image path")
    parser.add_argument("--engine", default="tesseract", help="OCR engine (default: tesseract)")
    parser.add_argument("--tolerance", type=int, default=20, help="Row bucket size in px")
    parser.add_argument("--max-gap", type=int, default=100, help="Max gap between card rows in px")
    parser.add_argument("--save", action="store_true", help="Save an annotated debug image")
    args = parser.parse_args()

    config = DetectionConfig(row_tolerance=args.tolerance, max_row_gap=args.max_gap)
    return analyze_image(args.image, config, args.engine, args.save)


if __name__ == "__main__":
    sys.exit(main())
