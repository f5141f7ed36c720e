"""
Test script for card detection

Uses synthetic OCR word tokens to test:
1. Row clustering
2. Card segmentation
3. Grid reconstruction
4. Full pipeline and demo-card fallback

Usage:
    python tests/test_detection.py
    pytest tests/
"""

import sys
import random
from pathlib import Path
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bingo_scanner.ocr import BoundingBox, WordToken, OCREngine, OCRError, OCRResult
from bingo_scanner.detection import (
    DetectionConfig,
    NumericToken,
    CardCandidate,
    cluster_rows,
    row_bucket,
    segment_rows,
    reconstruct_card,
    build_cards,
    detect_cards,
    run_detection,
    demo_cards,
    DEMO_GRIDS,
    COLUMN_RANGES,
)


# Sample card, columns in B/I/N/G/O ranges, center read as 0
SAMPLE_GRID = [
    [5, 20, 35, 50, 65],
    [1, 16, 31, 46, 61],
    [9, 24, 0, 54, 69],
    [15, 30, 45, 60, 75],
    [3, 18, 33, 48, 63],
]


def make_word(text: str, x: int, y: int, width: int = 20, height: int = 15) -> WordToken:
    """Create a word token with its top-left corner at (x, y)."""
    return WordToken(text=text, bbox=BoundingBox(x, y, x + width, y + height))


def make_row(values, y: int, x0: int = 100, spacing: int = 40):
    """Words for one printed row, left to right."""
    return [make_word(str(v), x0 + i * spacing, y) for i, v in enumerate(values)]


def make_card_words(grid, y0: int = 0, x0: int = 100, row_spacing: int = 40):
    words = []
    for r, values in enumerate(grid):
        words.extend(make_row(values, y0 + r * row_spacing, x0))
    return words


class FailingEngine(OCREngine):
    """Engine that always fails, like a missing Tesseract install."""

    @property
    def name(self) -> str:
        return "failing"

    def recognize(self, image):
        raise OCRError("tesseract not found")


class StaticEngine(OCREngine):
    """Engine returning a fixed result."""

    def __init__(self, words, text=""):
        self._result = OCRResult(text=text, words=list(words))

    @property
    def name(self) -> str:
        return "static"

    def recognize(self, image):
        return self._result


def test_numeric_tokens():
    """Only 1-2 digit words become numeric tokens."""
    print("\n" + "="*60)
    print("TEST: Numeric Tokens")
    print("="*60)

    assert NumericToken.from_word(make_word("7", 10, 20)) == NumericToken(7, 10, 20, 20, 15)
    assert NumericToken.from_word(make_word("42", 0, 0)).value == 42
    assert NumericToken.from_word(make_word("00", 0, 0)).value == 0

    for text in ["123", "B", "4a", "", " 5", "1.5", "-3", "٣"]:
        assert NumericToken.from_word(make_word(text, 0, 0)) is None, text

    print("  [PASS] Numeric token tests")


def test_row_bucket():
    """Buckets round half up."""
    print("\n" + "="*60)
    print("TEST: Row Buckets")
    print("="*60)

    assert row_bucket(0, 20) == 0
    assert row_bucket(9, 20) == 0
    assert row_bucket(10, 20) == 20
    assert row_bucket(29, 20) == 20
    assert row_bucket(50, 20) == 60

    print("  [PASS] Row bucket tests")


def test_cluster_rows():
    """Tokens group by bucket, sorted by x inside rows and by bucket across rows."""
    print("\n" + "="*60)
    print("TEST: Row Clustering")
    print("="*60)

    words = [
        make_word("30", 300, 102),
        make_word("B", 50, 100),       # non-numeric, dropped
        make_word("5", 100, 98),
        make_word("20", 200, 105),
        make_word("7", 150, 3),
        make_word("123", 10, 0),       # three digits, dropped
        make_word("61", 60, 1),
    ]
    rows = cluster_rows(words, tolerance=20)

    print(f"  Rows: {[(row.bucket, row.values) for row in rows]}")
    assert [row.bucket for row in rows] == [0, 100]
    assert rows[0].values == [61, 7]
    assert rows[1].values == [5, 20, 30]
    for row in rows:
        xs = [token.x for token in row.tokens]
        assert xs == sorted(xs)

    assert cluster_rows([]) == []

    print("  [PASS] Row clustering tests")


def test_segmentation_gap():
    """Three close rows then a distant row give a 3-row and a 1-row candidate."""
    print("\n" + "="*60)
    print("TEST: Segmentation Gap")
    print("="*60)

    words = []
    for y in (0, 40, 80, 300):
        words.extend(make_row([1, 16, 31, 46, 61], y))

    rows = cluster_rows(words)
    candidates = segment_rows(rows)

    print(f"  Candidate sizes: {[c.row_count for c in candidates]}")
    assert [c.row_count for c in candidates] == [3, 1]
    assert candidates[0].is_card()
    assert not candidates[1].is_card()

    cards = detect_cards(words, rng=random.Random(1))
    assert len(cards) == 1
    assert cards[0].id == 1

    print("  [PASS] Segmentation gap tests")


def test_segmentation_threshold():
    """A gap equal to max_row_gap starts a new candidate, one less does not."""
    print("\n" + "="*60)
    print("TEST: Segmentation Threshold")
    print("="*60)

    config = DetectionConfig(row_tolerance=1, max_row_gap=100)

    joined = cluster_rows(make_row([1, 2, 3], 0) + make_row([4, 5, 6], 99), 1)
    assert [c.row_count for c in segment_rows(joined, config)] == [2]

    split = cluster_rows(make_row([1, 2, 3], 0) + make_row([4, 5, 6], 100), 1)
    assert [c.row_count for c in segment_rows(split, config)] == [1, 1]

    print("  [PASS] Segmentation threshold tests")


def test_segmentation_skips_invalid_rows():
    """Rows with fewer than 3 or more than 6 tokens are ignored entirely."""
    print("\n" + "="*60)
    print("TEST: Invalid Rows")
    print("="*60)

    words = (
        make_row([1, 16, 31, 46, 61], 0)
        + make_row([2, 17], 40)                            # too short
        + make_row([3, 18, 32, 47, 62], 80)
        + make_row([1, 2, 3, 4, 5, 6, 7], 120, spacing=30)  # too long
        + make_row([4, 19, 33, 48, 63], 160)
    )
    candidates = segment_rows(cluster_rows(words))

    assert len(candidates) == 1
    assert [row.y for row in candidates[0].rows] == [0, 80, 160]

    print("  [PASS] Invalid row tests")


def test_reconstruct_full_card():
    """A fully read card keeps every value and is fully confident."""
    print("\n" + "="*60)
    print("TEST: Full Card Reconstruction")
    print("="*60)

    words = make_card_words(SAMPLE_GRID)
    candidate = segment_rows(cluster_rows(words))[0]
    card = reconstruct_card(candidate, 1, rng=random.Random(0))

    assert card.to_list() == SAMPLE_GRID
    assert card.synthesized == ()
    assert card.confidence == 1.0
    assert len(card.original_numbers) == 25

    # Tokens span x 100..280, y 0..175; padded by 10 on each side
    assert card.position.as_tuple() == (90, -10, 200, 195)

    print(f"  Position: {card.position}")
    print("  [PASS] Full card tests")


def test_reconstruct_partial_card():
    """Missing cells are synthesized inside their column range."""
    print("\n" + "="*60)
    print("TEST: Partial Card Reconstruction")
    print("="*60)

    words = make_card_words(SAMPLE_GRID[:3])
    candidate = segment_rows(cluster_rows(words))[0]
    card = reconstruct_card(candidate, 4, rng=random.Random(7))

    assert card.id == 4
    assert card.grid[:3] == tuple(tuple(row) for row in SAMPLE_GRID[:3])
    assert card.confidence == 15 / 24
    assert set(card.synthesized) == {(r, c) for r in (3, 4) for c in range(5)}
    for r, c in card.synthesized:
        low, high = COLUMN_RANGES[c]
        assert low <= card.grid[r][c] <= high

    print(f"  Synthesized rows: {card.grid[3:]}")
    print("  [PASS] Partial card tests")


def test_reconstruct_keeps_out_of_range_values():
    """Misreads stay visible; center is always FREE."""
    print("\n" + "="*60)
    print("TEST: Out-of-Range Values")
    print("="*60)

    grid = [row[:] for row in SAMPLE_GRID]
    grid[0][0] = 99   # not a B number
    grid[1][4] = 7    # not an O number
    grid[2][2] = 40   # a number printed/misread in the FREE space
    candidate = segment_rows(cluster_rows(make_card_words(grid)))[0]
    card = reconstruct_card(candidate, 1)

    assert card.grid[0][0] == 99
    assert card.grid[1][4] == 7
    assert card.grid[2][2] == 0

    grid[2][2] = 88
    candidate = segment_rows(cluster_rows(make_card_words(grid)))[0]
    assert reconstruct_card(candidate, 1).grid[2][2] == 0

    print("  [PASS] Out-of-range tests")


def test_reconstruct_extra_tokens():
    """Tokens past the fifth column or row are ignored but still counted."""
    print("\n" + "="*60)
    print("TEST: Extra Tokens")
    print("="*60)

    grid = [row + [99] for row in SAMPLE_GRID] + [[2, 17, 32, 47, 62]]
    candidate = segment_rows(cluster_rows(make_card_words(grid)))[0]
    card = reconstruct_card(candidate, 1)

    assert candidate.row_count == 6
    assert card.to_list() == SAMPLE_GRID
    assert card.confidence == 1.0

    print("  [PASS] Extra token tests")


def test_confidence_monotonic():
    """More genuine tokens never lower confidence, and it is capped at 1."""
    print("\n" + "="*60)
    print("TEST: Confidence")
    print("="*60)

    previous = 0.0
    for row_count in range(3, 6):
        for row_length in range(3, 6):
            grid = [row[:row_length] for row in SAMPLE_GRID[:row_count]]
            candidate = segment_rows(cluster_rows(make_card_words(grid)))[0]
            card = reconstruct_card(candidate, 1, rng=random.Random(0))
            assert card.confidence <= 1.0
            if row_length == 3:
                previous = 0.0
            assert card.confidence >= previous
            previous = card.confidence

    print("  [PASS] Confidence tests")


def test_card_invariants():
    """Every detected card is 5x5 with a FREE center and values in 0-99."""
    print("\n" + "="*60)
    print("TEST: Card Invariants")
    print("="*60)

    rng = random.Random(1234)
    for trial in range(20):
        words = []
        for r in range(rng.randint(3, 7)):
            count = rng.randint(3, 6)
            values = [rng.randint(0, 99) for _ in range(count)]
            words.extend(make_row(values, r * 40 + rng.randint(0, 5)))
        for card in detect_cards(words, rng=rng):
            assert len(card.grid) == 5
            assert all(len(row) == 5 for row in card.grid)
            assert card.grid[2][2] == 0
            assert all(0 <= v <= 99 for row in card.grid for v in row)

    print("  [PASS] Card invariant tests")


def test_detect_multiple_cards():
    """Two stacked cards get ids in top-to-bottom order."""
    print("\n" + "="*60)
    print("TEST: Multiple Cards")
    print("="*60)

    words = make_card_words(SAMPLE_GRID, y0=500) + make_card_words(SAMPLE_GRID, y0=0)
    cards = detect_cards(words, rng=random.Random(0))

    assert [card.id for card in cards] == [1, 2]
    assert cards[0].position.y < cards[1].position.y

    print("  [PASS] Multiple card tests")


def test_build_cards():
    """Short candidates are dropped and the rest numbered without gaps."""
    print("\n" + "="*60)
    print("TEST: Build Cards")
    print("="*60)

    words = (
        make_card_words(SAMPLE_GRID[:2], y0=0)
        + make_card_words(SAMPLE_GRID, y0=400)
        + make_card_words(SAMPLE_GRID[:3], y0=900)
    )
    candidates = segment_rows(cluster_rows(words))
    assert [c.row_count for c in candidates] == [2, 5, 3]

    cards = build_cards(candidates, rng=random.Random(0))
    assert [card.id for card in cards] == [1, 2]
    assert cards[0].to_list() == SAMPLE_GRID

    strict = build_cards(candidates, DetectionConfig(min_card_rows=4))
    assert len(strict) == 1

    print("  [PASS] Build cards tests")


def test_config_from_settings():
    """Thresholds come from settings and are validated."""
    print("\n" + "="*60)
    print("TEST: Detection Config")
    print("="*60)

    config = DetectionConfig.from_settings({"row_tolerance": "25", "max_row_gap": 120})
    assert config.row_tolerance == 25
    assert config.max_row_gap == 120
    assert config.min_row_tokens == 3

    for bad in ({"row_tolerance": 0}, {"min_row_tokens": 7}, {"max_row_gap": "wide"}):
        try:
            DetectionConfig.from_settings(bad)
        except ValueError:
            continue
        raise AssertionError(f"accepted invalid settings {bad}")

    print("  [PASS] Detection config tests")


def test_ocr_failure_fallback():
    """A failing engine yields exactly the two demonstration cards."""
    print("\n" + "="*60)
    print("TEST: OCR Failure Fallback")
    print("="*60)

    progress = []
    image = Image.new("RGB", (800, 600), "white")
    result = run_detection(FailingEngine(), image, progress=lambda p, m: progress.append(p))

    assert result.used_fallback
    assert "tesseract not found" in result.error
    assert len(result.cards) == 2
    for card, grid in zip(result.cards, DEMO_GRIDS):
        assert card.grid == grid
        assert card.confidence == 0.9
        assert card.original_numbers == ()
    assert [card.id for card in result.cards] == [1, 2]
    assert result.cards[1].position.x == 300
    assert progress[-1] == 100

    narrow = run_detection(FailingEngine(), Image.new("RGB", (400, 300)))
    assert narrow.cards[1].position.x == 150

    print("  [PASS] OCR failure fallback tests")


def test_empty_ocr_fallback():
    """No words at all also yields the demonstration cards."""
    print("\n" + "="*60)
    print("TEST: Empty OCR Fallback")
    print("="*60)

    result = run_detection(StaticEngine([]), Image.new("RGB", (800, 600)))
    assert result.used_fallback
    assert result.error is None
    assert [card.grid for card in result.cards] == list(DEMO_GRIDS)

    print("  [PASS] Empty OCR fallback tests")


def test_run_detection():
    """Real words go through the pipeline without fallback."""
    print("\n" + "="*60)
    print("TEST: Run Detection")
    print("="*60)

    words = make_card_words(SAMPLE_GRID) + [make_word("BINGO", 100, -40, 200, 30)]
    engine = StaticEngine(words, text="BINGO\n5 20 35 50 65")
    result = run_detection(engine, Image.new("RGB", (800, 600)), rng=random.Random(0))

    assert not result.used_fallback
    assert result.word_count == 26
    assert result.card_count == 1
    assert result.cards[0].to_list() == SAMPLE_GRID

    # Words that never form a card give no cards, not demo cards
    sparse = run_detection(StaticEngine([make_word("12", 0, 0)]), Image.new("RGB", (800, 600)))
    assert not sparse.used_fallback
    assert sparse.cards == []

    print("  [PASS] Run detection tests")


def test_demo_cards_default_width():
    cards = demo_cards()
    assert cards[1].position.x == 300
    assert all(card.grid[2][2] == 0 for card in cards)


def main():
    """Run all detection tests."""
    tests = [
        test_numeric_tokens,
        test_row_bucket,
        test_cluster_rows,
        test_segmentation_gap,
        test_segmentation_threshold,
        test_segmentation_skips_invalid_rows,
        test_reconstruct_full_card,
        test_reconstruct_partial_card,
        test_reconstruct_keeps_out_of_range_values,
        test_reconstruct_extra_tokens,
        test_confidence_monotonic,
        test_card_invariants,
        test_detect_multiple_cards,
        test_build_cards,
        test_config_from_settings,
        test_ocr_failure_fallback,
        test_empty_ocr_fallback,
        test_run_detection,
        test_demo_cards_default_width,
    ]
    for test in tests:
        test()
    print(f"\nAll {len(tests)} detection tests passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
