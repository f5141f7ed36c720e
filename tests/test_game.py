"""
Test script for game state and overlay layout

Uses a fixed card to test:
1. Number validation and toggling
2. Win detection and marked counts
3. GameSession run lifecycle
4. Overlay layout geometry

Usage:
    python tests/test_game.py
    pytest tests/
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bingo_scanner.detection import BingoCard, Rect, demo_cards
from bingo_scanner.game import (
    GameSession,
    WinResult,
    check_win,
    marked_count,
    parse_number,
)
from bingo_scanner.overlay_layout import (
    CellState,
    cell_rect,
    compute_card_layout,
    compute_layouts,
)


CARD = BingoCard(
    id=1,
    position=Rect(50, 50, 200, 200),
    grid=(
        (12, 27, 41, 59, 73),
        (8, 19, 34, 52, 68),
        (15, 25, 0, 47, 61),
        (3, 30, 44, 55, 70),
        (11, 22, 38, 49, 75),
    ),
    confidence=0.9,
)


def test_parse_number():
    """Only whole numbers 1-75 are valid calls."""
    print("\n" + "="*60)
    print("TEST: Number Validation")
    print("="*60)

    assert parse_number(1) == 1
    assert parse_number(75) == 75
    assert parse_number("12") == 12
    assert parse_number(" 7 ") == 7

    assert parse_number("07") == 7
    for value in [0, 76, -5, "abc", "", "5.5", 5.5, True, False, None, [12],
                  "100", "1" * 5000]:
        assert parse_number(value) is None, repr(value)

    print("  [PASS] Number validation tests")


def test_toggle_number():
    """Toggling twice restores the set; invalid input changes nothing."""
    print("\n" + "="*60)
    print("TEST: Toggle Number")
    print("="*60)

    session = GameSession()
    assert session.toggle_number(12)
    assert session.is_marked(12)
    assert session.toggle_number("12")
    assert session.marked == frozenset()

    session.toggle_number(40)
    session.toggle_number(3)
    for value in [0, 76, "abc", 5.5, True, "007", "9" * 5000]:
        assert not session.toggle_number(value)
    assert session.called_numbers() == [3, 40]

    print("  [PASS] Toggle tests")


def test_win_row():
    print("\n" + "="*60)
    print("TEST: Row Win")
    print("="*60)

    marked = {8, 19, 34, 52}
    assert check_win(CARD, marked) is WinResult.NONE
    marked.add(68)
    assert check_win(CARD, marked) is WinResult.ROW

    # Middle row needs only four calls thanks to the FREE space
    assert check_win(CARD, {15, 25, 47, 61}) is WinResult.ROW

    print("  [PASS] Row win tests")


def test_win_column():
    print("\n" + "="*60)
    print("TEST: Column Win")
    print("="*60)

    assert check_win(CARD, {12, 8, 15, 3, 11}) is WinResult.COLUMN
    assert check_win(CARD, {41, 34, 44, 38}) is WinResult.COLUMN

    print("  [PASS] Column win tests")


def test_win_diagonals():
    print("\n" + "="*60)
    print("TEST: Diagonal Win")
    print("="*60)

    assert check_win(CARD, {12, 19, 55, 75}) is WinResult.DIAGONAL
    assert check_win(CARD, {73, 52, 30, 11}) is WinResult.DIAGONAL
    assert not check_win(CARD, {73, 52, 30})

    print("  [PASS] Diagonal win tests")


def test_win_precedence():
    """Rows are reported before columns, columns before diagonals."""
    print("\n" + "="*60)
    print("TEST: Win Precedence")
    print("="*60)

    all_numbers = {value for row in CARD.grid for value in row if value}
    assert check_win(CARD, all_numbers) is WinResult.ROW

    column_and_diagonal = {12, 8, 15, 3, 11, 19, 55, 75}
    assert check_win(CARD, column_and_diagonal) is WinResult.COLUMN

    print("  [PASS] Win precedence tests")


def test_marked_count():
    print("\n" + "="*60)
    print("TEST: Marked Count")
    print("="*60)

    assert marked_count(CARD, set()) == 1
    assert marked_count(CARD, {12, 27, 99}) == 3
    all_numbers = {value for row in CARD.grid for value in row}
    assert marked_count(CARD, all_numbers) == 25

    print("  [PASS] Marked count tests")


def test_session_runs():
    """A new run clears state and results of older runs are ignored."""
    print("\n" + "="*60)
    print("TEST: Session Runs")
    print("="*60)

    session = GameSession()
    first = session.start_run()
    second = session.start_run()

    assert not session.apply_detection(first, [CARD])
    assert session.cards == ()

    assert session.apply_detection(second, demo_cards())
    assert [card.id for card in session.cards] == [1, 2]

    session.toggle_number(12)
    session.toggle_number(14)
    third = session.start_run()
    assert session.cards == ()
    assert session.marked == frozenset()
    assert session.is_current(third)

    print("  [PASS] Session run tests")


def test_session_clear_and_status():
    print("\n" + "="*60)
    print("TEST: Session Clear and Status")
    print("="*60)

    session = GameSession()
    session.apply_detection(session.start_run(), demo_cards())

    for number in (8, 19, 34, 52, 68):
        session.toggle_number(number)

    statuses = session.card_status()
    assert [s.card_id for s in statuses] == [1, 2]
    assert statuses[0].win is WinResult.ROW
    assert statuses[0].marked_count == 6
    assert statuses[0].confidence == 0.9
    assert not statuses[1].is_winner
    assert [s.card_id for s in session.winners()] == [1]

    session.clear()
    assert session.marked == frozenset()
    assert len(session.cards) == 2
    assert session.winners() == []

    session.reset()
    assert session.cards == ()

    print("  [PASS] Session clear and status tests")


def test_cell_rect():
    print("\n" + "="*60)
    print("TEST: Cell Geometry")
    print("="*60)

    rect = cell_rect(Rect(50, 50, 200, 200), 1, 2)
    assert rect.as_tuple() == (130, 90, 40, 40)

    rect = cell_rect(Rect(0, 0, 100, 50), 4, 4)
    assert rect.as_tuple() == (80, 40, 20, 10)

    print("  [PASS] Cell geometry tests")


def test_card_layout():
    print("\n" + "="*60)
    print("TEST: Card Layout")
    print("="*60)

    layout = compute_card_layout(CARD, {27, 75})

    assert layout.label == "Card 1"
    assert layout.label_anchor == (50, 45)
    assert layout.outline == CARD.position
    assert len(layout.cells) == 25
    assert layout.cell(2, 2).state is CellState.FREE
    assert layout.cell(0, 1).state is CellState.MARKED
    assert layout.cell(4, 4).state is CellState.MARKED
    assert layout.cell(0, 0).state is CellState.UNMARKED
    assert layout.cell(0, 1).value == 27

    print("  [PASS] Card layout tests")


def test_hidden_overlay():
    print("\n" + "="*60)
    print("TEST: Hidden Overlay")
    print("="*60)

    cards = demo_cards()
    assert compute_layouts(cards, set(), visible=False) == []
    assert len(compute_layouts(cards, set())) == 2

    print("  [PASS] Hidden overlay tests")


def main():
    """Run all game and layout tests."""
    tests = [
        test_parse_number,
        test_toggle_number,
        test_win_row,
        test_win_column,
        test_win_diagonals,
        test_win_precedence,
        test_marked_count,
        test_session_runs,
        test_session_clear_and_status,
        test_cell_rect,
        test_card_layout,
        test_hidden_overlay,
    ]
    for test in tests:
        test()
    print(f"\nAll {len(tests)} game tests passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
