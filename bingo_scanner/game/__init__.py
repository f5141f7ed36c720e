"""
Game Package - Called numbers and win detection for detected cards.

Public API:
    - GameSession: Cards + called numbers for one loaded image
    - CardStatus: Per-card progress snapshot
    - WinResult: none / row / column / diagonal
    - check_win(): First complete line on a card
    - marked_count(): FREE or called cells on a card
    - parse_number(): Validate a called number

Usage:
    from bingo_scanner.game import GameSession

    session = GameSession()
    run_id = session.start_run()
    session.apply_detection(run_id, cards)
    session.toggle_number(12)
    for status in session.card_status():
        print(status.card_id, status.marked_count, status.win.value)
"""

from .engine import (
    WinResult,
    check_win,
    marked_count,
    parse_number,
    is_covered,
    MIN_NUMBER,
    MAX_NUMBER,
)
from .session import GameSession, CardStatus

__all__ = [
    "GameSession",
    "CardStatus",
    "WinResult",
    "check_win",
    "marked_count",
    "parse_number",
    "is_covered",
    "MIN_NUMBER",
    "MAX_NUMBER",
]
