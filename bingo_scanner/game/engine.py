"""
Game Engine Module - Called-number validation and win detection.

All functions are pure: the marked-number set is passed in explicitly
(normally GameSession.marked).
"""

import re
from enum import Enum
from typing import AbstractSet, Iterator, List, Optional, Tuple

from bingo_scanner.detection.card import BingoCard, GRID_SIZE, FREE


MIN_NUMBER = 1
MAX_NUMBER = 75

_DIGITS = re.compile(r"\d{1,2}", re.ASCII)


class WinResult(Enum):
    """
    Winning line type for a card.

    States:
        NONE: No complete line
        ROW: A full horizontal line
        COLUMN: A full vertical line
        DIAGONAL: Either full diagonal
    """
    NONE = "none"
    ROW = "row"
    COLUMN = "column"
    DIAGONAL = "diagonal"

    def __bool__(self) -> bool:
        return self is not WinResult.NONE


def parse_number(value) -> Optional[int]:
    """
    Convert user input to a callable bingo number.

    Accepts ints and strings of one or two decimal digits (surrounding
    whitespace allowed). Booleans, floats and anything else are rejected.

    Args:
        value: Raw input

    Returns:
        Number in 1-75, or None if the input is not a valid call
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _DIGITS.fullmatch(text):
            return None
        value = int(text)
    if not isinstance(value, int):
        return None
    if not MIN_NUMBER <= value <= MAX_NUMBER:
        return None
    return value


def is_covered(value: int, marked: AbstractSet[int]) -> bool:
    """A cell counts toward a line if it is FREE or its number was called."""
    return value == FREE or value in marked


def iter_lines(card: BingoCard) -> Iterator[Tuple[WinResult, List[int]]]:
    """
    Yield every line of a card in win-check order.

    Order: rows top to bottom, columns left to right, main diagonal,
    anti-diagonal.
    """
    grid = card.grid
    for row in grid:
        yield WinResult.ROW, list(row)
    for col in range(GRID_SIZE):
        yield WinResult.COLUMN, [grid[row][col] for row in range(GRID_SIZE)]
    yield WinResult.DIAGONAL, [grid[i][i] for i in range(GRID_SIZE)]
    yield WinResult.DIAGONAL, [grid[i][GRID_SIZE - 1 - i] for i in range(GRID_SIZE)]


def check_win(card: BingoCard, marked: AbstractSet[int]) -> WinResult:
    """
    Find the first complete line on a card.

    Only the first line found is reported when several are complete.

    Args:
        card: Card to check
        marked: Currently called numbers

    Returns:
        WinResult for the first complete line, WinResult.NONE otherwise
    """
    for line_type, values in iter_lines(card):
        if all(is_covered(value, marked) for value in values):
            return line_type
    return WinResult.NONE


def marked_count(card: BingoCard, marked: AbstractSet[int]) -> int:
    """
    Count cells that are FREE or called (0-25).

    Progress display only, not a win signal.
    """
    return sum(1 for row in card.grid for value in row if is_covered(value, marked))
