"""
Game Session Module - State for one loaded sheet image.

The session owns the detected card collection and the set of called
numbers. Lifecycle:

    start_run()        new image: marks and cards dropped, run id bumped
    apply_detection()  cards from that run installed (stale runs ignored)
    toggle_number()    user calls / uncalls a number
    clear()            all calls removed, cards kept
    reset()            back to an empty session
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Set, Tuple

from bingo_scanner.detection.card import BingoCard

from .engine import WinResult, check_win, marked_count, parse_number

logger = logging.getLogger(__name__)


__all__ = [
    "CardStatus",
    "GameSession",
]


@dataclass(frozen=True)
class CardStatus:
    """
    Per-card progress snapshot for display.

    Attributes:
        card_id: Card id
        confidence: Detection confidence 0.0-1.0
        marked_count: FREE or called cells (0-25)
        win: First complete line type
    """
    card_id: int
    confidence: float
    marked_count: int
    win: WinResult

    @property
    def is_winner(self) -> bool:
        return self.win is not WinResult.NONE


class GameSession:
    """
    Session-scoped game state.

    Not thread-safe: all mutation happens on the UI thread. Background
    detection results are handed over through apply_detection() with the
    run id they were started under.
    """

    def __init__(self):
        self._cards: Tuple[BingoCard, ...] = ()
        self._marked: Set[int] = set()
        self._run_id = 0

    @property
    def cards(self) -> Tuple[BingoCard, ...]:
        """Current card collection (replaced as a whole, never edited)."""
        return self._cards

    @property
    def marked(self) -> FrozenSet[int]:
        """Snapshot of the called numbers."""
        return frozenset(self._marked)

    @property
    def run_id(self) -> int:
        return self._run_id

    def start_run(self) -> int:
        """
        Begin a new detection run for a newly loaded image.

        Drops cards and called numbers so nothing from the previous image
        survives, and invalidates any detection still in flight.

        Returns:
            Id to pass back to apply_detection()
        """
        self._run_id += 1
        self._cards = ()
        self._marked.clear()
        logger.debug(f"Started detection run {self._run_id}")
        return self._run_id

    def is_current(self, run_id: int) -> bool:
        return run_id == self._run_id

    def apply_detection(self, run_id: int, cards: Iterable[BingoCard]) -> bool:
        """
        Install the cards produced by a detection run.

        Args:
            run_id: Id returned by start_run() when the run began
            cards: Detected cards

        Returns:
            True if installed, False if the run was superseded
        """
        if not self.is_current(run_id):
            logger.info(f"Discarding result of stale detection run {run_id} (current: {self._run_id})")
            return False
        self._cards = tuple(cards)
        logger.info(f"Run {run_id}: {len(self._cards)} cards ready")
        return True

    def toggle_number(self, value) -> bool:
        """
        Call or uncall a number.

        Invalid input (out of 1-75, non-integer) is ignored.

        Args:
            value: Number as int or digit string

        Returns:
            True if the called set changed
        """
        number = parse_number(value)
        if number is None:
            logger.debug(f"Ignoring invalid number: {value!r}")
            return False

        if number in self._marked:
            self._marked.remove(number)
            logger.debug(f"Uncalled {number}")
        else:
            self._marked.add(number)
            logger.debug(f"Called {number}")
        return True

    def is_marked(self, number: int) -> bool:
        return number in self._marked

    def clear(self) -> None:
        """Remove all called numbers, keep the cards."""
        self._marked.clear()

    def reset(self) -> None:
        """Drop cards and called numbers. The run id is kept."""
        self._cards = ()
        self._marked.clear()

    def called_numbers(self) -> List[int]:
        """Called numbers in ascending order."""
        return sorted(self._marked)

    def check_win(self, card: BingoCard) -> WinResult:
        return check_win(card, self._marked)

    def card_status(self) -> List[CardStatus]:
        """
        Progress for every card.

        Returns:
            One CardStatus per card, in card order
        """
        return [
            CardStatus(
                card_id=card.id,
                confidence=card.confidence,
                marked_count=marked_count(card, self._marked),
                win=check_win(card, self._marked),
            )
            for card in self._cards
        ]

    def winners(self) -> List[CardStatus]:
        """Status of every card that currently has a complete line."""
        return [status for status in self.card_status() if status.is_winner]
