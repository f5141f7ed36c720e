"""
Bingo Card Module - Immutable card representation produced by detection.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .tokens import NumericToken


GRID_SIZE = 5
CENTER = (2, 2)
FREE = 0

# Non-FREE cells on a card
SCORING_CELLS = GRID_SIZE * GRID_SIZE - 1

# Expected value range per column: B, I, N, G, O
COLUMN_LETTERS = "BINGO"
COLUMN_RANGES: Tuple[Tuple[int, int], ...] = tuple(
    (15 * col + 1, 15 * col + 15) for col in range(GRID_SIZE)
)

Grid = Tuple[Tuple[int, ...], ...]


def in_column_range(col: int, value: int) -> bool:
    """Check whether value is a legal number for the given column."""
    low, high = COLUMN_RANGES[col]
    return low <= value <= high


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in image pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class BingoCard:
    """
    One detected bingo card.

    Uses tuple-of-tuples for the grid so a card can never be modified
    after detection. FREE cells hold 0.

    Attributes:
        id: Sequential id within one detection run (starts at 1)
        position: Padded bounding rectangle in image pixels
        grid: 5x5 values, grid[row][col], row 0 at the top
        confidence: Fraction of the 24 scoring cells backed by real tokens
        original_numbers: Tokens that contributed to this card
        synthesized: (row, col) cells filled with generated values
    """
    id: int
    position: Rect
    grid: Grid
    confidence: float
    original_numbers: Tuple[NumericToken, ...] = ()
    synthesized: Tuple[Tuple[int, int], ...] = field(default=())

    def __post_init__(self):
        if len(self.grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in self.grid):
            raise ValueError(f"Card {self.id}: grid must be {GRID_SIZE}x{GRID_SIZE}")
        if self.grid[CENTER[0]][CENTER[1]] != FREE:
            raise ValueError(f"Card {self.id}: center cell must be FREE")

    @classmethod
    def from_rows(cls, card_id: int, position: Rect, rows: List[List[int]],
                  confidence: float, **extra) -> 'BingoCard':
        """
        Create a BingoCard from a mutable 2D list.

        Args:
            card_id: Card id
            position: Card rectangle
            rows: 5x5 list of values
            confidence: Confidence score
            **extra: original_numbers / synthesized

        Returns:
            BingoCard with immutable grid
        """
        grid = tuple(tuple(row) for row in rows)
        return cls(id=card_id, position=position, grid=grid,
                   confidence=confidence, **extra)

    def to_list(self) -> List[List[int]]:
        return [list(row) for row in self.grid]
