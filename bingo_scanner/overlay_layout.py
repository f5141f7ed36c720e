"""
Overlay Layout Module - Geometry for drawing card overlays.

Pure functions: given cards and the called numbers, compute the card
outline, label anchor and per-cell rectangles in image pixels. The
renderer (overlay_display.SheetView) only scales and paints them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Sequence, Tuple

from bingo_scanner.detection.card import BingoCard, Rect, GRID_SIZE, FREE


# Label baseline sits this far above the card outline
LABEL_OFFSET = 5


class CellState(Enum):
    """How a renderer should style a cell."""
    FREE = "free"
    MARKED = "marked"
    UNMARKED = "unmarked"


@dataclass(frozen=True)
class CellLayout:
    """
    One grid cell on the image.

    Attributes:
        row: Grid row index
        col: Grid column index
        value: Cell value (0 = FREE)
        rect: Cell rectangle in image pixels
        state: FREE / MARKED / UNMARKED
        synthesized: True if the value was generated, not read
    """
    row: int
    col: int
    value: int
    rect: Rect
    state: CellState
    synthesized: bool = False


@dataclass(frozen=True)
class CardLayout:
    """
    Overlay geometry for one card.

    Attributes:
        card_id: Card id
        outline: Card rectangle (the card's position)
        label: Text for the card label
        label_anchor: (x, y) baseline position of the label
        cells: 25 cells, row by row
    """
    card_id: int
    outline: Rect
    label: str
    label_anchor: Tuple[float, float]
    cells: Tuple[CellLayout, ...]

    def cell(self, row: int, col: int) -> CellLayout:
        return self.cells[row * GRID_SIZE + col]


def cell_rect(position: Rect, row: int, col: int) -> Rect:
    """
    Rectangle of one grid cell inside a card rectangle.

    Args:
        position: Card rectangle
        row: Row index 0-4
        col: Column index 0-4

    Returns:
        Rect of width position.width/5 and height position.height/5
    """
    cell_width = position.width / GRID_SIZE
    cell_height = position.height / GRID_SIZE
    return Rect(
        x=position.x + col * cell_width,
        y=position.y + row * cell_height,
        width=cell_width,
        height=cell_height,
    )


def cell_state(value: int, marked: AbstractSet[int]) -> CellState:
    if value == FREE:
        return CellState.FREE
    if value in marked:
        return CellState.MARKED
    return CellState.UNMARKED


def compute_card_layout(card: BingoCard, marked: AbstractSet[int]) -> CardLayout:
    """
    Build the overlay geometry for one card.

    Args:
        card: Detected card
        marked: Currently called numbers

    Returns:
        CardLayout with 25 cells
    """
    synthesized = set(card.synthesized)
    cells = tuple(
        CellLayout(
            row=r,
            col=c,
            value=card.grid[r][c],
            rect=cell_rect(card.position, r, c),
            state=cell_state(card.grid[r][c], marked),
            synthesized=(r, c) in synthesized,
        )
        for r in range(GRID_SIZE)
        for c in range(GRID_SIZE)
    )
    return CardLayout(
        card_id=card.id,
        outline=card.position,
        label=f"Card {card.id}",
        label_anchor=(card.position.x, card.position.y - LABEL_OFFSET),
        cells=cells,
    )


def compute_layouts(
    cards: Sequence[BingoCard],
    marked: AbstractSet[int],
    visible: bool = True
) -> List[CardLayout]:
    """
    Build overlay geometry for every card.

    Args:
        cards: Detected cards
        marked: Currently called numbers
        visible: Overlay visibility; nothing is laid out when False

    Returns:
        One CardLayout per card, or an empty list when hidden
    """
    if not visible:
        return []
    return [compute_card_layout(card, marked) for card in cards]
