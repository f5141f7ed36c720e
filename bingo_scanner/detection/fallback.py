"""
Demonstration Cards - Fixed cards used when recognition is unavailable.
"""

from typing import List, Optional

from .card import BingoCard, Rect


DEMO_CONFIDENCE = 0.9
DEMO_CARD_SIZE = 200

DEMO_GRIDS = (
    (
        (12, 27, 41, 59, 73),
        (8, 19, 34, 52, 68),
        (15, 25, 0, 47, 61),
        (3, 30, 44, 55, 70),
        (11, 22, 38, 49, 75),
    ),
    (
        (14, 26, 42, 58, 72),
        (7, 18, 33, 51, 67),
        (16, 24, 0, 46, 60),
        (4, 29, 43, 54, 69),
        (10, 21, 37, 48, 74),
    ),
)


def demo_cards(image_width: Optional[int] = None) -> List[BingoCard]:
    """
    Build the two demonstration cards.

    The second card sits at x=300, pulled left on narrow images so it
    stays inside the picture.

    Args:
        image_width: Width of the loaded image in pixels, if known

    Returns:
        Two BingoCard with confidence 0.9 and no source tokens
    """
    second_x = 300
    if image_width is not None:
        second_x = min(300, image_width - 250)

    positions = (
        Rect(50, 50, DEMO_CARD_SIZE, DEMO_CARD_SIZE),
        Rect(second_x, 50, DEMO_CARD_SIZE, DEMO_CARD_SIZE),
    )
    return [
        BingoCard(id=index + 1, position=position, grid=grid, confidence=DEMO_CONFIDENCE)
        for index, (grid, position) in enumerate(zip(DEMO_GRIDS, positions))
    ]
