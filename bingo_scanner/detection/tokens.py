"""
Token Module - Numeric tokens and rows built from OCR word tokens.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from bingo_scanner.ocr.result import WordToken


# One or two ASCII digits and nothing else
NUMERIC_PATTERN = re.compile(r"\d{1,2}", re.ASCII)


@dataclass(frozen=True)
class NumericToken:
    """
    A word token whose text is a 1-2 digit number.

    Attributes:
        value: Parsed number (0-99)
        x: Left edge in image pixels
        y: Top edge in image pixels
        width: Box width in pixels
        height: Box height in pixels
    """
    value: int
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_word(cls, word: WordToken) -> Optional['NumericToken']:
        """
        Validate a word token and convert it.

        Args:
            word: OCR word token

        Returns:
            NumericToken, or None if the text is not exactly 1-2 digits
        """
        if not NUMERIC_PATTERN.fullmatch(word.text):
            return None
        box = word.bbox
        return cls(value=int(word.text), x=box.x0, y=box.y0,
                   width=box.width, height=box.height)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


def numeric_tokens(words: Iterable[WordToken]) -> List[NumericToken]:
    """Keep only the words that pass the digit-pattern check."""
    tokens = []
    for word in words:
        token = NumericToken.from_word(word)
        if token is not None:
            tokens.append(token)
    return tokens


@dataclass(frozen=True)
class Row:
    """
    Numeric tokens sharing one quantized y-bucket, ordered left to right.

    Attributes:
        bucket: Quantized y value that keyed this row
        tokens: Tokens sorted by ascending x
    """
    bucket: int
    tokens: Tuple[NumericToken, ...]

    @property
    def y(self) -> int:
        """Top of the left-most token; used for inter-row gaps."""
        return self.tokens[0].y

    @property
    def values(self) -> List[int]:
        return [token.value for token in self.tokens]

    def __len__(self) -> int:
        return len(self.tokens)
