"""
Row Clustering Module - Groups OCR tokens into horizontal rows.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List

from bingo_scanner.ocr.result import WordToken

from .tokens import NumericToken, Row, numeric_tokens

logger = logging.getLogger(__name__)


def row_bucket(y: int, tolerance: int) -> int:
    """
    Quantize a y coordinate to its row bucket.

    Rounds half up: with tolerance 20, y=10 maps to 20 and y=9 to 0.

    Args:
        y: Top edge of the token in pixels
        tolerance: Bucket size in pixels

    Returns:
        Bucket value (a multiple of tolerance)
    """
    return int(math.floor(y / tolerance + 0.5)) * tolerance


def cluster_rows(words: Iterable[WordToken], tolerance: int = 20, text: str = "") -> List[Row]:
    """
    Group numeric word tokens into rows by y-bucket.

    Non-numeric tokens are dropped. Each row is sorted left to right,
    rows are sorted top to bottom.

    Args:
        words: OCR word tokens
        tolerance: Row bucket size in pixels
        text: Raw OCR text, only logged for diagnostics

    Returns:
        Ordered list of Row
    """
    words = list(words)
    tokens = numeric_tokens(words)

    buckets: Dict[int, List[NumericToken]] = defaultdict(list)
    for token in tokens:
        buckets[row_bucket(token.y, tolerance)].append(token)

    rows = [
        Row(bucket=bucket, tokens=tuple(sorted(members, key=lambda t: t.x)))
        for bucket, members in sorted(buckets.items())
    ]

    logger.debug(
        f"Clustered {len(tokens)}/{len(words)} numeric tokens into {len(rows)} rows "
        f"(tolerance={tolerance}px, text length={len(text)})"
    )
    return rows
