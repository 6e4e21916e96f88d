"""
Coordinate Table

Maps words to the precomputed 2-D points used for plotting. The table is
independent of the vocabulary: a word may have a point without a vector and
vice versa.

Source format: line-oriented text, the first non-blank line is a header,
every following non-blank line is `word,x,y`. Rows with an empty word or a
missing/non-finite coordinate are dropped silently; `dropped_rows` counts
them for diagnostics only.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, Iterator, NamedTuple, Optional

logger = logging.getLogger("wordmap.coords")

_LINE_SPLIT = re.compile(r"\r?\n")


class Point(NamedTuple):
    x: float
    y: float


class CoordinateTable:
    """Read-only word -> Point mapping."""

    def __init__(self, points: Dict[str, Point], dropped_rows: int = 0) -> None:
        self._points = dict(points)
        self.dropped_rows = dropped_rows

    def get(self, word: str) -> Optional[Point]:
        return self._points.get(word)

    def __contains__(self, word: object) -> bool:
        return word in self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"CoordinateTable(size={len(self)}, dropped_rows={self.dropped_rows})"


def _parse_finite(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_coordinates(text: str) -> CoordinateTable:
    """
    Parse the `word,x,y` source into a CoordinateTable.

    Extra columns are ignored. When a word appears twice the later row wins.
    """
    lines = [line for line in _LINE_SPLIT.split(text) if line.strip()]

    points: Dict[str, Point] = {}
    dropped = 0

    # lines[0] is the header
    for line in lines[1:]:
        fields = line.split(",")
        word = fields[0]
        x = _parse_finite(fields[1] if len(fields) > 1 else None)
        y = _parse_finite(fields[2] if len(fields) > 2 else None)

        if not word or x is None or y is None:
            dropped += 1
            continue

        points[word] = Point(x, y)

    if dropped:
        logger.debug("Dropped %d malformed coordinate rows", dropped)

    return CoordinateTable(points, dropped_rows=dropped)
