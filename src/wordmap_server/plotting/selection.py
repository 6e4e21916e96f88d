"""
Plot Eligibility

A word is plotted only when it has both a coordinate and a vocabulary entry,
so every point drawn can later be ranked for similarity without a second
failure path. Plot completeness is traded for guaranteed interactivity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..coords.table import CoordinateTable
from ..core.errors import InsufficientInputError
from ..embeddings.table import Vocabulary


MIN_PLOT_WORDS = 2


@dataclass(frozen=True)
class PlotPoint:
    label: str
    x: float
    y: float


@dataclass(frozen=True)
class PlotSelection:
    words: List[str] = field(default_factory=list)
    points: List[PlotPoint] = field(default_factory=list)
    error: Optional[InsufficientInputError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def select_plottable(
    words: Sequence[str],
    coordinates: CoordinateTable,
    vocabulary: Vocabulary,
    min_words: int = MIN_PLOT_WORDS,
) -> PlotSelection:
    """
    Keep the words present in both tables, in input order.

    Fewer than `min_words` survivors is reported through
    `PlotSelection.error` with no words or points; it is never raised.
    """
    kept: List[str] = []
    points: List[PlotPoint] = []

    for word in words:
        point = coordinates.get(word)
        if point is None or word not in vocabulary:
            continue
        kept.append(word)
        points.append(PlotPoint(label=word, x=point.x, y=point.y))

    if len(kept) < min_words:
        return PlotSelection(error=InsufficientInputError(len(kept), min_words))

    return PlotSelection(words=kept, points=points)
