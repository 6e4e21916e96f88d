"""
Similarity Engine

Cosine similarity over the embedding table, plus the ranking used when a
plotted word is selected.

Ranking is a plain linear scan over the candidate pool. The pool is one
page's plotted words, never the full vocabulary, so no index structure is
needed.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .table import EmbeddingTable, Vocabulary

logger = logging.getLogger("wordmap.similarity")


class SimilarityEngine:
    """
    Cosine similarity lookups keyed by vocabulary word or index.
    """

    def __init__(self, vocabulary: Vocabulary, table: EmbeddingTable) -> None:
        if len(vocabulary) != len(table):
            raise ValueError("Vocabulary and embedding table sizes differ.")

        self.vocabulary = vocabulary
        self.table = table
        self._norms = np.linalg.norm(table.matrix.astype(np.float64), axis=1)
        self.skipped_candidates = 0

    @property
    def zero_vector_count(self) -> int:
        return int((self._norms == 0.0).sum())

    def similarity(self, i: int, j: int) -> float:
        """
        Cosine similarity between the vectors at indices i and j.

        Returns exactly 0.0 when either vector has zero magnitude. The result
        is clipped to [-1, 1] to absorb float rounding.
        """
        a = self.table.vector(i).astype(np.float64)
        b = self.table.vector(j).astype(np.float64)

        norm_i = self._norms[i]
        norm_j = self._norms[j]
        if norm_i == 0.0 or norm_j == 0.0:
            return 0.0

        score = float(np.dot(a, b) / (norm_i * norm_j))
        return min(1.0, max(-1.0, score))

    def similarity_of(self, word_a: str, word_b: str) -> Optional[float]:
        """Word-level `similarity`; None when either word is unknown."""
        i = self.vocabulary.index_of(word_a)
        j = self.vocabulary.index_of(word_b)
        if i is None or j is None:
            return None
        return self.similarity(i, j)

    def top_similar(
        self,
        word: str,
        pool: Sequence[str],
        k: int = 10,
    ) -> List[Tuple[str, float]]:
        """
        Rank `pool` by similarity to `word`.

        The query word itself and any pool word missing from the vocabulary
        are left out. Ties keep their pool order. At most k pairs are
        returned, highest score first.
        """
        query = self.vocabulary.index_of(word)
        if query is None:
            return []

        scored: List[Tuple[str, float]] = []
        skipped = 0

        for candidate in pool:
            if candidate == word:
                continue
            index = self.vocabulary.index_of(candidate)
            if index is None:
                skipped += 1
                continue
            scored.append((candidate, self.similarity(query, index)))

        if skipped:
            self.skipped_candidates += skipped
            logger.debug("Skipped %d candidates missing from vocabulary", skipped)

        # sorted() is stable, so equal scores keep pool order
        scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
        return scored[:max(k, 0)]
