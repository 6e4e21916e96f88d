"""
Resource Loader

Owns the four lazily loaded resources behind the word map:

- tokenizer:    the morphological analyzer (slow to build, deadline-bounded)
- coordinates:  word -> 2-D point table
- vocabulary:   the word -> index map (small; needed to decide plottability)
- embeddings:   the vector buffer, validated against the vocabulary

Nothing is loaded at construction time. Each capability pulls in only what
it needs: a run ensures tokenizer, coordinates and vocabulary; selecting a
point additionally ensures embeddings.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..config import Settings, settings as default_settings
from ..coords.table import CoordinateTable, parse_coordinates
from ..embeddings.similarity import SimilarityEngine
from ..embeddings.table import Vocabulary, build_embedding_table, parse_vocabulary
from ..text.analyzer import (
    AnalyzerFactory,
    JanomeAnalyzer,
    MorphologicalAnalyzer,
    AnalyzerBuilder,
)
from .fetcher import AssetFetcher
from .lazy import LazyResource

logger = logging.getLogger("wordmap.resources")


class ResourceLoader:
    """
    Process-wide holder of the lazily loaded word map resources.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        fetcher: Optional[AssetFetcher] = None,
        analyzer_factory: Optional[AnalyzerFactory] = None,
    ) -> None:
        self.config = config or default_settings
        self.fetcher = fetcher or AssetFetcher(
            base=self.config.asset_base,
            timeout=self.config.fetch_timeout,
        )
        self._analyzer_builder = AnalyzerBuilder(analyzer_factory or JanomeAnalyzer)

        self.tokenizer: LazyResource[MorphologicalAnalyzer] = LazyResource(
            "tokenizer", self._load_tokenizer
        )
        self.coordinates: LazyResource[CoordinateTable] = LazyResource(
            "coordinates", self._load_coordinates
        )
        self.vocabulary: LazyResource[Vocabulary] = LazyResource(
            "vocabulary", self._load_vocabulary
        )
        self.embeddings: LazyResource[SimilarityEngine] = LazyResource(
            "embeddings", self._load_embeddings
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ensure_tokenizer(self) -> MorphologicalAnalyzer:
        return await self.tokenizer.ensure()

    async def ensure_coordinates(self) -> CoordinateTable:
        return await self.coordinates.ensure()

    async def ensure_vocabulary(self) -> Vocabulary:
        return await self.vocabulary.ensure()

    async def ensure_embeddings(self) -> SimilarityEngine:
        return await self.embeddings.ensure()

    def states(self) -> Dict[str, Dict[str, Optional[str]]]:
        return {
            resource.name: resource.snapshot()
            for resource in (
                self.tokenizer,
                self.coordinates,
                self.vocabulary,
                self.embeddings,
            )
        }

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    async def _load_tokenizer(self) -> MorphologicalAnalyzer:
        return await self._analyzer_builder.build(self.config.tokenizer_timeout)

    async def _load_coordinates(self) -> CoordinateTable:
        text = await self.fetcher.fetch_text(self.config.coords_file)
        table = parse_coordinates(text)
        logger.info(
            "Loaded %d coordinates (%d rows dropped)",
            len(table),
            table.dropped_rows,
        )
        return table

    async def _load_vocabulary(self) -> Vocabulary:
        data = await self.fetcher.fetch_json(self.config.vocab_file)
        vocabulary = parse_vocabulary(data)
        logger.info("Loaded vocabulary of %d words", len(vocabulary))
        return vocabulary

    async def _load_embeddings(self) -> SimilarityEngine:
        vocabulary = await self.vocabulary.ensure()
        buffer = await self.fetcher.fetch_bytes(self.config.vectors_file)
        table = build_embedding_table(vocabulary, buffer, self.config.embedding_dim)
        logger.info("Loaded embedding table %r", table)
        return SimilarityEngine(vocabulary, table)
