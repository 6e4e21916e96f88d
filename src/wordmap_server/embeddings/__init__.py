"""
Embeddings Package

Vocabulary, embedding table and cosine similarity engine.
"""

from .table import (
    Vocabulary,
    EmbeddingTable,
    parse_vocabulary,
    build_embedding_table,
    load_embeddings,
)
from .similarity import SimilarityEngine

__all__ = [
    "Vocabulary",
    "EmbeddingTable",
    "parse_vocabulary",
    "build_embedding_table",
    "load_embeddings",
    "SimilarityEngine",
]
