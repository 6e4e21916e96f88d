from .analyzer import (
    AnalyzedToken,
    MorphologicalAnalyzer,
    JanomeAnalyzer,
    AnalyzerBuilder,
    build_analyzer,
)
from .filtering import TokenizeOptions, select_words, tokenize

__all__ = [
    "AnalyzedToken",
    "MorphologicalAnalyzer",
    "JanomeAnalyzer",
    "AnalyzerBuilder",
    "build_analyzer",
    "TokenizeOptions",
    "select_words",
    "tokenize",
]
