"""
Token filtering: analyzer output -> ordered word list.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List

from pydantic import BaseModel, ConfigDict

from .analyzer import AnalyzedToken, MorphologicalAnalyzer, UNKNOWN_BASE_FORM


# noun, verb, adjective
CONTENT_POS: FrozenSet[str] = frozenset({"名詞", "動詞", "形容詞"})


class TokenizeOptions(BaseModel):
    pos_filter: bool = True
    unique_only: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)


def word_form(token: AnalyzedToken) -> str:
    """Base form when the analyzer knows one, surface form otherwise."""
    if token.base_form and token.base_form != UNKNOWN_BASE_FORM:
        return token.base_form
    return token.surface_form


def select_words(
    tokens: Iterable[AnalyzedToken],
    options: TokenizeOptions,
) -> List[str]:
    """
    Filter analyzer tokens down to words, preserving order.

    Blank word forms are always dropped. With `unique_only`, later repeats
    of a word are dropped too.
    """
    words: List[str] = []
    seen = set()

    for token in tokens:
        if options.pos_filter and token.pos not in CONTENT_POS:
            continue

        word = word_form(token)
        if not word or not word.strip():
            continue

        if options.unique_only:
            if word in seen:
                continue
            seen.add(word)

        words.append(word)

    return words


def tokenize(
    analyzer: MorphologicalAnalyzer,
    text: str,
    options: TokenizeOptions,
) -> List[str]:
    return select_words(analyzer.tokenize(text), options)
