"""
Morphological Analyzer Adapter

The word map only needs three things from a token: its part of speech, its
surface text and its dictionary base form. `AnalyzedToken` fixes that
contract so the rest of the code never depends on the shape of a specific
analyzer library's token objects.

`JanomeAnalyzer` is the default implementation. Building it loads the
analyzer's dictionary, which is slow, so `AnalyzerBuilder` runs
construction in a worker thread under an explicit deadline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from janome.tokenizer import Tokenizer

from ..core.errors import ResourceLoadError, ToolingTimeoutError

logger = logging.getLogger("wordmap.analyzer")

# Janome (like MeCab/kuromoji) reports "*" when a token has no base form
UNKNOWN_BASE_FORM = "*"


@dataclass(frozen=True)
class AnalyzedToken:
    """One analyzer token: top-level POS tag, surface text, base form or None."""

    pos: str
    surface_form: str
    base_form: Optional[str] = None


class MorphologicalAnalyzer(Protocol):
    def tokenize(self, text: str) -> List[AnalyzedToken]:
        ...


class JanomeAnalyzer:
    """`MorphologicalAnalyzer` backed by janome's built-in IPADIC dictionary."""

    def __init__(self, tokenizer: Optional[Tokenizer] = None) -> None:
        self._tokenizer = tokenizer or Tokenizer()

    def tokenize(self, text: str) -> List[AnalyzedToken]:
        tokens: List[AnalyzedToken] = []
        for token in self._tokenizer.tokenize(text):
            base = token.base_form
            tokens.append(
                AnalyzedToken(
                    pos=token.part_of_speech.split(",")[0],
                    surface_form=token.surface,
                    base_form=None if base in (None, "", UNKNOWN_BASE_FORM) else base,
                )
            )
        return tokens


AnalyzerFactory = Callable[[], MorphologicalAnalyzer]


class AnalyzerBuilder:
    """
    Deadline-bounded analyzer construction that survives its own timeouts.

    A worker thread cannot be interrupted, so a construction that misses its
    deadline keeps running. The pending construction is kept and awaited
    again by the next `build()` instead of starting another thread; only a
    construction that actually failed is discarded.
    """

    def __init__(self, factory: AnalyzerFactory) -> None:
        self._factory = factory
        self._pending: Optional[asyncio.Future] = None

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def build(self, timeout: float) -> MorphologicalAnalyzer:
        """
        Construct an analyzer off the event loop, bounded by `timeout` seconds.

        Raises
        ------
        ToolingTimeoutError
            If construction does not finish before the deadline. The
            construction continues in the background and is reused.

        ResourceLoadError
            If construction itself fails.
        """
        if self._pending is None:
            self._pending = asyncio.ensure_future(asyncio.to_thread(self._factory))

        try:
            analyzer = await asyncio.wait_for(
                asyncio.shield(self._pending), timeout=timeout
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Analyzer construction exceeded %.1fs deadline; still running",
                timeout,
            )
            raise ToolingTimeoutError(
                f"Morphological analyzer was not ready within {timeout:g}s."
            ) from exc
        except Exception as exc:
            self._pending = None
            logger.error("Analyzer construction failed: %s", exc)
            raise ResourceLoadError(
                f"Morphological analyzer failed to initialize: {type(exc).__name__}"
            ) from exc

        self._pending = None
        return analyzer


async def build_analyzer(
    factory: AnalyzerFactory,
    timeout: float,
) -> MorphologicalAnalyzer:
    """One-shot `AnalyzerBuilder.build`."""
    return await AnalyzerBuilder(factory).build(timeout)
