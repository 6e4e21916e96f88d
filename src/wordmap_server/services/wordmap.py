"""
Word Map Service

Top-level handlers for the two user actions on the page:

- run:     tokenize text, keep plottable words, replace the session's plot
- similar: rank the session's plotted words against one selected word

Both handlers update the session status line as they move through their
phases, catch and log every failure, and leave the session in its pre-action
state when something goes wrong. Only one action per session may be in
flight at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import Settings
from ..core.errors import (
    EmptyTextError,
    InvalidSelectionError,
    RunInProgressError,
    WordMapError,
)
from ..plotting.selection import PlotPoint, select_plottable
from ..resources.loader import ResourceLoader
from ..sessions.store import PlotSession
from ..text.filtering import TokenizeOptions, tokenize

logger = logging.getLogger("wordmap.service")


def _error_status(exc: Exception) -> str:
    if isinstance(exc, WordMapError):
        return f"Error: {exc.message}"
    return "Error: internal error (see server log)"


@dataclass
class RunOutcome:
    session_id: str
    ok: bool
    status: str
    points: List[PlotPoint] = field(default_factory=list)


@dataclass
class SimilarOutcome:
    session_id: str
    word: str
    status: str
    similar: List[Tuple[str, float]] = field(default_factory=list)


class WordMapService:
    """
    Orchestrates resource loading, tokenization, plotting and ranking.
    """

    def __init__(
        self,
        loader: ResourceLoader,
        config: Optional[Settings] = None,
    ) -> None:
        self.loader = loader
        self.config = config or loader.config

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(
        self,
        session: PlotSession,
        text: str,
        options: Optional[TokenizeOptions] = None,
    ) -> RunOutcome:
        """
        Plot the words of `text` for `session`.

        A run with too few plottable words is reported through
        `RunOutcome.ok == False` and keeps the previous plot.

        Raises
        ------
        EmptyTextError
            If `text` is blank.

        RunInProgressError
            If the session already has an action in flight.

        WordMapError
            Any resource failure; the session status records it.
        """
        text = (text or "").strip()
        if not text:
            raise EmptyTextError("Please enter some text.")

        options = options or TokenizeOptions()

        if session.busy.locked():
            raise RunInProgressError("A run is already in progress for this session.")

        async with session.busy:
            try:
                return await self._run(session, text, options)
            except Exception as exc:
                logger.exception("Run failed for session %s", session.session_id)
                session.status = _error_status(exc)
                raise

    async def _run(
        self,
        session: PlotSession,
        text: str,
        options: TokenizeOptions,
    ) -> RunOutcome:
        if not self.loader.tokenizer.is_ready:
            session.status = "Preparing morphological analyzer (first run only)..."
        analyzer = await self.loader.ensure_tokenizer()

        session.status = "Tokenizing..."
        words = tokenize(analyzer, text, options)

        if not self.loader.coordinates.is_ready:
            session.status = "Loading coordinates (first run only)..."
        coordinates = await self.loader.ensure_coordinates()
        vocabulary = await self.loader.ensure_vocabulary()

        selection = select_plottable(
            words,
            coordinates,
            vocabulary,
            min_words=self.config.min_plot_words,
        )

        if not selection.ok:
            session.status = (
                "Too few plottable words "
                f"(at least {self.config.min_plot_words} needed)."
            )
            logger.info(
                "Session %s: %s",
                session.session_id,
                selection.error.message if selection.error else session.status,
            )
            return RunOutcome(
                session_id=session.session_id,
                ok=False,
                status=session.status,
            )

        session.replace_plot(selection.words, selection.points)
        session.status = (
            f"Done: {len(selection.words)} words plotted "
            "(similar words load on first click)"
        )
        logger.info(
            "Session %s plotted %d of %d words",
            session.session_id,
            len(selection.words),
            len(words),
        )

        return RunOutcome(
            session_id=session.session_id,
            ok=True,
            status=session.status,
            points=list(selection.points),
        )

    # ------------------------------------------------------------------
    # Selection / similarity
    # ------------------------------------------------------------------

    def select_point(self, session: PlotSession, index: int) -> str:
        """
        Map a point index from the last rendered plot to its word.
        """
        if not session.plotted_words:
            raise InvalidSelectionError("Nothing is plotted yet; run first.")
        if not 0 <= index < len(session.plotted_words):
            raise InvalidSelectionError(
                f"Point index {index} is outside the current plot."
            )
        return session.plotted_words[index]

    async def similar(
        self,
        session: PlotSession,
        word: Optional[str] = None,
        point_index: Optional[int] = None,
    ) -> SimilarOutcome:
        """
        Rank the session's plotted words by similarity to one word.

        Exactly one of `word` or `point_index` must be given. The word must be
        part of the session's current plot.
        """
        if (word is None) == (point_index is None):
            raise InvalidSelectionError("Give exactly one of word or point_index.")

        if point_index is not None:
            word = self.select_point(session, point_index)
        elif not session.plotted_words:
            raise InvalidSelectionError("Nothing is plotted yet; run first.")
        elif word not in session.plotted_words:
            raise InvalidSelectionError(f"{word!r} is not in the current plot.")

        if session.busy.locked():
            raise RunInProgressError("A run is already in progress for this session.")

        async with session.busy:
            try:
                if not self.loader.embeddings.is_ready:
                    session.status = "Loading similarity model (first time only)..."
                engine = await self.loader.ensure_embeddings()
                ranked = engine.top_similar(
                    word,
                    session.plotted_words,
                    k=self.config.similar_top_k,
                )
            except Exception as exc:
                logger.exception(
                    "Similarity lookup failed for session %s",
                    session.session_id,
                )
                session.status = _error_status(exc)
                raise

            session.selected_word = word
            session.status = f"Similar words for {word}"

            return SimilarOutcome(
                session_id=session.session_id,
                word=word,
                status=session.status,
                similar=ranked,
            )
