"""
Plot Session Store

In-memory per-client state for the word map page.

Each `PlotSession` holds what one browser tab would keep: the words and
points of the last successful run, the currently selected word and the
status line. Heavy resources are not stored here; they are shared
process-wide by the ResourceLoader.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- Thread-safe access to the session map using a re-entrant lock.
- Least recently used sessions are evicted beyond `max_sessions`.
- One in-flight run or click per session, enforced by a per-session
  asyncio lock.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import RLock
from typing import List, Optional
from uuid import uuid4

from ..plotting.selection import PlotPoint


IDLE_STATUS = "Ready (press Run to start)"


@dataclass
class PlotSession:
    """
    State of one client's word map.

    `plotted_words` and `points` are always replaced together, and only by a
    successful run; they stay aligned index-for-index with the last plot the
    client rendered.
    """

    session_id: str
    plotted_words: List[str] = field(default_factory=list)
    points: List[PlotPoint] = field(default_factory=list)
    selected_word: Optional[str] = None
    status: str = IDLE_STATUS
    busy: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def replace_plot(self, words: List[str], points: List[PlotPoint]) -> None:
        self.plotted_words = list(words)
        self.points = list(points)
        self.selected_word = None


class SessionStore:
    """
    In-memory store mapping session IDs to PlotSession objects.
    """

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        """
        Parameters
        ----------
        max_sessions : Optional[int]
            If provided, the least recently used session is evicted once more
            than this many sessions exist. If None, the store is unbounded.
        """
        self._store: "OrderedDict[str, PlotSession]" = OrderedDict()
        self._lock = RLock()
        self._max_sessions = max_sessions

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, session_id: str) -> Optional[PlotSession]:
        """
        Return the session for `session_id`, or None if unknown.
        """
        with self._lock:
            session = self._store.get(session_id)
            if session is not None:
                self._store.move_to_end(session_id)
            return session

    def get_or_create(self, session_id: Optional[str] = None) -> PlotSession:
        """
        Return an existing session, or create one.

        A new session gets a fresh uuid4 id when `session_id` is missing or
        unknown; client-chosen ids are never adopted.
        """
        with self._lock:
            if session_id:
                session = self.get(session_id)
                if session is not None:
                    return session

            session = PlotSession(session_id=uuid4().hex)
            self._store[session.session_id] = session
            self._evict()
            return session

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._store.pop(session_id, None)

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """
        Remove all sessions. Intended for test setup/teardown.
        """
        with self._lock:
            self._store.clear()

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _evict(self) -> None:
        if self._max_sessions is None or self._max_sessions <= 0:
            return
        while len(self._store) > self._max_sessions:
            self._store.popitem(last=False)
