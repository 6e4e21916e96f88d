"""
Lazy Resources

A `LazyResource` materializes an expensive value on first use and keeps it
for the rest of the process. Its life cycle is an explicit state machine:

    UNLOADED --ensure()--> LOADING --ok--> READY   (terminal)
                              |
                              +--error--> FAILED --> UNLOADED

Failures are never cached: the next `ensure()` retries from scratch, and no
partially loaded value is retained. Concurrent first calls share a single
load through an asyncio lock.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Generic, Optional, TypeVar

from ..core.errors import ResourceLoadError, WordMapError

logger = logging.getLogger("wordmap.resources")

T = TypeVar("T")


class ResourceState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class LazyResource(Generic[T]):
    """
    Idempotent, retry-on-failure loader for one value.
    """

    def __init__(self, name: str, load: Callable[[], Awaitable[T]]) -> None:
        self.name = name
        self._load = load
        self._state = ResourceState.UNLOADED
        self._value: Optional[T] = None
        self._lock = asyncio.Lock()
        self.attempts = 0
        self.last_error: Optional[WordMapError] = None

    @property
    def state(self) -> ResourceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ResourceState.READY

    def peek(self) -> Optional[T]:
        """Return the loaded value without triggering a load."""
        return self._value if self.is_ready else None

    async def ensure(self) -> T:
        """
        Return the loaded value, loading it first if needed.

        Raises
        ------
        WordMapError
            The load failure. Errors outside the word map taxonomy are
            wrapped in ResourceLoadError.
        """
        if self._state is ResourceState.READY:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            # Another caller may have finished the load while we waited
            if self._state is ResourceState.READY:
                return self._value  # type: ignore[return-value]

            self._state = ResourceState.LOADING
            self.attempts += 1
            logger.info("Loading resource %s (attempt %d)", self.name, self.attempts)

            try:
                value = await self._load()
            except asyncio.CancelledError:
                logger.warning("Resource %s load cancelled", self.name)
                self._state = ResourceState.UNLOADED
                raise
            except Exception as exc:
                error = exc if isinstance(exc, WordMapError) else ResourceLoadError(
                    f"Failed to load {self.name}: {type(exc).__name__}"
                )
                self._state = ResourceState.FAILED
                self.last_error = error
                logger.warning("Resource %s failed: %s", self.name, error.message)
                self._state = ResourceState.UNLOADED
                if error is exc:
                    raise
                raise error from exc

            self._value = value
            self.last_error = None
            self._state = ResourceState.READY
            logger.info("Resource %s ready", self.name)
            return value

    def snapshot(self) -> Dict[str, Optional[str]]:
        return {
            "state": self._state.value,
            "last_error": self.last_error.message if self.last_error else None,
        }
