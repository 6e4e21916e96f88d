"""
Error Taxonomy and Global Error Handling

This module defines every failure the word map service can report, together
with the FastAPI exception handlers that turn them into responses.

Design Goals
------------
- One base class (`WordMapError`) for all expected failures
- A stable machine-readable code and HTTP status per failure kind
- A short human-readable message that the page can show in an alert
- Never leak internal exception details for unexpected failures
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("wordmap.errors")


# ---------------------------------------------------------------------
# Exception Taxonomy
# ---------------------------------------------------------------------

class WordMapError(Exception):
    """Base class for all expected word map failures."""

    code: str = "wordmap_error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceLoadError(WordMapError):
    """Raised when fetching or parsing an asset fails. Retry is allowed."""

    code = "resource_load_failed"
    status_code = 503


class DataIntegrityError(WordMapError):
    """Raised when a loaded asset is internally inconsistent."""

    code = "data_integrity"
    status_code = 500


class ToolingTimeoutError(WordMapError):
    """Raised when the morphological analyzer is not ready before its deadline."""

    code = "tooling_timeout"
    status_code = 504


class InsufficientInputError(WordMapError):
    """
    Too few plottable words survived filtering.

    This one is reported inside a run result rather than raised to the client.
    """

    code = "insufficient_input"
    status_code = 200

    def __init__(self, found: int, required: int) -> None:
        super().__init__(
            f"Too few plottable words: found {found}, need at least {required}."
        )
        self.found = found
        self.required = required


class EmptyTextError(WordMapError):
    """Raised when a run is triggered with blank text."""

    code = "empty_text"
    status_code = 400


class InvalidSelectionError(WordMapError):
    """Raised when a selection does not refer to a plotted word."""

    code = "invalid_selection"
    status_code = 400


class RunInProgressError(WordMapError):
    """Raised when a session already has a run or click in flight."""

    code = "run_in_progress"
    status_code = 409


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def wordmap_error_handler(
    request: Request,
    exc: WordMapError,
) -> JSONResponse:
    """
    Convert an expected `WordMapError` into its JSON error response.

    The failure has already been logged by the service layer, so only a
    one-line summary is written here.
    """
    logger.info(
        "Request %s %s failed with %s: %s",
        request.method,
        request.url.path,
        exc.code,
        exc.message,
    )

    payload: Dict[str, Any] = {
        "error": exc.code,
        "detail": exc.message,
    }

    return JSONResponse(
        status_code=exc.status_code,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
