"""
Word Map Routes

JSON endpoints behind the word map page:

- POST /wordmap/run      tokenize text and plot the eligible words
- POST /wordmap/similar  rank plotted words against a selected word
- GET  /wordmap/status   session status line and resource readiness

Expected failures are raised as WordMapError subclasses and rendered by
`wordmap_error_handler`; anything else falls through to the global handler.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from .models import (
    PointOut,
    RunRequest,
    RunResponse,
    SimilarRequest,
    SimilarResponse,
    SimilarWord,
    StatusResponse,
)
from .dependencies import get_session_store, get_wordmap_service
from ..core.errors import InvalidSelectionError
from ..services.wordmap import WordMapService
from ..sessions.store import IDLE_STATUS, SessionStore
from ..text.filtering import TokenizeOptions

router = APIRouter(prefix="/wordmap", tags=["wordmap"])


@router.post(
    "/run",
    response_model=RunResponse,
    summary="Tokenize text and plot the recognized words",
    status_code=status.HTTP_200_OK,
)
async def run(
    req: RunRequest,
    service: Annotated[WordMapService, Depends(get_wordmap_service)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> RunResponse:
    """
    Run the tokenize -> filter -> plot pipeline for one session.

    A run with fewer than two plottable words still returns 200 with
    `ok=false` and an explanatory status; the previous plot is kept.
    """
    session = store.get_or_create(req.session_id)
    options = TokenizeOptions(pos_filter=req.pos_filter, unique_only=req.unique_only)

    outcome = await service.run(session, req.text, options)

    return RunResponse(
        session_id=outcome.session_id,
        ok=outcome.ok,
        status=outcome.status,
        points=[PointOut(label=p.label, x=p.x, y=p.y) for p in outcome.points],
    )


@router.post(
    "/similar",
    response_model=SimilarResponse,
    summary="Rank plotted words by similarity to a selected word",
    status_code=status.HTTP_200_OK,
)
async def similar(
    req: SimilarRequest,
    service: Annotated[WordMapService, Depends(get_wordmap_service)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> SimilarResponse:
    session = store.get(req.session_id)
    if session is None:
        raise InvalidSelectionError("Unknown session; run first.")

    outcome = await service.similar(
        session,
        word=req.word,
        point_index=req.point_index,
    )

    return SimilarResponse(
        session_id=outcome.session_id,
        word=outcome.word,
        status=outcome.status,
        similar=[SimilarWord(word=w, score=s) for w, s in outcome.similar],
    )


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Session status line and resource readiness",
)
async def session_status(
    service: Annotated[WordMapService, Depends(get_wordmap_service)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    session_id: Optional[str] = Query(default=None),
) -> StatusResponse:
    resources = service.loader.states()
    session = store.get(session_id) if session_id else None

    if session is None:
        return StatusResponse(status=IDLE_STATUS, resources=resources)

    return StatusResponse(
        session_id=session.session_id,
        status=session.status,
        plotted_words=list(session.plotted_words),
        selected_word=session.selected_word,
        resources=resources,
    )
