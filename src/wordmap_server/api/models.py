"""
API Models for the Word Map Server

Pydantic models for request/response validation across the run, similarity
and status endpoints.

Design Goals
------------
- Strong typing
- Safe defaults (no shared mutable state)
- Clear schema documentation for OpenAPI generation
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator


# ---------------------------------------------------------------------
# Shared Shapes
# ---------------------------------------------------------------------

class PointOut(BaseModel):
    """
    One scatter point: the chart surface's (label, x, y) triple.
    """
    label: str
    x: float
    y: float


class SimilarWord(BaseModel):
    word: str
    score: float = Field(..., ge=-1.0, le=1.0)


class ResourceStatus(BaseModel):
    state: str
    last_error: Optional[str] = None


# ---------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------

class RunRequest(BaseModel):
    """
    Plot the words of a free-text input.
    """
    text: str = Field(..., max_length=100_000)
    pos_filter: bool = True
    unique_only: bool = True
    session_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RunResponse(BaseModel):
    session_id: str
    ok: bool
    status: str
    points: List[PointOut] = Field(default_factory=list)


# ---------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------

class SimilarRequest(BaseModel):
    """
    Rank the session's plotted words against one selected word.

    Exactly one of `word` or `point_index` is required. `point_index` is the
    index the chart reports for the clicked point.
    """
    session_id: str = Field(..., min_length=1)
    word: Optional[str] = Field(default=None, min_length=1)
    point_index: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "SimilarRequest":
        if (self.word is None) == (self.point_index is None):
            raise ValueError("Provide exactly one of 'word' or 'point_index'.")
        return self


class SimilarResponse(BaseModel):
    session_id: str
    word: str
    status: str
    similar: List[SimilarWord] = Field(default_factory=list)


# ---------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------

class StatusResponse(BaseModel):
    session_id: Optional[str] = None
    status: str
    plotted_words: List[str] = Field(default_factory=list)
    selected_word: Optional[str] = None
    resources: Dict[str, ResourceStatus] = Field(default_factory=dict)
