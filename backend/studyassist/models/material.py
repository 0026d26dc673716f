from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from studyassist.models.card import Card, CardCreate


class MaterialStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MaterialCreate(BaseModel):
    name: str = Field(min_length=1)
    summary: str = ""
    summary_brief: str | None = None
    summary_medium: str | None = None
    summary_full: str | None = None
    status: MaterialStatus = MaterialStatus.PENDING
    cards: list[CardCreate] = []


class MaterialUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    summary: str | None = None
    summary_brief: str | None = None
    summary_medium: str | None = None
    summary_full: str | None = None


class MaterialMove(BaseModel):
    status: MaterialStatus


class Material(BaseModel):
    id: str
    project_id: str
    position: int
    name: str
    summary: str
    summary_brief: str | None
    summary_medium: str | None
    summary_full: str | None
    status: MaterialStatus
    interval_level: int | None
    next_review_at: str | None    # None = not scheduled for review
    last_reviewed_at: str | None
    cards: list[Card] = []
    created_at: str
    updated_at: str
    display_summary: str | None = None    # filled when a summary level is requested


class MaterialReviewResult(BaseModel):
    id: str
    interval_level: int
    next_review_at: str
    last_reviewed_at: str
