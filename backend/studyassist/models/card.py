from __future__ import annotations

from pydantic import BaseModel, Field

from studyassist.services.scheduler import Rating


class Card(BaseModel):
    id: str
    material_id: str
    position: int
    title: str
    content: str
    interval_level: int | None   # index into the interval table; None = never rated
    next_review_at: str | None   # ISO date (YYYY-MM-DD) or None = due immediately
    created_at: str
    updated_at: str


class CardCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""


class CardUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = None


class RatingRequest(BaseModel):
    rating: Rating


class RatingOption(BaseModel):
    rating: Rating
    interval_level: int
    days: int


class RatingResult(BaseModel):
    id: str
    rating: Rating
    interval_level: int
    next_review_at: str
