"""
Flashcard & rating router.

Endpoints:
  GET    /cards/ratings    : rating → interval level / days (button labels)
  POST   /cards/{id}/rate  : submit hard / medium / easy, schedule next review
  GET    /cards/{id}       : single card
  PATCH  /cards/{id}       : edit title / content (schedule is kept)
  DELETE /cards/{id}       : delete card
"""
from __future__ import annotations

import logging
from datetime import date

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from studyassist.config import settings
from studyassist.db.sqlite import (
    delete_card,
    get_card,
    get_db,
    update_card_content,
    update_card_schedule,
)
from studyassist.dependencies import get_today
from studyassist.models.card import (
    Card,
    CardUpdate,
    RatingOption,
    RatingRequest,
    RatingResult,
)
from studyassist.services.scheduler import (
    RATING_LEVEL,
    clamp_level,
    rating_days,
    schedule_for_rating,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/ratings", response_model=list[RatingOption])
async def list_ratings() -> list[RatingOption]:
    intervals = settings.spaced_intervals_days
    days = rating_days(intervals)
    return [
        RatingOption(
            rating=rating,
            interval_level=clamp_level(level, intervals),
            days=days[rating],
        )
        for rating, level in RATING_LEVEL.items()
    ]


@router.post("/{card_id}/rate", response_model=RatingResult)
async def rate_card(
    card_id: str,
    body: RatingRequest,
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
) -> RatingResult:
    """Rate a flashcard. The new level is absolute, not added to the old one."""
    card = await get_card(db, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Flashcard not found")

    schedule = schedule_for_rating(body.rating, today, settings.spaced_intervals_days)
    updated = await update_card_schedule(db, card_id, schedule)
    if not updated:
        raise HTTPException(status_code=404, detail="Flashcard not found")

    logger.info(
        "Card %s rated %s: level %s, next review %s",
        card_id,
        body.rating.value,
        schedule.interval_level,
        schedule.next_review_at,
    )
    return RatingResult(
        id=card_id,
        rating=body.rating,
        interval_level=schedule.interval_level,
        next_review_at=schedule.next_review_at,
    )


@router.get("/{card_id}", response_model=Card)
async def get_one(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> Card:
    card = await get_card(db, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return card


@router.patch("/{card_id}", response_model=Card)
async def edit_card(
    card_id: str,
    body: CardUpdate,
    db: aiosqlite.Connection = Depends(get_db),
) -> Card:
    updated = await update_card_content(db, card_id, body)
    if not updated:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return updated


@router.delete("/{card_id}", status_code=204)
async def remove_card(
    card_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> None:
    deleted = await delete_card(db, card_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Flashcard not found")
