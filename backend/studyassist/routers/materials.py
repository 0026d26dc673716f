"""
Materials (topics) router.

Endpoints:
  GET    /materials/{id}         : material with its cards; ?summary_level= picks a summary
  PATCH  /materials/{id}         : edit name / summaries
  DELETE /materials/{id}         : delete material and its cards
  POST   /materials/{id}/move    : kanban move; completing schedules the first review
  POST   /materials/{id}/open    : start studying (pending → in_progress)
  POST   /materials/{id}/review  : mark reviewed; steps the interval level up
  POST   /materials/{id}/cards   : add a flashcard
"""
from __future__ import annotations

import logging
from datetime import date

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studyassist.config import settings
from studyassist.db.sqlite import (
    create_card,
    delete_material,
    get_db,
    get_material,
    record_material_review,
    update_material_content,
    update_material_schedule,
)
from studyassist.dependencies import get_today
from studyassist.models.card import Card, CardCreate
from studyassist.models.material import (
    Material,
    MaterialMove,
    MaterialReviewResult,
    MaterialUpdate,
)
from studyassist.services.kanban import status_change, status_on_open
from studyassist.services.preferences import SummaryLevel, display_summary
from studyassist.services.scheduler import schedule_material_review

logger = logging.getLogger(__name__)
router = APIRouter()


async def _require_material(db: aiosqlite.Connection, material_id: str) -> Material:
    material = await get_material(db, material_id)
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return material


@router.get("/{material_id}", response_model=Material)
async def get_mat(
    material_id: str,
    summary_level: SummaryLevel | None = Query(default=None),
    db: aiosqlite.Connection = Depends(get_db),
):
    material = await _require_material(db, material_id)
    if summary_level is None:
        return material
    return material.model_copy(
        update={"display_summary": display_summary(material, summary_level)}
    )


@router.patch("/{material_id}", response_model=Material)
async def update_mat(
    material_id: str,
    body: MaterialUpdate,
    db: aiosqlite.Connection = Depends(get_db),
):
    material = await update_material_content(db, material_id, body)
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return material


@router.delete("/{material_id}", status_code=204)
async def delete_mat(material_id: str, db: aiosqlite.Connection = Depends(get_db)):
    deleted = await delete_material(db, material_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Material not found")


@router.post("/{material_id}/move", response_model=Material)
async def move_mat(
    material_id: str,
    body: MaterialMove,
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
):
    material = await _require_material(db, material_id)
    fields = status_change(
        material.next_review_at, body.status, today, settings.spaced_intervals_days
    )
    logger.info(
        "Material %s moved %s -> %s", material_id, material.status.value, body.status.value
    )
    return await update_material_schedule(db, material_id, fields)


@router.post("/{material_id}/open", response_model=Material)
async def open_mat(material_id: str, db: aiosqlite.Connection = Depends(get_db)):
    material = await _require_material(db, material_id)
    new_status = status_on_open(material.status)
    if new_status is None:
        return material
    return await update_material_schedule(db, material_id, {"status": new_status.value})


@router.post("/{material_id}/review", response_model=MaterialReviewResult)
async def review_mat(
    material_id: str,
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
):
    material = await _require_material(db, material_id)
    schedule = schedule_material_review(
        material.interval_level, today, settings.spaced_intervals_days
    )
    updated = await record_material_review(db, material_id, schedule)
    if not updated:
        raise HTTPException(status_code=404, detail="Material not found")

    logger.info(
        "Material %s reviewed: level %s, next review %s",
        material_id,
        schedule.interval_level,
        schedule.next_review_at,
    )
    return MaterialReviewResult(
        id=material_id,
        interval_level=schedule.interval_level,
        next_review_at=schedule.next_review_at,
        last_reviewed_at=schedule.last_reviewed_at,
    )


@router.post("/{material_id}/cards", response_model=Card, status_code=201)
async def add_card(
    material_id: str,
    body: CardCreate,
    db: aiosqlite.Connection = Depends(get_db),
):
    card = await create_card(db, material_id, body)
    if not card:
        raise HTTPException(status_code=404, detail="Material not found")
    return card
