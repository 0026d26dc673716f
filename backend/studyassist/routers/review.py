from datetime import date

import aiosqlite
from fastapi import APIRouter, Depends, Query

from studyassist.db.sqlite import get_db, list_project_details
from studyassist.dependencies import get_today
from studyassist.models.review import ReviewQueue, StudyOverview
from studyassist.services.review_queue import build_overview, build_review_queue

router = APIRouter()


@router.get("/queue", response_model=ReviewQueue)
async def review_queue(
    user_id: str = Query(min_length=1),
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
) -> ReviewQueue:
    """Materials and cards due today across all of a user's projects."""
    projects = await list_project_details(db, user_id)
    return build_review_queue(projects, today)


@router.get("/overview", response_model=StudyOverview)
async def overview(
    user_id: str = Query(min_length=1),
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
) -> StudyOverview:
    projects = await list_project_details(db, user_id)
    return build_overview(projects, today)
