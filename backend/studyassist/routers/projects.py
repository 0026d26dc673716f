from datetime import date

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studyassist.config import settings
from studyassist.db.sqlite import (
    create_material,
    create_project,
    delete_project,
    get_db,
    get_project_detail,
    list_projects,
    update_project,
)
from studyassist.dependencies import get_today
from studyassist.models.material import Material, MaterialCreate
from studyassist.models.project import (
    Project,
    ProjectCreate,
    ProjectDetail,
    ProjectList,
    ProjectUpdate,
)

router = APIRouter()


@router.post("/", response_model=Project, status_code=201)
async def create_proj(
    body: ProjectCreate, db: aiosqlite.Connection = Depends(get_db)
):
    return await create_project(db, body)


@router.get("/", response_model=ProjectList)
async def list_projs(
    user_id: str = Query(min_length=1),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: aiosqlite.Connection = Depends(get_db),
):
    items, total = await list_projects(db, user_id, offset, limit)
    return ProjectList(items=items, total=total, offset=offset, limit=limit)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_proj(project_id: str, db: aiosqlite.Connection = Depends(get_db)):
    project = await get_project_detail(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.patch("/{project_id}", response_model=Project)
async def update_proj(
    project_id: str, body: ProjectUpdate, db: aiosqlite.Connection = Depends(get_db)
):
    project = await update_project(db, project_id, body)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_proj(project_id: str, db: aiosqlite.Connection = Depends(get_db)):
    deleted = await delete_project(db, project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")


@router.post("/{project_id}/materials", response_model=Material, status_code=201)
async def add_material(
    project_id: str,
    body: MaterialCreate,
    today: date = Depends(get_today),
    db: aiosqlite.Connection = Depends(get_db),
):
    """Add a topic, optionally carrying generated summaries and flashcards."""
    material = await create_material(
        db, project_id, body, today, settings.spaced_intervals_days
    )
    if not material:
        raise HTTPException(status_code=404, detail="Project not found")
    return material
