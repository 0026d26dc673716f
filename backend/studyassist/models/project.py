from __future__ import annotations

from pydantic import BaseModel, Field

from studyassist.models.material import Material


class ProjectCreate(BaseModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    emoji: str = "📚"
    tags: list[str] = []


class ProjectUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    emoji: str | None = None
    tags: list[str] | None = None


class Project(BaseModel):
    id: str
    user_id: str
    title: str
    emoji: str
    tags: list[str]
    progress: int   # percentage of completed materials
    material_count: int = 0
    created_at: str
    updated_at: str


class ProjectDetail(Project):
    materials: list[Material] = []


class ProjectList(BaseModel):
    items: list[Project]
    total: int
    offset: int
    limit: int
