from pydantic import BaseModel

from studyassist.models.card import Card
from studyassist.models.material import Material


class DueMaterial(BaseModel):
    project_id: str
    project_title: str
    material: Material


class DueCard(BaseModel):
    project_id: str
    project_title: str
    material_id: str
    material_name: str
    card: Card


class ReviewQueue(BaseModel):
    today: str
    materials: list[DueMaterial]
    cards: list[DueCard]


class StudyOverview(BaseModel):
    today: str
    project_count: int
    total_progress: int
    total_topics: int
    completed_topics: int
    topic_progress: int
    due_material_count: int
    due_card_count: int
