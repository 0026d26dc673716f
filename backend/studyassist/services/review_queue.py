"""
Review queue and dashboard aggregation.

Due-ness is evaluated in Python with the scheduler predicates (never in SQL) and
against a single `today` snapshot per pass, so every item in one response is
judged against the same date.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from studyassist.models.material import MaterialStatus
from studyassist.models.project import ProjectDetail
from studyassist.models.review import DueCard, DueMaterial, ReviewQueue, StudyOverview
from studyassist.services.kanban import round_half_up
from studyassist.services.scheduler import is_card_due, is_due


def build_review_queue(projects: Iterable[ProjectDetail], today: date) -> ReviewQueue:
    materials: list[DueMaterial] = []
    cards: list[DueCard] = []
    for project in projects:
        for material in project.materials:
            if material.cards and is_due(material.next_review_at, today):
                materials.append(
                    DueMaterial(
                        project_id=project.id,
                        project_title=project.title,
                        material=material,
                    )
                )
            for card in material.cards:
                if is_card_due(card, today):
                    cards.append(
                        DueCard(
                            project_id=project.id,
                            project_title=project.title,
                            material_id=material.id,
                            material_name=material.name,
                            card=card,
                        )
                    )
    return ReviewQueue(today=today.isoformat(), materials=materials, cards=cards)


def build_overview(projects: Iterable[ProjectDetail], today: date) -> StudyOverview:
    projects = list(projects)
    queue = build_review_queue(projects, today)

    total_progress = (
        round_half_up(sum(p.progress for p in projects) / len(projects))
        if projects
        else 0
    )
    total_topics = sum(len(p.materials) for p in projects)
    completed_topics = sum(
        1
        for p in projects
        for m in p.materials
        if m.status is MaterialStatus.COMPLETED
    )
    topic_progress = (
        round_half_up(completed_topics * 100 / total_topics) if total_topics else 0
    )

    return StudyOverview(
        today=today.isoformat(),
        project_count=len(projects),
        total_progress=total_progress,
        total_topics=total_topics,
        completed_topics=completed_topics,
        topic_progress=topic_progress,
        due_material_count=len(queue.materials),
        due_card_count=len(queue.cards),
    )
