"""
Kanban board rules for a project's materials (pending → in_progress → completed).

A material only enters the review rotation once it is completed; moving it back
to any other column drops its schedule.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from studyassist.models.material import MaterialStatus
from studyassist.services.scheduler import SPACED_INTERVALS_DAYS, schedule_first_review


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_progress(statuses: Iterable[MaterialStatus | str]) -> int:
    """Percentage of completed materials, 0 for an empty project."""
    statuses = [MaterialStatus(s) for s in statuses]
    if not statuses:
        return 0
    completed = sum(1 for s in statuses if s is MaterialStatus.COMPLETED)
    return round_half_up(completed * 100 / len(statuses))


def status_change(
    next_review_at: str | None,
    new_status: MaterialStatus,
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> dict[str, Any]:
    """Return the material fields to persist for a move to `new_status`."""
    fields: dict[str, Any] = {"status": new_status.value}
    if new_status is MaterialStatus.COMPLETED:
        if not next_review_at:
            first = schedule_first_review(today, intervals)
            fields["interval_level"] = first.interval_level
            fields["next_review_at"] = first.next_review_at
    else:
        fields["interval_level"] = None
        fields["next_review_at"] = None
        fields["last_reviewed_at"] = None
    return fields


def status_on_open(status: MaterialStatus) -> MaterialStatus | None:
    """Opening a material for study starts it; other columns are left alone."""
    if status is MaterialStatus.PENDING:
        return MaterialStatus.IN_PROGRESS
    return None
