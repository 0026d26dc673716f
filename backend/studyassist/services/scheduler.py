"""
Spaced-repetition scheduler.

Pure functions over a fixed interval table (days until next review, indexed by
interval_level). Dates are UTC calendar days exchanged as YYYY-MM-DD strings.

Materials and cards differ in how an unscheduled item is treated:
  is_due(next_review_at) : None means "not scheduled", never due
  is_card_due(card)      : None means "never reviewed", due immediately

Every date-dependent function takes an optional `today`; callers checking many
items should take one snapshot and pass it through.
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any

SPACED_INTERVALS_DAYS: tuple[int, ...] = (1, 3, 7, 14, 30)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Rating(str, Enum):
    HARD = "hard"
    MEDIUM = "medium"
    EASY = "easy"

    @classmethod
    def _missing_(cls, value: object) -> Rating | None:
        if isinstance(value, str):
            return _RATING_ALIASES.get(value.strip().lower())
        return None


_RATING_ALIASES = {
    "dificil": Rating.HARD,
    "difícil": Rating.HARD,
    "medio": Rating.MEDIUM,
    "médio": Rating.MEDIUM,
    "facil": Rating.EASY,
    "fácil": Rating.EASY,
}

RATING_LEVEL: dict[Rating, int] = {
    Rating.HARD: 0,
    Rating.MEDIUM: 1,
    Rating.EASY: 2,
}


@dataclass(frozen=True)
class ReviewSchedule:
    """The (interval_level, next_review_at) pair; always persisted together."""

    interval_level: int
    next_review_at: str
    last_reviewed_at: str | None = None


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def today_iso(today: date | None = None) -> str:
    return (today or today_utc()).isoformat()


def max_level(intervals: Sequence[int] = SPACED_INTERVALS_DAYS) -> int:
    return len(intervals) - 1


def clamp_level(level: int, intervals: Sequence[int] = SPACED_INTERVALS_DAYS) -> int:
    return min(max(0, level), max_level(intervals))


def next_review_date_from_level(
    level: int,
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> str:
    """Return today + intervals[clamped level] as YYYY-MM-DD. Never raises."""
    days = intervals[clamp_level(level, intervals)]
    return ((today or today_utc()) + timedelta(days=days)).isoformat()


def _as_date(value: Any) -> date | None:
    """Coerce a stored review date; anything unparseable becomes None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_due(next_review_at: str | date | None, today: date | None = None) -> bool:
    """Material due-ness: unscheduled or malformed dates are never due."""
    if not next_review_at:
        return False
    scheduled = _as_date(next_review_at)
    if scheduled is None:
        return False
    return scheduled <= (today or today_utc())


def _card_next_review(card: Any) -> Any:
    if isinstance(card, Mapping):
        return card.get("next_review_at")
    return getattr(card, "next_review_at", None)


def is_card_due(card: Any, today: date | None = None) -> bool:
    """Card due-ness: a card that was never rated is due immediately."""
    next_review_at = _card_next_review(card)
    if not next_review_at:
        return True
    scheduled = _as_date(next_review_at)
    if scheduled is None:
        return False
    return scheduled <= (today or today_utc())


def rating_level(rating: Rating | str) -> int:
    """Map a rating (or one of its aliases) to an interval level.

    Raises ValueError for anything that is not a known rating.
    """
    return RATING_LEVEL[Rating(rating)]


def rating_days(intervals: Sequence[int] = SPACED_INTERVALS_DAYS) -> dict[Rating, int]:
    return {
        rating: intervals[clamp_level(level, intervals)]
        for rating, level in RATING_LEVEL.items()
    }


def schedule_for_rating(
    rating: Rating | str,
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> ReviewSchedule:
    level = clamp_level(rating_level(rating), intervals)
    return ReviewSchedule(
        interval_level=level,
        next_review_at=next_review_date_from_level(level, today, intervals),
    )


def schedule_first_review(
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> ReviewSchedule:
    return ReviewSchedule(
        interval_level=0,
        next_review_at=next_review_date_from_level(0, today, intervals),
    )


def schedule_material_review(
    current_level: int | None,
    today: date | None = None,
    intervals: Sequence[int] = SPACED_INTERVALS_DAYS,
) -> ReviewSchedule:
    """Mark a material as reviewed: step one level up, capped at the last one."""
    today = today or today_utc()
    level = clamp_level((current_level or 0) + 1, intervals)
    return ReviewSchedule(
        interval_level=level,
        next_review_at=next_review_date_from_level(level, today, intervals),
        last_reviewed_at=today.isoformat(),
    )
