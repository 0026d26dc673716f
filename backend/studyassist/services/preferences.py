"""
Study preferences: which summary variant to show, how long a session runs, and
which study tab opens first. Pure rules, no I/O.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class _AliasedEnum(str, Enum):
    @classmethod
    def _missing_(cls, value: object) -> Any:
        if isinstance(value, str):
            return _ALIASES.get(cls.__name__, {}).get(value.strip().lower())
        return None


class SummaryLevel(_AliasedEnum):
    BRIEF = "brief"
    MEDIUM = "medium"
    FULL = "full"


class SessionLength(_AliasedEnum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class PreferredFormat(_AliasedEnum):
    SUMMARY = "summary"
    FLASHCARDS = "flashcards"
    QUIZ = "quiz"
    CHAT = "chat"


class StudyTab(str, Enum):
    FLASHCARDS = "flashcards"
    QUIZ = "quiz"
    CHAT = "chat"
    MY_QUESTIONS = "my_questions"


# Portuguese labels accepted from older clients
_ALIASES: dict[str, dict[str, Any]] = {
    "SummaryLevel": {
        "breve": SummaryLevel.BRIEF,
        "medio": SummaryLevel.MEDIUM,
        "médio": SummaryLevel.MEDIUM,
        "completo": SummaryLevel.FULL,
    },
    "SessionLength": {
        "curta": SessionLength.SHORT,
        "media": SessionLength.MEDIUM,
        "média": SessionLength.MEDIUM,
        "longa": SessionLength.LONG,
    },
    "PreferredFormat": {"resumo": PreferredFormat.SUMMARY},
}

DEFAULT_SUMMARY_LEVEL = SummaryLevel.MEDIUM

_SUMMARY_FIELDS = {
    SummaryLevel.BRIEF: "summary_brief",
    SummaryLevel.MEDIUM: "summary_medium",
    SummaryLevel.FULL: "summary_full",
}


@dataclass(frozen=True)
class SessionDuration:
    minutes: int
    label: str


_SESSION_DURATIONS = {
    SessionLength.SHORT: SessionDuration(18, "15-20 min"),
    SessionLength.MEDIUM: SessionDuration(28, "25-30 min"),
    SessionLength.LONG: SessionDuration(45, "45+ min"),
}


def _text(material: Any, field: str) -> str:
    if isinstance(material, dict):
        value = material.get(field)
    else:
        value = getattr(material, field, None)
    return (value or "").strip()


def display_summary(material: Any, level: SummaryLevel | str = DEFAULT_SUMMARY_LEVEL) -> str:
    """Summary text for the chosen level; falls back to the plain summary when blank."""
    chosen = _text(material, _SUMMARY_FIELDS[SummaryLevel(level)])
    return chosen or _text(material, "summary")


def session_duration(length: SessionLength | str) -> SessionDuration:
    return _SESSION_DURATIONS[SessionLength(length)]


def preferred_study_tab(preferred: PreferredFormat | str) -> StudyTab:
    # the study screen has no summary tab; summaries open on flashcards
    preferred = PreferredFormat(preferred)
    if preferred is PreferredFormat.SUMMARY:
        return StudyTab.FLASHCARDS
    return StudyTab(preferred.value)
