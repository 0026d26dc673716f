from pydantic import BaseModel

from studyassist.services.preferences import (
    PreferredFormat,
    SessionLength,
    StudyTab,
    SummaryLevel,
)


class UserPreferences(BaseModel):
    preferred_format: PreferredFormat = PreferredFormat.FLASHCARDS
    session_length: SessionLength = SessionLength.MEDIUM
    summary_level: SummaryLevel = SummaryLevel.MEDIUM
    font_size: str = "M"             # P | M | G
    high_contrast: bool = False
    wide_spacing: bool = False
    reduced_motion: bool = False
    time_alerts: bool = True
    focus_mode: bool = False
    focus_mode_hide_menu: bool = False
    transition_warning: bool = True
    pomodoro_breaks: bool = False


class PreferencesUpdate(BaseModel):
    preferred_format: PreferredFormat | None = None
    session_length: SessionLength | None = None
    summary_level: SummaryLevel | None = None
    font_size: str | None = None
    high_contrast: bool | None = None
    wide_spacing: bool | None = None
    reduced_motion: bool | None = None
    time_alerts: bool | None = None
    focus_mode: bool | None = None
    focus_mode_hide_menu: bool | None = None
    transition_warning: bool | None = None
    pomodoro_breaks: bool | None = None


class SessionDurationView(BaseModel):
    minutes: int
    label: str


class PreferencesView(BaseModel):
    user_id: str
    preferences: UserPreferences
    session_duration: SessionDurationView
    study_tab: StudyTab
