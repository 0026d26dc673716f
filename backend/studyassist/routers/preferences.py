"""
Study preferences per user.

Endpoints:
  GET /preferences/{user_id} : stored preferences over the defaults, plus derived session settings
  PUT /preferences/{user_id} : update any subset of preferences
"""
import logging

import aiosqlite
from fastapi import APIRouter, Depends

from studyassist.db.sqlite import get_db, get_preferences, set_preferences
from studyassist.models.preferences import (
    PreferencesUpdate,
    PreferencesView,
    SessionDurationView,
    UserPreferences,
)
from studyassist.services.preferences import preferred_study_tab, session_duration

logger = logging.getLogger(__name__)
router = APIRouter()


def _view(user_id: str, prefs: UserPreferences) -> PreferencesView:
    duration = session_duration(prefs.session_length)
    return PreferencesView(
        user_id=user_id,
        preferences=prefs,
        session_duration=SessionDurationView(minutes=duration.minutes, label=duration.label),
        study_tab=preferred_study_tab(prefs.preferred_format),
    )


@router.get("/{user_id}", response_model=PreferencesView)
async def get_prefs(user_id: str, db: aiosqlite.Connection = Depends(get_db)):
    return _view(user_id, await get_preferences(db, user_id))


@router.put("/{user_id}", response_model=PreferencesView)
async def put_prefs(
    user_id: str,
    body: PreferencesUpdate,
    db: aiosqlite.Connection = Depends(get_db),
):
    prefs = await set_preferences(db, user_id, body)
    logger.info("Preferences updated for %s", user_id)
    return _view(user_id, prefs)
