from datetime import date

from studyassist.services.scheduler import today_utc


def get_today() -> date:
    """Today's UTC date, resolved once per request and shared by every due check in it."""
    return today_utc()
