from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from studyassist.services.scheduler import (
    RATING_LEVEL,
    SPACED_INTERVALS_DAYS,
    Rating,
    ReviewSchedule,
    clamp_level,
    is_card_due,
    is_due,
    next_review_date_from_level,
    rating_days,
    rating_level,
    schedule_first_review,
    schedule_for_rating,
    schedule_material_review,
    today_iso,
)

TODAY = date(2024, 6, 10)
YESTERDAY = "2024-06-09"
TOMORROW = "2024-06-11"


def test_today_iso_format():
    assert len(today_iso()) == 10
    assert today_iso(TODAY) == "2024-06-10"


@pytest.mark.parametrize("level", range(-3, 9))
def test_next_review_date_clamps_any_level(level):
    expected_days = SPACED_INTERVALS_DAYS[min(max(level, 0), len(SPACED_INTERVALS_DAYS) - 1)]
    result = next_review_date_from_level(level, TODAY)
    assert result == (TODAY + timedelta(days=expected_days)).isoformat()
    assert result >= TODAY.isoformat()


def test_level_zero_is_tomorrow():
    assert next_review_date_from_level(0, TODAY) == TOMORROW


def test_top_level_is_a_month_out():
    assert next_review_date_from_level(4, TODAY) == "2024-07-10"
    assert next_review_date_from_level(99, TODAY) == "2024-07-10"


def test_next_review_date_defaults_to_current_day():
    assert next_review_date_from_level(0) > today_iso()


def test_custom_interval_table():
    assert next_review_date_from_level(1, TODAY, intervals=(2, 5)) == "2024-06-15"
    assert clamp_level(7, (2, 5)) == 1


def test_is_due_boundaries():
    assert is_due(None, TODAY) is False
    assert is_due("", TODAY) is False
    assert is_due("2024-06-10", TODAY) is True
    assert is_due(YESTERDAY, TODAY) is True
    assert is_due(TOMORROW, TODAY) is False


def test_is_due_accepts_date_objects():
    assert is_due(date(2024, 6, 1), TODAY) is True
    assert is_due(datetime(2024, 6, 10, 23, 59), TODAY) is True
    assert is_due(datetime(2024, 6, 11, 0, 0), TODAY) is False


@pytest.mark.parametrize("value", ["garbage", "2024-13-40", "2024-6-1", "10/06/2024", 20240610])
def test_malformed_dates_are_never_due(value):
    assert is_due(value, TODAY) is False
    assert is_card_due({"next_review_at": value}, TODAY) is False


def test_card_without_schedule_is_due():
    assert is_card_due({}, TODAY) is True
    assert is_card_due({"next_review_at": None}, TODAY) is True
    assert is_card_due(SimpleNamespace(), TODAY) is True
    assert is_card_due(SimpleNamespace(next_review_at=None), TODAY) is True


def test_card_due_comparison():
    assert is_card_due({"next_review_at": YESTERDAY}, TODAY) is True
    assert is_card_due({"next_review_at": "2024-06-10"}, TODAY) is True
    assert is_card_due({"next_review_at": TOMORROW}, TODAY) is False
    assert is_card_due(SimpleNamespace(next_review_at=TOMORROW), TODAY) is False


def test_material_and_card_defaults_differ():
    assert is_due(None, TODAY) is False
    assert is_card_due({"next_review_at": None}, TODAY) is True


def test_due_checks_are_idempotent():
    card = {"next_review_at": YESTERDAY}
    assert [is_card_due(card, TODAY) for _ in range(3)] == [True, True, True]
    assert [is_due(TOMORROW, TODAY) for _ in range(3)] == [False, False, False]
    assert card == {"next_review_at": YESTERDAY}


def test_rating_levels_are_monotonic():
    hard, medium, easy = (rating_level(r) for r in (Rating.HARD, Rating.MEDIUM, Rating.EASY))
    assert hard < medium < easy
    dates = [next_review_date_from_level(level, TODAY) for level in (hard, medium, easy)]
    assert dates == sorted(dates)


def test_rating_aliases():
    assert Rating("facil") is Rating.EASY
    assert Rating("Médio") is Rating.MEDIUM
    assert rating_level("dificil") == 0
    assert rating_level("easy") == 2


@pytest.mark.parametrize("bad", ["meh", "", 2, None])
def test_unknown_rating_rejected(bad):
    with pytest.raises(ValueError):
        rating_level(bad)


def test_rating_days_follow_interval_table():
    assert rating_days() == {Rating.HARD: 1, Rating.MEDIUM: 3, Rating.EASY: 7}
    assert rating_days((2, 4)) == {Rating.HARD: 2, Rating.MEDIUM: 4, Rating.EASY: 4}


def test_rating_scenario():
    assert schedule_for_rating("facil", TODAY) == ReviewSchedule(2, "2024-06-17")
    assert schedule_for_rating("dificil", TODAY) == ReviewSchedule(0, "2024-06-11")


def test_rating_sets_absolute_level():
    # the previous level plays no part; every rating maps to the same pair
    first = schedule_for_rating(Rating.EASY, TODAY)
    again = schedule_for_rating(Rating.EASY, TODAY)
    assert first == again
    assert first.interval_level == RATING_LEVEL[Rating.EASY]


def test_schedule_first_review():
    assert schedule_first_review(TODAY) == ReviewSchedule(0, TOMORROW)


def test_material_review_steps_level_up():
    assert schedule_material_review(None, TODAY) == ReviewSchedule(1, "2024-06-13", "2024-06-10")
    assert schedule_material_review(2, TODAY).interval_level == 3
    assert schedule_material_review(4, TODAY) == ReviewSchedule(4, "2024-07-10", "2024-06-10")
    assert schedule_material_review(40, TODAY).interval_level == 4
