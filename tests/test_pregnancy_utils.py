from datetime import date

import pytest

from bloomcare.utils.pregnancy_utils import (
    clamp_week,
    current_week,
    is_stressed_mood,
    normalize_mood,
    trimester_for_week,
)


@pytest.mark.parametrize(
    "week, trimester",
    [(1, 1), (13, 1), (14, 2), (26, 2), (27, 3), (39, 3), (40, 3)],
)
def test_trimester_for_week(week, trimester):
    assert trimester_for_week(week) == trimester


@pytest.mark.parametrize("week, expected", [(-3, 1), (0, 1), (1, 1), (25, 25), (40, 40), (44, 40)])
def test_clamp_week(week, expected):
    assert clamp_week(week) == expected


def test_current_week_counts_completed_weeks_from_start():
    start = date(2024, 1, 1)
    assert current_week(start, today=date(2024, 1, 1)) == 1
    assert current_week(start, today=date(2024, 1, 7)) == 1
    assert current_week(start, today=date(2024, 1, 8)) == 2
    assert current_week(start, today=date(2024, 3, 4)) == 10


def test_current_week_is_clamped():
    start = date(2024, 1, 1)
    assert current_week(start, today=date(2023, 12, 1)) == 1
    assert current_week(start, today=date(2025, 1, 1)) == 40


def test_mood_helpers():
    assert normalize_mood("  Anxious ") == "anxious"
    assert normalize_mood(None) == ""
    assert is_stressed_mood("STRESSED")
    assert is_stressed_mood("anxious")
    assert not is_stressed_mood("Tired")
    assert not is_stressed_mood(None)
