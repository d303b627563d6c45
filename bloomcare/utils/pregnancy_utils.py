import math
from datetime import date
from typing import Optional

from bloomcare.config.constants import MAX_WEEK, MIN_WEEK, TRIMESTER_WEEKS

_STRESSED_MOODS = {"stressed", "anxious"}


def clamp_week(week: int) -> int:
    return max(MIN_WEEK, min(int(week), MAX_WEEK))


def trimester_for_week(week: int) -> int:
    """Trimester as ceil(week / 13.33), kept within 1-3.

    Week 40 divides to just over 3, so the upper bound is clamped.
    """
    return max(1, min(math.ceil(week / TRIMESTER_WEEKS), 3))


def current_week(pregnancy_start_date: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    weeks_passed = (today - pregnancy_start_date).days // 7
    return clamp_week(weeks_passed + 1)


def normalize_mood(mood: Optional[str]) -> str:
    return (mood or "").strip().lower()


def is_stressed_mood(mood: Optional[str]) -> bool:
    return normalize_mood(mood) in _STRESSED_MOODS
