from .pregnancy_utils import (
    clamp_week,
    current_week,
    is_stressed_mood,
    normalize_mood,
    trimester_for_week,
)

__all__ = [
    "clamp_week",
    "current_week",
    "is_stressed_mood",
    "normalize_mood",
    "trimester_for_week",
]
