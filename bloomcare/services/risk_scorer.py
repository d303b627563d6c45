from typing import Tuple

from bloomcare.config.constants import (
    BASE_HEALTH_SCORE,
    BASE_RISK_PERCENTAGE,
    BLOOD_SUGAR_HIGH,
    BP_DIASTOLIC_ELEVATED,
    BP_SYSTOLIC_ELEVATED,
    EARLY_PREGNANCY_WEEK,
    LATE_PREGNANCY_WEEK,
    MAX_PERCENTAGE,
)
from bloomcare.models.health import HealthSnapshot, RiskAssessment
from bloomcare.utils.pregnancy_utils import is_stressed_mood, normalize_mood


class RiskScorer:
    """Rule-based scoring of a daily health snapshot.

    Two independent heuristics are produced. The health score is a coarse UI
    gauge; the risk percentage is finer grained and drives high-risk alerts.
    """

    BP_PENALTY = 20
    SUGAR_PENALTY = 15
    MOOD_PENALTY = 10

    # (systolic, diastolic, increment), highest tier first
    BP_TIERS: Tuple[Tuple[int, int, int], ...] = (
        (160, 100, 40),
        (140, 90, 25),
        (130, 85, 10),
    )
    # (blood sugar, increment), highest tier first
    SUGAR_TIERS: Tuple[Tuple[float, int], ...] = (
        (180, 30),
        (140, 20),
        (120, 10),
    )
    STRESS_RISK = 15
    TIRED_RISK = 5
    EARLY_COMPLICATION_RISK = 10
    LATE_HYPERTENSION_RISK = 15

    def score(self, snapshot: HealthSnapshot) -> RiskAssessment:
        return RiskAssessment(
            health_score=self.health_score(snapshot),
            risk_percentage=self.risk_percentage(snapshot),
        )

    def health_score(self, snapshot: HealthSnapshot) -> int:
        health = BASE_HEALTH_SCORE
        if snapshot.systolic > BP_SYSTOLIC_ELEVATED or snapshot.diastolic > BP_DIASTOLIC_ELEVATED:
            health -= self.BP_PENALTY
        if snapshot.blood_sugar > BLOOD_SUGAR_HIGH:
            health -= self.SUGAR_PENALTY
        if is_stressed_mood(snapshot.mood):
            health -= self.MOOD_PENALTY
        return max(health, 0)

    def risk_percentage(self, snapshot: HealthSnapshot) -> int:
        risk = BASE_RISK_PERCENTAGE
        risk += self._blood_pressure_risk(snapshot.systolic, snapshot.diastolic)
        risk += self._blood_sugar_risk(snapshot.blood_sugar)
        risk += self._mood_risk(snapshot.mood)
        risk += self._week_risk(snapshot)
        return min(risk, MAX_PERCENTAGE)

    def _blood_pressure_risk(self, systolic: int, diastolic: int) -> int:
        for min_systolic, min_diastolic, increment in self.BP_TIERS:
            if systolic >= min_systolic or diastolic >= min_diastolic:
                return increment
        return 0

    def _blood_sugar_risk(self, blood_sugar: float) -> int:
        for min_sugar, increment in self.SUGAR_TIERS:
            if blood_sugar >= min_sugar:
                return increment
        return 0

    def _mood_risk(self, mood: str) -> int:
        if is_stressed_mood(mood):
            return self.STRESS_RISK
        if normalize_mood(mood) == "tired":
            return self.TIRED_RISK
        return 0

    def _week_risk(self, snapshot: HealthSnapshot) -> int:
        risk = 0
        week = snapshot.gestational_week
        if week < EARLY_PREGNANCY_WEEK and (
            snapshot.systolic > BP_SYSTOLIC_ELEVATED or snapshot.blood_sugar > BLOOD_SUGAR_HIGH
        ):
            risk += self.EARLY_COMPLICATION_RISK
        if week > LATE_PREGNANCY_WEEK and snapshot.systolic > BP_SYSTOLIC_ELEVATED:
            risk += self.LATE_HYPERTENSION_RISK
        return risk


_default_scorer = RiskScorer()


def score(snapshot: HealthSnapshot) -> RiskAssessment:
    return _default_scorer.score(snapshot)
