import pytest

from bloomcare.services.risk_scorer import RiskScorer, score

from .conftest import make_snapshot


def test_score_is_deterministic():
    snapshot = make_snapshot(systolic=150, diastolic=95, blood_sugar=130, mood="Anxious", week=10)
    assert score(snapshot) == score(snapshot)


def test_healthy_snapshot_scores_best():
    assessment = score(make_snapshot(systolic=120, diastolic=80, blood_sugar=100, mood="Happy", week=20))
    assert assessment.health_score == 100
    assert assessment.risk_percentage == 10
    assert not assessment.is_high_risk


def test_early_hypertension_with_anxiety():
    assessment = score(make_snapshot(systolic=150, diastolic=95, blood_sugar=130, mood="Anxious", week=10))
    assert assessment.health_score == 70
    # 10 base + 25 BP tier + 10 sugar tier + 15 mood + 10 early pregnancy
    assert assessment.risk_percentage == 70
    assert assessment.is_high_risk


def test_early_hypertension_with_anxiety_below_sugar_tier():
    assessment = score(make_snapshot(systolic=150, diastolic=95, blood_sugar=110, mood="Anxious", week=10))
    assert assessment.risk_percentage == 60
    assert not assessment.is_high_risk


def test_systolic_severity_is_monotonic():
    risks = [score(make_snapshot(systolic=s)).risk_percentage for s in (120, 145, 165)]
    assert risks == [10, 35, 50]


@pytest.mark.parametrize(
    "systolic, diastolic, expected",
    [
        (129, 84, 10),
        (130, 70, 20),
        (110, 85, 20),
        (140, 70, 35),
        (110, 90, 35),
        (160, 70, 50),
        (110, 100, 50),
    ],
)
def test_blood_pressure_uses_highest_matching_tier(systolic, diastolic, expected):
    assert score(make_snapshot(systolic=systolic, diastolic=diastolic)).risk_percentage == expected


@pytest.mark.parametrize("blood_sugar, expected", [(119, 10), (120, 20), (140, 30), (180, 40)])
def test_blood_sugar_tiers(blood_sugar, expected):
    assert score(make_snapshot(blood_sugar=blood_sugar)).risk_percentage == expected


def test_blood_sugar_penalty_on_health_score_is_strictly_above_threshold():
    assert score(make_snapshot(blood_sugar=140)).health_score == 100
    assert score(make_snapshot(blood_sugar=141)).health_score == 85


def test_mood_comparison_ignores_case_and_whitespace():
    upper = score(make_snapshot(mood="Stressed"))
    lower = score(make_snapshot(mood="  stressed "))
    assert upper == lower
    assert upper.health_score == 90
    assert upper.risk_percentage == 25


def test_tired_mood_adds_small_risk_only():
    assessment = score(make_snapshot(mood="Tired"))
    assert assessment.health_score == 100
    assert assessment.risk_percentage == 15


def test_late_pregnancy_hypertension():
    assessment = score(make_snapshot(systolic=145, week=33))
    assert assessment.risk_percentage == 10 + 25 + 15
    assert score(make_snapshot(systolic=145, week=32)).risk_percentage == 35


def test_early_pregnancy_high_sugar():
    assert score(make_snapshot(blood_sugar=150, week=11)).risk_percentage == 10 + 20 + 10


def test_worst_case_is_clamped():
    assessment = score(make_snapshot(systolic=200, diastolic=120, blood_sugar=300, mood="Anxious", week=38))
    assert assessment.risk_percentage == 100
    assert assessment.health_score == 55
    assert 0 <= assessment.health_score <= 100


def test_scorer_instance_matches_module_function():
    snapshot = make_snapshot(systolic=135, blood_sugar=125, mood="Tired")
    assert RiskScorer().score(snapshot) == score(snapshot)
