"""
Medical knowledge base used by the report generator and the chat responder.

Every table is read-only once built. Services receive a KnowledgeBase
instance through their constructor, so tests can swap in alternate datasets
without touching module state.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class WeeklyGuidance:
    focus: str
    symptoms: Tuple[str, ...]
    advice: str


@dataclass(frozen=True)
class SymptomGuidance:
    remedies: Tuple[str, ...]
    when_to_worry: Tuple[str, ...]
    early_tip: str
    later_tip: str
    # early_tip applies strictly before this week
    tip_week: int

    def personalized_tip(self, week: int) -> str:
        return self.early_tip if week < self.tip_week else self.later_tip


@dataclass(frozen=True)
class NutritionGuidance:
    extra_calories: int
    focus: Tuple[str, ...]
    foods: Tuple[str, ...]
    avoid: Tuple[str, ...]


@dataclass(frozen=True)
class KnowledgeBase:
    weekly_guidance: Mapping[int, WeeklyGuidance]
    symptoms: Mapping[str, SymptomGuidance]
    nutrition: Mapping[int, NutritionGuidance]
    exercise_by_trimester: Mapping[int, str]
    trimester_overview: Mapping[int, str]
    safe_exercises: Tuple[str, ...] = ()
    exercises_to_avoid: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in (
            "weekly_guidance",
            "symptoms",
            "nutrition",
            "exercise_by_trimester",
            "trimester_overview",
        ):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def guidance_for_week(self, week: int) -> Optional[WeeklyGuidance]:
        """Latest guidance entry at or before ``week``."""
        candidates = [w for w in self.weekly_guidance if w <= week]
        if not candidates:
            return None
        return self.weekly_guidance[max(candidates)]

    def nutrition_for(self, trimester: int) -> Optional[NutritionGuidance]:
        return self.nutrition.get(trimester)

    def symptom(self, name: str) -> Optional[SymptomGuidance]:
        return self.symptoms.get(name)


DEFAULT_KNOWLEDGE_BASE = KnowledgeBase(
    weekly_guidance={
        1: WeeklyGuidance("Early pregnancy care", ("fatigue", "nausea"), "Start prenatal vitamins, avoid alcohol"),
        4: WeeklyGuidance("Embryo development", ("morning sickness", "breast tenderness"), "Eat small frequent meals"),
        8: WeeklyGuidance("First prenatal visit", ("nausea", "fatigue"), "Schedule first doctor visit"),
        12: WeeklyGuidance("End of first trimester", ("nausea improving",), "Consider sharing pregnancy news"),
        16: WeeklyGuidance("Anatomy scan preparation", ("energy returning",), "Schedule anatomy scan"),
        20: WeeklyGuidance("Halfway point", ("baby movements",), "Start feeling baby kicks"),
        24: WeeklyGuidance("Glucose screening", ("back pain",), "Glucose tolerance test"),
        28: WeeklyGuidance("Third trimester begins", ("shortness of breath",), "More frequent checkups"),
        32: WeeklyGuidance("Baby growth spurt", ("heartburn", "swelling"), "Monitor baby movements daily"),
        36: WeeklyGuidance("Full term approaching", ("pelvic pressure",), "Prepare hospital bag"),
        40: WeeklyGuidance("Due date", ("contractions",), "Watch for labor signs"),
    },
    symptoms={
        "morning sickness": SymptomGuidance(
            remedies=(
                "eat small meals every 2-3 hours",
                "keep crackers by your bed",
                "try ginger tea or ginger candies",
                "sip water slowly throughout the day",
                "avoid strong smells",
            ),
            when_to_worry=(
                "you can't keep water down for 24 hours",
                "you're losing weight",
                "you feel very weak or dizzy",
            ),
            early_tip="Very common in first trimester",
            later_tip="Should be improving now",
            tip_week=12,
        ),
        "back pain": SymptomGuidance(
            remedies=(
                "use a pregnancy pillow when sleeping",
                "wear comfortable, low-heeled shoes",
                "try gentle stretching or prenatal yoga",
                "use a warm compress",
                "avoid heavy lifting and standing for long periods",
            ),
            when_to_worry=(
                "the pain is severe",
                "the pain goes down your leg",
                "you feel numbness",
            ),
            early_tip="May be early pregnancy symptom",
            later_tip="Common as baby grows",
            tip_week=21,
        ),
        "heartburn": SymptomGuidance(
            remedies=(
                "eat smaller meals more often",
                "avoid spicy and fatty foods",
                "don't lie down right after eating",
                "sleep with your head raised",
                "try Tums or Rolaids (they're safe)",
            ),
            when_to_worry=(
                "heartburn is very bad",
                "you can't eat",
                "you keep vomiting",
            ),
            early_tip="May start in second trimester",
            later_tip="Very common in third trimester",
            tip_week=25,
        ),
    },
    nutrition={
        1: NutritionGuidance(
            0,
            ("folic acid", "iron", "avoiding harmful foods"),
            ("leafy greens", "citrus fruits", "fortified cereals"),
            ("raw fish", "alcohol", "high mercury fish"),
        ),
        2: NutritionGuidance(
            340,
            ("calcium", "protein", "healthy weight gain"),
            ("dairy", "lean meat", "whole grains"),
            ("unpasteurized cheese", "raw eggs"),
        ),
        3: NutritionGuidance(
            450,
            ("iron", "calcium", "omega-3"),
            ("fish", "nuts", "vegetables"),
            ("excessive caffeine", "large fish"),
        ),
    },
    exercise_by_trimester={
        1: "Light exercise, listen to body",
        2: "Best time for exercise, energy returns",
        3: "Modify as needed, avoid overheating",
    },
    trimester_overview={
        1: (
            "During week {week}, your baby is rapidly developing. You may experience "
            "morning sickness, fatigue, and breast tenderness."
        ),
        2: (
            "Week {week} brings increased energy and reduced nausea. Your baby is growing "
            "quickly and you may start feeling movements."
        ),
        3: (
            "At week {week}, your baby is preparing for birth. You may experience increased "
            "discomfort and Braxton Hicks contractions."
        ),
    },
    safe_exercises=("walking", "swimming", "prenatal yoga", "stationary bike"),
    exercises_to_avoid=(
        "contact sports",
        "activities where you might fall",
        "hot yoga",
        "getting too hot",
    ),
)
