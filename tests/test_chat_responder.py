import pytest

from bloomcare.config.knowledge_base import DEFAULT_KNOWLEDGE_BASE, KnowledgeBase, SymptomGuidance, WeeklyGuidance
from bloomcare.models.health import PatientProfile
from bloomcare.models.report import DailyReport
from bloomcare.services.ai_service import AIService
from bloomcare.services.chat_responder import CHAT_RULES, ChatResponder
from bloomcare.services.risk_scorer import score

from .conftest import FakeLLM, FailingLLM, make_snapshot


def _report(**kwargs):
    snapshot = make_snapshot(**kwargs)
    return DailyReport(user_id="maria@example.com", snapshot=snapshot, assessment=score(snapshot))


@pytest.fixture
def responder():
    return ChatResponder()


def test_emergency_overrides_other_topics(responder, patient):
    answer = responder.respond("I have severe pain and heavy bleeding", patient)
    assert answer.startswith("🚨 Maria, this sounds serious.")
    assert "call 911" in answer


@pytest.mark.parametrize(
    "message",
    ["Severe headache since this morning", "I CAN'T BREATHE well", "chest pain after walking"],
)
def test_emergency_keywords_are_case_insensitive(responder, patient, message):
    assert responder.match_rule(message).name == "emergency"


@pytest.mark.parametrize(
    "message, rule",
    [
        ("I feel sick every morning", "nausea"),
        ("Is it ok to go to the gym?", "exercise"),
        ("Can I eat mango?", "mango"),
        ("Are bananas good?", "banana"),
        ("Is fish safe?", "fish"),
        ("What cheese can I have?", "cheese"),
        ("How much caffeine is ok?", "coffee"),
        ("What should I eat?", "nutrition"),
        ("How many pounds should I put on?", "weight_gain"),
        ("I can't sleep at night", "sleep"),
        ("My back pain is bad", "back_pain"),
        ("I get a migraine often", "headache"),
        ("My ankles are swelling", "swelling"),
        ("When will I feel kicks?", "fetal_movement"),
        ("I feel some tightening", "contractions"),
        ("I noticed spotting", "bleeding"),
        ("Which medicine is safe?", "medication"),
        ("I'm scared about labor", "anxiety"),
        ("Is this discharge normal?", "discharge"),
        ("Heartburn keeps me up", "heartburn"),
        ("I have constipation", "constipation"),
    ],
)
def test_topic_routing(responder, message, rule):
    assert responder.match_rule(message).name == rule


def test_earlier_rules_win_on_overlap(responder):
    # "eat" belongs to nutrition but the named food comes first
    assert responder.match_rule("can I eat fish and cheese").name == "fish"
    assert responder.match_rule("morning sickness makes me tired").name == "nausea"


def test_rule_order_is_fixed():
    names = [rule.name for rule in CHAT_RULES]
    assert names[0] == "emergency"
    assert names.index("mango") < names.index("nutrition")
    assert names[-1] == "constipation"


def test_every_rule_interpolates_name(responder):
    patient = PatientProfile(user_id="u1", name="Zoe", current_week=30)
    for rule in CHAT_RULES:
        answer = responder.fallback_response(rule.keywords[0], patient)
        assert "Zoe" in answer, rule.name


def test_nausea_is_personalized_by_week(responder):
    early = responder.respond("nausea", PatientProfile(user_id="u1", name="Ana", current_week=8))
    later = responder.respond("nausea", PatientProfile(user_id="u1", name="Ana", current_week=14))
    assert "At 8 weeks, very common in first trimester." in early
    assert "At 14 weeks, should be improving now." in later


def test_nausea_mentions_stressed_mood_from_latest_report(responder, patient):
    answer = responder.respond("nausea", patient, [_report(mood="Stressed"), _report(mood="Happy")])
    assert "I see you've been feeling stressed lately." in answer


def test_nutrition_uses_trimester_calories(responder):
    first = responder.respond("diet tips?", PatientProfile(user_id="u1", name="Ana", current_week=5))
    third = responder.respond("diet tips?", PatientProfile(user_id="u1", name="Ana", current_week=35))
    assert "you don't need extra calories yet" in first
    assert "about 450 extra calories per day" in third


def test_nutrition_mentions_recent_high_blood_pressure(responder, patient):
    answer = responder.respond("nutrition", patient, [_report(systolic=150)])
    assert "blood pressure was a bit high recently" in answer


def test_default_response_without_reports(responder, patient):
    answer = responder.respond("hello there", patient)
    assert answer.startswith("Hi Maria! I'm Dr. AI, and I know you're at 20 weeks of pregnancy.")
    assert "This week's focus: Halfway point" in answer
    assert "I can help you with:" in answer
    assert "Based on your recent health report" not in answer
    assert "Your baby stops moving" not in answer
    assert answer.endswith("What would you like to know about your pregnancy?")


def test_default_response_uses_nearest_earlier_week(responder):
    answer = responder.respond("hello", PatientProfile(user_id="u1", name="Ana", current_week=30))
    assert "This week's focus: Third trimester begins" in answer
    assert "• Your baby stops moving" in answer


def test_default_response_health_callout(responder, patient):
    reports = [_report(systolic=150, mood="Anxious")]
    answer = responder.respond("hello", patient, reports)
    assert "Based on your recent health report:" in answer
    assert "• Your health score is good (70/100), but we can improve it" in answer
    assert "I see you've been feeling anxious." in answer


def test_ai_answer_is_returned_verbatim(patient):
    llm = FakeLLM("Hi Maria! Mango is fine. Call doctor if serious symptoms")
    responder = ChatResponder(ai_service=AIService(llm))

    answer = responder.respond("Can I eat mango?", patient)

    assert answer == "Hi Maria! Mango is fine. Call doctor if serious symptoms"
    assert "Patient: Maria, 20 weeks pregnant" in llm.prompts[0]
    assert 'Question: "Can I eat mango?"' in llm.prompts[0]


def test_failing_ai_falls_back_to_rules(patient):
    responder = ChatResponder(ai_service=AIService(FailingLLM()))
    answer = responder.respond("I have severe pain and heavy bleeding", patient)
    assert answer.startswith("🚨 Maria")


def test_custom_knowledge_base_is_used(patient):
    custom = KnowledgeBase(
        weekly_guidance={1: WeeklyGuidance("Custom focus", (), "Custom advice")},
        symptoms=DEFAULT_KNOWLEDGE_BASE.symptoms,
        nutrition=DEFAULT_KNOWLEDGE_BASE.nutrition,
        exercise_by_trimester=DEFAULT_KNOWLEDGE_BASE.exercise_by_trimester,
        trimester_overview=DEFAULT_KNOWLEDGE_BASE.trimester_overview,
    )
    answer = ChatResponder(knowledge_base=custom).respond("hello", patient)
    assert "This week's focus: Custom focus" in answer
    assert "Common symptoms this week" not in answer
    assert "My advice: Custom advice" in answer


def test_symptom_and_exercise_advice_come_from_knowledge_base():
    custom = KnowledgeBase(
        weekly_guidance=DEFAULT_KNOWLEDGE_BASE.weekly_guidance,
        symptoms={
            "back pain": SymptomGuidance(
                remedies=("soak in a warm bath",),
                when_to_worry=("you have a fever",),
                early_tip="Early tip",
                later_tip="Later tip",
                tip_week=21,
            ),
        },
        nutrition=DEFAULT_KNOWLEDGE_BASE.nutrition,
        exercise_by_trimester=DEFAULT_KNOWLEDGE_BASE.exercise_by_trimester,
        trimester_overview=DEFAULT_KNOWLEDGE_BASE.trimester_overview,
        safe_exercises=("walking",),
        exercises_to_avoid=("skiing",),
    )
    responder = ChatResponder(knowledge_base=custom)
    patient = PatientProfile(user_id="maria@example.com", name="Maria", current_week=8)

    back = responder.respond("My back pain is bad", patient)
    assert "To feel better:\n• Soak in a warm bath" in back
    assert "Call your doctor if:\n• You have a fever" in back
    assert "pregnancy pillow" not in back

    exercise = responder.respond("Can I exercise?", patient)
    assert "Avoid:\n• Skiing\n\n" in exercise
    assert "Contact sports" not in exercise

    nausea = responder.respond("I feel sick", patient)
    assert "What helps:" not in nausea
    assert nausea.endswith("Call your doctor if anything feels wrong.")


def test_default_symptom_advice_lists_remedies_and_warnings(responder, patient):
    answer = responder.respond("I have heartburn after dinner", patient)
    assert "• Sleep with your head raised" in answer
    assert "Call your doctor if:\n• Heartburn is very bad\n• You can't eat\n• You keep vomiting" in answer


def test_exercise_avoid_list_adds_lying_on_back_after_first_trimester(responder):
    early = PatientProfile(user_id="a@example.com", name="Ana", current_week=12)
    later = PatientProfile(user_id="a@example.com", name="Ana", current_week=13)
    assert "Lying on your back" not in responder.respond("exercise", early)
    assert "• Lying on your back" in responder.respond("exercise", later)


@pytest.mark.parametrize(
    "message, rule",
    [
        # keywords match as substrings, so "blood" in "blood pressure" routes to bleeding
        ("is my blood pressure ok?", "bleeding"),
        # "eat" inside "great"
        ("i feel great today", "nutrition"),
    ],
)
def test_keywords_match_anywhere_in_message(responder, message, rule):
    assert responder.match_rule(message).name == rule


def test_empty_message_gets_default_response(responder, patient):
    assert responder.respond("", patient).startswith("Hi Maria!")
