import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from bloomcare.config.constants import BP_SYSTOLIC_ELEVATED, EARLY_PREGNANCY_WEEK, FETAL_MOVEMENT_WEEK
from bloomcare.config.knowledge_base import DEFAULT_KNOWLEDGE_BASE, KnowledgeBase, SymptomGuidance
from bloomcare.models.health import PatientProfile
from bloomcare.models.report import DailyReport
from bloomcare.prompts.templates import chat_prompt
from bloomcare.services.ai_service import AIService, AIServiceError
from bloomcare.utils.pregnancy_utils import is_stressed_mood, normalize_mood, trimester_for_week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatContext:
    message: str
    name: str
    week: int
    trimester: int
    recent_reports: Tuple[DailyReport, ...]
    knowledge_base: KnowledgeBase

    @property
    def latest_report(self) -> Optional[DailyReport]:
        return self.recent_reports[0] if self.recent_reports else None


@dataclass(frozen=True)
class ChatRule:
    name: str
    keywords: Tuple[str, ...]
    build: Callable[[ChatContext], str]

    def matches(self, message: str) -> bool:
        return any(keyword in message for keyword in self.keywords)


def _bullets(items) -> str:
    return "\n".join(f"• {item}" for item in items)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _remedies(guidance: Optional[SymptomGuidance]) -> str:
    if guidance is None or not guidance.remedies:
        return ""
    return "To feel better:\n" + _bullets(_capitalize(r) for r in guidance.remedies) + "\n\n"


def _when_to_call(guidance: Optional[SymptomGuidance]) -> str:
    if guidance is None or not guidance.when_to_worry:
        return "Call your doctor if anything feels wrong."
    return "Call your doctor if:\n" + _bullets(_capitalize(w) for w in guidance.when_to_worry)


def _emergency(ctx: ChatContext) -> str:
    return (
        f"🚨 {ctx.name}, this sounds serious. Please go to the hospital right away or call 911 "
        "(or your local emergency number). Don't wait - your safety and your baby's safety come first."
    )


def _nausea(ctx: ChatContext) -> str:
    guidance = ctx.knowledge_base.symptom("morning sickness")
    tip = guidance.personalized_tip(ctx.week) if guidance else "Nausea is common in pregnancy"

    response = f"Hi {ctx.name}! At {ctx.week} weeks, {tip.lower()}.\n\n"
    if guidance is not None and guidance.remedies:
        response += "What helps:\n" + _bullets(_capitalize(r) for r in guidance.remedies) + "\n\n"

    latest = ctx.latest_report
    if latest is not None and is_stressed_mood(latest.mood):
        response += (
            f"I see you've been feeling {normalize_mood(latest.mood)} lately. "
            "This can make nausea worse, so try to rest when you can.\n\n"
        )

    response += _when_to_call(guidance)
    return response.rstrip()


def _exercise(ctx: ChatContext) -> str:
    guidance = ctx.knowledge_base.exercise_by_trimester.get(ctx.trimester, "Stay active and listen to your body")

    response = f"{ctx.name}, exercise is great during pregnancy! At {ctx.week} weeks: {guidance}\n\n"
    safe = ctx.knowledge_base.safe_exercises or ("walking",)
    response += "Safe exercises for you:\n" + _bullets(_capitalize(e) for e in safe) + "\n\n"

    if ctx.trimester == 1:
        response += "Since you're in your first trimester, start slowly and listen to your body.\n\n"
    elif ctx.trimester == 2:
        response += "Great news! Second trimester is the best time for exercise as your energy returns.\n\n"
    else:
        response += "In your third trimester, modify exercises as needed and avoid getting too hot.\n\n"

    avoid = [_capitalize(e) for e in ctx.knowledge_base.exercises_to_avoid]
    if ctx.week > EARLY_PREGNANCY_WEEK:
        avoid.append("Lying on your back")
    if avoid:
        response += "Avoid:\n" + _bullets(avoid) + "\n\n"

    response += "Stop and call your doctor if you feel:\n" + _bullets([
        "Dizzy or short of breath",
        "Chest pain",
        "Bleeding",
        "Contractions",
    ])
    return response


def _mango(ctx: ChatContext) -> str:
    return (
        f"Yes, {ctx.name}! Mangoes are safe and healthy at {ctx.week} weeks. They're rich in vitamin C, "
        "folate, and fiber - all great for you and your baby.\n\n"
        "Benefits:\n" + _bullets([
            "High in vitamin C (boosts immunity)",
            "Contains folate (prevents birth defects)",
            "Good source of fiber (helps with constipation)",
            "Natural sugars for energy",
        ]) + "\n\nJust wash them well before eating and enjoy in moderation as part of a balanced diet."
    )


def _banana(ctx: ChatContext) -> str:
    return (
        f"Absolutely, {ctx.name}! Bananas are excellent during pregnancy.\n\n"
        "Benefits:\n" + _bullets([
            "Rich in potassium (helps with leg cramps)",
            "Contains vitamin B6 (reduces nausea)",
            "Good source of fiber",
            "Natural energy boost",
        ]) + "\n\nThey're especially helpful if you have morning sickness or leg cramps."
    )


def _fish(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, fish can be safe during pregnancy, but choose carefully:\n\n"
        "Safe fish (2-3 servings per week):\n" + _bullets([
            "Salmon, sardines, anchovies",
            "Shrimp, crab, lobster",
            "Tilapia, cod, catfish",
        ]) + "\n\nAvoid:\n" + _bullets([
            "Shark, swordfish, king mackerel",
            "Raw fish (sushi, sashimi)",
            "High-mercury fish",
        ]) + "\n\nAlways cook fish thoroughly to 145°F."
    )


def _cheese(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, most cheese is safe during pregnancy:\n\n"
        "Safe cheeses:\n" + _bullets([
            "Hard cheeses (cheddar, swiss, parmesan)",
            "Pasteurized soft cheeses",
            "Cream cheese, cottage cheese",
            "Mozzarella, ricotta",
        ]) + "\n\nAvoid:\n" + _bullets([
            "Unpasteurized soft cheeses",
            "Blue cheese, brie, camembert",
            "Queso fresco, feta (unless pasteurized)",
        ]) + "\n\nAlways check the label for 'pasteurized'."
    )


def _coffee(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, you can have some caffeine, but limit it:\n\n"
        "Safe amount:\n" + _bullets([
            "Up to 200mg per day (about 1 cup of coffee)",
            "This includes tea, chocolate, and soda",
        ]) + "\n\nWhy limit caffeine:\n" + _bullets([
            "Too much can increase miscarriage risk",
            "Can affect baby's growth",
            "May cause sleep problems",
        ]) + "\n\nTry decaf coffee or herbal teas as alternatives."
    )


def _nutrition(ctx: ChatContext) -> str:
    response = f"{ctx.name}, good nutrition is so important at {ctx.week} weeks!\n\n"
    nutrition = ctx.knowledge_base.nutrition_for(ctx.trimester)

    if nutrition is None or nutrition.extra_calories == 0:
        response += "Good news - you don't need extra calories yet in your first trimester.\n\n"
    else:
        response += f"You need about {nutrition.extra_calories} extra calories per day now.\n\n"

    if nutrition is not None:
        response += "Focus on these nutrients:\n" + _bullets(_capitalize(n) for n in nutrition.focus)
        response += "\n\nEat plenty of:\n" + _bullets(_capitalize(f) for f in nutrition.foods)
        response += "\n\nAvoid:\n" + _bullets(_capitalize(a) for a in nutrition.avoid) + "\n\n"

    response += "Take your prenatal vitamins every day!"

    latest = ctx.latest_report
    if latest is not None and latest.snapshot.systolic > BP_SYSTOLIC_ELEVATED:
        response += (
            "\n\nI noticed your blood pressure was a bit high recently. Try to limit salt "
            "and eat more potassium-rich foods like bananas."
        )
    return response


def _weight_gain(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, healthy weight gain depends on your starting weight.\n\n"
        "General guidelines:\n" + _bullets([
            "Underweight: gain 28-40 pounds",
            "Normal weight: gain 25-35 pounds",
            "Overweight: gain 15-25 pounds",
            "Obese: gain 11-20 pounds",
        ]) + "\n\n"
        f"At {ctx.week} weeks, gain weight slowly and steadily - about 1-2 lbs per week in the 2nd "
        "and 3rd trimesters. Focus on eating healthy foods, not just eating more.\n\n"
        "Talk to your doctor about what's right for you."
    )


def _sleep(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, sleep troubles are common at {ctx.week} weeks due to hormonal changes, "
        "physical discomfort, and anxiety.\n\n"
        "To sleep better:\n" + _bullets([
            "Sleep on your left side with a pillow between your knees",
            "Keep a regular bedtime routine",
            "Avoid screens before bed",
            "Keep your room cool and dark",
            "Short naps (20-30 minutes) are fine",
        ]) + "\n\nTalk to your doctor about severe insomnia, snoring with pauses in breathing, "
        "or extreme daytime fatigue."
    )


def _back_pain(ctx: ChatContext) -> str:
    guidance = ctx.knowledge_base.symptom("back pain")
    tip = f" {guidance.personalized_tip(ctx.week)}." if guidance else ""
    return (
        f"{ctx.name}, back pain is very common during pregnancy.{tip}\n\n"
        + _remedies(guidance)
        + _when_to_call(guidance)
    )


def _headache(ctx: ChatContext) -> str:
    response = (
        f"{ctx.name}, headaches are common in pregnancy, especially early on.\n\n"
        "To help:\n" + _bullets([
            "Rest in a quiet, dark room",
            "Put a cold compress on your head",
            "Drink plenty of water",
            "Eat regular meals",
            "Get enough sleep",
            "You can take acetaminophen (Tylenol) if needed - avoid ibuprofen and aspirin",
        ]) + "\n\n"
    )
    if ctx.week >= 20:
        response += (
            f"At {ctx.week} weeks, a severe headache with vision changes or swelling can be a sign "
            "of preeclampsia. Call your doctor right away if that happens."
        )
    else:
        response += "Call your doctor right away if you have severe headaches with blurred vision or swelling."
    return response


def _swelling(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, mild swelling in your feet, ankles, and hands is normal, especially in the "
        "third trimester.\n\n"
        "To help:\n" + _bullets([
            "Put your feet up when you can",
            "Wear comfortable shoes",
            "Avoid standing for long periods",
            "Stay hydrated",
        ]) + "\n\nSudden or severe swelling of your face and hands, with headaches or vision "
        "changes, could mean preeclampsia and needs medical attention right away."
    )


def _fetal_movement(ctx: ChatContext) -> str:
    response = f"{ctx.name}, you'll usually feel your baby move between 16-25 weeks.\n\n"
    if ctx.week >= FETAL_MOVEMENT_WEEK:
        response += f"At {ctx.week} weeks, you should feel your baby move every day.\n\n"
    else:
        response += f"At {ctx.week} weeks, movements may still be irregular. They become regular by 28 weeks.\n\n"
    response += "Count kicks: You should feel at least 10 movements in 2 hours.\n\n"
    response += "Call your doctor right away if:\n" + _bullets([
        "Your baby stops moving",
        "Movements become much less than usual",
        "You're worried about the movements",
    ])
    return response


def _contractions(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, Braxton Hicks (practice) contractions are normal. They are irregular, "
        "usually painless, and stop when you change position. True labor contractions are "
        "regular, get stronger, and don't stop with movement.\n\n"
        f"You're at {ctx.week} weeks. Call your doctor right away if:\n" + _bullets([
            "You have regular contractions before 37 weeks",
            "Contractions are 5 minutes apart for 1 hour after 37 weeks",
            "Contractions come with bleeding or fluid leaking",
        ])
    )


def _bleeding(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, any bleeding during pregnancy should be checked. Light spotting in early "
        "pregnancy can be normal, but heavy bleeding, bleeding with cramping, or bleeding later "
        f"in pregnancy needs immediate medical attention.\n\nAt {ctx.week} weeks, please contact "
        "your doctor right away if you notice any bleeding."
    )


def _medication(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, medication safety is very important during pregnancy.\n\n" + _bullets([
            "Always ask your doctor before taking any medicine or supplement",
            "Generally safe: acetaminophen for pain or fever",
            "Avoid: ibuprofen, aspirin (unless prescribed), most herbal supplements",
            "Keep taking your prenatal vitamins",
            "Never stop a prescribed medicine without talking to your doctor",
        ])
    )


def _anxiety(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, it's completely normal to have worries at {ctx.week} weeks - it shows how much "
        "you care about your baby.\n\n"
        "What helps:\n" + _bullets([
            "Practice relaxation or breathing exercises",
            "Stay informed but avoid too much internet searching",
            "Keep in touch with friends and family",
            "Share your worries with your doctor",
        ]) + "\n\nIf anxiety is affecting your daily life, ask your doctor about counseling and support."
    )


def _discharge(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, some discharge is normal during pregnancy.\n\n"
        "Normal discharge is:\n" + _bullets([
            "Clear or white",
            "No strong smell",
            "No itching",
        ]) + "\n\nCall your doctor if you have:\n" + _bullets([
            "Strong fishy smell",
            "Yellow or green color",
            "Itching or burning",
            "Blood in discharge",
        ]) + "\n\nYeast infections are common during pregnancy and can be treated safely."
    )


def _heartburn(ctx: ChatContext) -> str:
    guidance = ctx.knowledge_base.symptom("heartburn")
    tip = f" {guidance.personalized_tip(ctx.week)}." if guidance else ""
    return (
        f"{ctx.name}, heartburn is very common during pregnancy.{tip}\n\n"
        + _remedies(guidance)
        + _when_to_call(guidance)
    )


def _constipation(ctx: ChatContext) -> str:
    return (
        f"{ctx.name}, constipation is common during pregnancy.\n\n"
        "To help:\n" + _bullets([
            "Eat more fruits, vegetables, and whole grains",
            "Drink lots of water (8-10 glasses daily)",
            "Walk every day",
            "Try prunes or prune juice",
            "Ask your doctor about safe stool softeners",
        ]) + "\n\nCall your doctor if you haven't had a bowel movement for 3 days."
    )


# Evaluated in order; the first matching rule answers.
CHAT_RULES: Tuple[ChatRule, ...] = (
    ChatRule("emergency", ("severe pain", "heavy bleeding", "can't breathe", "chest pain", "severe headache"), _emergency),
    ChatRule("nausea", ("nausea", "morning sickness", "vomit", "sick"), _nausea),
    ChatRule("exercise", ("exercise", "workout", "physical activity", "gym"), _exercise),
    ChatRule("mango", ("mango",), _mango),
    ChatRule("banana", ("banana",), _banana),
    ChatRule("fish", ("fish",), _fish),
    ChatRule("cheese", ("cheese",), _cheese),
    ChatRule("coffee", ("coffee", "caffeine"), _coffee),
    ChatRule("nutrition", ("nutrition", "diet", "food", "eat", "vitamin"), _nutrition),
    ChatRule("weight_gain", ("weight", "gain", "pounds"), _weight_gain),
    ChatRule("sleep", ("sleep", "tired", "insomnia"), _sleep),
    ChatRule("back_pain", ("back pain", "backache", "spine"), _back_pain),
    ChatRule("headache", ("headache", "migraine", "head pain"), _headache),
    ChatRule("swelling", ("swelling", "edema", "puffy"), _swelling),
    ChatRule("fetal_movement", ("baby movement", "kicks", "fetal movement", "baby moving"), _fetal_movement),
    ChatRule("contractions", ("contraction", "tightening", "cramping"), _contractions),
    ChatRule("bleeding", ("bleeding", "spotting", "blood"), _bleeding),
    ChatRule("medication", ("medication", "medicine", "drug", "pill"), _medication),
    ChatRule("anxiety", ("worried", "concern", "scared", "anxiety"), _anxiety),
    ChatRule("discharge", ("discharge", "infection", "itch"), _discharge),
    ChatRule("heartburn", ("heartburn", "acid reflux", "indigestion"), _heartburn),
    ChatRule("constipation", ("constipation", "bowel", "poop"), _constipation),
)


class ChatResponder:
    """Answers pregnancy questions.

    The AI backend answers first when available; the ordered keyword rules
    take over when it is missing or fails, so respond never raises.
    """

    def __init__(
        self,
        ai_service: Optional[AIService] = None,
        knowledge_base: KnowledgeBase = DEFAULT_KNOWLEDGE_BASE,
        rules: Sequence[ChatRule] = CHAT_RULES,
    ):
        self.ai_service = ai_service
        self.knowledge_base = knowledge_base
        self.rules = tuple(rules)

    def respond(
        self,
        message: str,
        user: PatientProfile,
        recent_reports: Sequence[DailyReport] = (),
    ) -> str:
        if self.ai_service is not None:
            try:
                return self.ai_service.generate(chat_prompt(user, message))
            except AIServiceError as e:
                logger.warning("AI chat failed for %s, using rule engine: %s", user.user_id, e)
            except Exception:
                logger.exception("Unexpected error in AI chat for %s", user.user_id)

        return self.fallback_response(message, user, recent_reports)

    def fallback_response(
        self,
        message: str,
        user: PatientProfile,
        recent_reports: Sequence[DailyReport] = (),
    ) -> str:
        ctx = ChatContext(
            message=(message or "").lower(),
            name=user.name,
            week=user.current_week,
            trimester=trimester_for_week(user.current_week),
            recent_reports=tuple(recent_reports or ()),
            knowledge_base=self.knowledge_base,
        )
        rule = self.match_rule(ctx.message)
        if rule is not None:
            return rule.build(ctx)
        return self._default_response(ctx)

    def match_rule(self, message: str) -> Optional[ChatRule]:
        lowered = (message or "").lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule
        return None

    def _default_response(self, ctx: ChatContext) -> str:
        response = f"Hi {ctx.name}! I'm Dr. AI, and I know you're at {ctx.week} weeks of pregnancy.\n\n"

        guidance = ctx.knowledge_base.guidance_for_week(ctx.week)
        if guidance is not None:
            response += f"This week's focus: {guidance.focus}\n"
            if guidance.symptoms:
                response += f"Common symptoms this week: {', '.join(guidance.symptoms)}\n"
            response += f"My advice: {guidance.advice}\n\n"

        response += "I can help you with:\n" + _bullets([
            "Your pregnancy symptoms",
            "What's normal at your stage",
            "When to call your doctor",
            "Healthy habits for you and baby",
        ]) + "\n\n"

        latest = ctx.latest_report
        if latest is not None:
            response += self._health_callout(latest)

        response += (
            "Remember: This is personalized advice based on your data, but always talk to your "
            "own doctor about your specific situation.\n\n"
        )
        warnings = ["Severe pain", "Heavy bleeding", "Severe headaches", "Trouble breathing"]
        if ctx.week >= FETAL_MOVEMENT_WEEK:
            warnings.append("Your baby stops moving")
        response += "Call your doctor right away if you have:\n" + _bullets(warnings)
        response += "\n\nWhat would you like to know about your pregnancy?"
        return response

    def _health_callout(self, latest: DailyReport) -> str:
        score = latest.health_score
        callout = "Based on your recent health report:\n"
        if score >= 80:
            callout += f"• Your health score is great ({score}/100)!\n"
        elif score >= 60:
            callout += f"• Your health score is good ({score}/100), but we can improve it\n"
        else:
            callout += f"• Let's work on improving your health score ({score}/100)\n"

        if is_stressed_mood(latest.mood):
            callout += (
                f"• I see you've been feeling {normalize_mood(latest.mood)}. "
                "This is normal, but let's talk about it\n"
            )
        return callout + "\n"
