import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from bloomcare.config.constants import (
    BLOOD_SUGAR_HIGH,
    BP_DIASTOLIC_ELEVATED,
    BP_SYSTOLIC_ELEVATED,
    MAX_PERCENTAGE,
)
from bloomcare.config.knowledge_base import DEFAULT_KNOWLEDGE_BASE, KnowledgeBase
from bloomcare.models.health import HealthSnapshot, PatientProfile, RiskAssessment
from bloomcare.models.report import GeneratedReport, ReportSource
from bloomcare.prompts.templates import RISK_MARKER, health_report_prompt
from bloomcare.services.ai_service import AIService, AIServiceError
from bloomcare.utils.pregnancy_utils import is_stressed_mood, trimester_for_week

logger = logging.getLogger(__name__)

_RISK_PATTERN = re.compile(rf"{RISK_MARKER}:\s*(\d+)", re.IGNORECASE)
_RISK_LINE_PATTERN = re.compile(rf"^.*{RISK_MARKER}:\s*\d+.*(?:\n|$)", re.IGNORECASE | re.MULTILINE)

BASELINE_RECOMMENDATIONS = (
    "Continue prenatal vitamins",
    "Stay hydrated and eat balanced meals",
    "Get adequate rest and gentle exercise",
)

CONTACT_DOCTOR_CRITERIA = (
    "Blood pressure consistently above 140/90",
    "Severe headaches or vision changes",
    "Unusual bleeding or discharge",
    "Severe abdominal pain",
)

DISCLAIMER = (
    "*This report is for informational purposes only. "
    "Always consult your healthcare provider for medical advice.*"
)


def extract_risk_percentage(ai_text: str) -> Tuple[Optional[int], str]:
    """Split an AI completion into (risk percentage, narrative).

    Returns (None, original text) when the marker is missing.
    """
    match = _RISK_PATTERN.search(ai_text)
    if not match:
        return None, ai_text.strip()
    risk = min(int(match.group(1)), MAX_PERCENTAGE)
    narrative = _RISK_LINE_PATTERN.sub("", ai_text, count=1).strip()
    return risk, narrative


def is_blood_pressure_elevated(snapshot: HealthSnapshot) -> bool:
    return snapshot.systolic > BP_SYSTOLIC_ELEVATED or snapshot.diastolic > BP_DIASTOLIC_ELEVATED


def is_blood_sugar_high(snapshot: HealthSnapshot) -> bool:
    return snapshot.blood_sugar > BLOOD_SUGAR_HIGH


class ReportGenerator:
    """Produces the daily health report.

    The AI backend is tried first when one is injected. Any failure falls
    through to the deterministic template, so generate_report always returns
    a usable report.
    """

    def __init__(
        self,
        ai_service: Optional[AIService] = None,
        knowledge_base: KnowledgeBase = DEFAULT_KNOWLEDGE_BASE,
    ):
        self.ai_service = ai_service
        self.knowledge_base = knowledge_base
        if ai_service is None:
            logger.info("No AI backend configured, reports use the deterministic generator")

    def generate_report(
        self,
        user: PatientProfile,
        snapshot: HealthSnapshot,
        assessment: RiskAssessment,
        report_date: Optional[date] = None,
    ) -> GeneratedReport:
        if self.ai_service is not None:
            try:
                return self._generate_ai_report(user, snapshot, assessment, report_date)
            except AIServiceError as e:
                logger.warning("AI report generation failed for %s, using fallback: %s", user.user_id, e)
            except Exception:
                logger.exception("Unexpected error generating AI report for %s", user.user_id)

        return GeneratedReport(
            risk_percentage=assessment.risk_percentage,
            narrative_text=self.build_fallback_narrative(user, snapshot, assessment, report_date),
            source=ReportSource.FALLBACK,
        )

    def _generate_ai_report(
        self,
        user: PatientProfile,
        snapshot: HealthSnapshot,
        assessment: RiskAssessment,
        report_date: Optional[date] = None,
    ) -> GeneratedReport:
        prompt = health_report_prompt(user, snapshot, assessment.health_score)
        ai_text = self.ai_service.generate(prompt)

        risk, narrative = extract_risk_percentage(ai_text)
        if risk is None:
            logger.info("AI report missing %s marker, using scored risk", RISK_MARKER)
            risk = assessment.risk_percentage
        if not narrative.strip():
            logger.info("AI report had no narrative besides the marker, using template narrative")
            narrative = self.build_fallback_narrative(user, snapshot, assessment, report_date)

        return GeneratedReport(
            risk_percentage=risk,
            narrative_text=narrative,
            source=ReportSource.AI,
        )

    def build_fallback_narrative(
        self,
        user: PatientProfile,
        snapshot: HealthSnapshot,
        assessment: RiskAssessment,
        report_date: Optional[date] = None,
    ) -> str:
        report_date = report_date or date.today()
        week = snapshot.gestational_week
        trimester = trimester_for_week(week)

        sections = [
            self._format_header(user, report_date, week, trimester),
            self._format_analysis(snapshot, assessment),
            self._format_week_overview(week, trimester),
            self._format_bullets("Recommendations", self._recommendations(snapshot)),
            self._format_bullets("When to Contact Your Doctor", CONTACT_DOCTOR_CRITERIA),
            DISCLAIMER,
        ]
        return "\n\n".join(sections)

    def _format_header(self, user: PatientProfile, report_date: date, week: int, trimester: int) -> str:
        return (
            f"# Health Report for {user.name}\n"
            f"**Date:** {report_date.strftime('%m/%d/%Y')}\n"
            f"**Pregnancy Week:** {week} (Trimester {trimester})"
        )

    def _format_analysis(self, snapshot: HealthSnapshot, assessment: RiskAssessment) -> str:
        if is_blood_pressure_elevated(snapshot):
            bp_flag = "(⚠️ Elevated - Monitor closely)"
        else:
            bp_flag = "(✅ Normal range)"

        if is_blood_sugar_high(snapshot):
            sugar_flag = "(⚠️ High - Dietary adjustments needed)"
        else:
            sugar_flag = "(✅ Good level)"

        return (
            "## Current Health Analysis\n"
            f"- **Blood Pressure:** {snapshot.systolic}/{snapshot.diastolic} mmHg {bp_flag}\n"
            f"- **Blood Sugar:** {snapshot.blood_sugar:g} mg/dL {sugar_flag}\n"
            f"- **Weight:** {snapshot.weight:g} lbs\n"
            f"- **Mood:** {snapshot.mood}\n"
            f"- **Overall Health Score:** {assessment.health_score}/100"
        )

    def _format_week_overview(self, week: int, trimester: int) -> str:
        template = self.knowledge_base.trimester_overview.get(trimester, "")
        return "## What's Happening This Week\n" + template.format(week=week)

    def _recommendations(self, snapshot: HealthSnapshot) -> List[str]:
        recommendations = []
        if is_blood_pressure_elevated(snapshot):
            recommendations.append("Monitor blood pressure daily and reduce salt intake")
        if is_blood_sugar_high(snapshot):
            recommendations.append("Follow diabetic diet and monitor blood sugar regularly")
        if is_stressed_mood(snapshot.mood):
            recommendations.append("Practice relaxation techniques and consider prenatal yoga")
        recommendations.extend(BASELINE_RECOMMENDATIONS)
        return recommendations

    def _format_bullets(self, title: str, items) -> str:
        return f"## {title}\n" + "\n".join(f"- {item}" for item in items)
