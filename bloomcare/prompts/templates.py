"""
Prompt templates for the generative AI backend.

Keeping prompts in a dedicated module separates them from the generation
logic, making them easier to read and iterate on without touching services.
"""

from bloomcare.models.health import HealthSnapshot, PatientProfile
from bloomcare.utils.pregnancy_utils import trimester_for_week

RISK_MARKER = "RISK_PERCENTAGE"


def health_report_prompt(
    user: PatientProfile,
    snapshot: HealthSnapshot,
    health_score: int,
) -> str:
    week = snapshot.gestational_week
    return (
        "You are Dr. AI, a maternal health specialist. Analyze this pregnancy health data and provide:\n"
        "1. RISK PERCENTAGE (0-100) based on the health metrics\n"
        "2. Comprehensive health report\n\n"
        f"Patient: {user.name}\n"
        f"Pregnancy Week: {week}\n"
        f"Trimester: {trimester_for_week(week)}\n\n"
        "Health Data:\n"
        f"- Blood Pressure: {snapshot.systolic}/{snapshot.diastolic} mmHg\n"
        f"- Blood Sugar: {snapshot.blood_sugar} mg/dL\n"
        f"- Weight: {snapshot.weight} lbs\n"
        f"- Mood: {snapshot.mood}\n"
        f"- Notes: {snapshot.notes or 'None'}\n"
        f"- Health Score: {health_score}/100\n\n"
        "FORMAT YOUR RESPONSE EXACTLY LIKE THIS:\n"
        f"{RISK_MARKER}: [number 0-100]\n\n"
        "[Your detailed health analysis here]\n\n"
        "Risk Assessment Guidelines:\n"
        "- 0-20%: Low risk (normal values, good mood)\n"
        "- 21-40%: Mild risk (slightly elevated values)\n"
        "- 41-60%: Moderate risk (concerning values, stress)\n"
        "- 61-80%: High risk (multiple elevated values)\n"
        "- 81-100%: Very high risk (dangerous values requiring immediate attention)\n\n"
        "Consider: Blood pressure >140/90, blood sugar >140, stress/anxiety, pregnancy week complications.\n\n"
        "Provide detailed analysis covering:\n"
        "1. Current Health Analysis\n"
        "2. Body Changes This Week\n"
        "3. Specific Recommendations\n"
        "4. When to Contact Doctor\n"
        "5. Encouragement"
    )


def chat_prompt(user: PatientProfile, message: str) -> str:
    return (
        "You are Dr. AI, a pregnancy doctor. Give SHORT, simple answers.\n\n"
        f"Patient: {user.name}, {user.current_week} weeks pregnant\n"
        f'Question: "{message}"\n\n'
        "RULES:\n"
        "• Keep answer under 100 words\n"
        "• Use 3-4 bullet points maximum\n"
        f'• Start with "Hi {user.name}!"\n'
        "• Be direct and helpful\n"
        '• Add "Call doctor if serious symptoms" at end\n\n'
        "Response:"
    )
