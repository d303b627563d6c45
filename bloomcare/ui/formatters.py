import html
from typing import Any, Dict, Optional, Sequence

from bloomcare.models.chat import ChatExchange
from bloomcare.models.report import DailyReport, HighRiskAlert
from bloomcare.services.alerts import is_high_risk


def format_daily_report(record: DailyReport, alert: Optional[HighRiskAlert] = None) -> str:
    output = ""
    if alert is not None:
        output += format_alert(alert)
    output += _format_header("📋 Daily Health Report")
    output += _format_score_section(record)

    if record.report is not None:
        source = "Dr. AI" if record.report.source.value == "ai" else "BloomCare guidelines"
        output += f'<p style="color: #6c757d; font-size: 12px;">Report generated by {source}</p>\n\n'
        output += record.report.narrative_text + "\n"
    return output


def format_alert(alert: HighRiskAlert) -> str:
    return (
        '<div style="background: #fff5f5; padding: 20px; border-radius: 8px; '
        'margin-bottom: 20px; border-left: 4px solid #dc3545; box-shadow: 0 2px 4px rgba(0,0,0,0.1);">\n'
        '<h3 style="margin-top: 0; margin-bottom: 10px; color: #dc3545; font-size: 18px; font-weight: 600;">\n'
        '🚨 High Risk Alert\n'
        '</h3>\n'
        f'<p style="margin-bottom: 0; color: #333; font-weight: 700;">{html.escape(alert.message)}</p>\n'
        '</div>\n\n'
    )


def format_reports_history(records: Sequence[DailyReport]) -> str:
    if not records:
        return "_No daily reports yet._"

    lines = [
        "| Date | Week | Blood Pressure | Blood Sugar | Mood | Health Score | Risk |",
        "|---|---|---|---|---|---|---|",
    ]
    for record in records:
        snapshot = record.snapshot
        risk = f"{record.risk_percentage}%"
        if is_high_risk(record.risk_percentage):
            risk = f"🔴 {risk}"
        lines.append(
            f"| {record.created_at.strftime('%m/%d/%Y')} | {snapshot.gestational_week} "
            f"| {snapshot.systolic}/{snapshot.diastolic} | {snapshot.blood_sugar:g} "
            f"| {snapshot.mood} | {record.health_score}/100 | {risk} |"
        )
    return "\n".join(lines)


def format_chat_history(exchanges: Sequence[ChatExchange]) -> str:
    if not exchanges:
        return "_No conversations with Dr. AI yet._"

    output = ""
    for exchange in exchanges:
        output += (
            f"**{exchange.timestamp.strftime('%m/%d/%Y %H:%M')} - You:** {exchange.question}\n\n"
            f"**Dr. AI:** {exchange.answer}\n\n---\n\n"
        )
    return output


def format_feedback_insights(insights: Dict[str, Any]) -> str:
    overall = insights["overall"]
    personal = insights["personal"]

    avg_accuracy = overall["avg_accuracy"]
    accuracy = f"{avg_accuracy:.1f}/5" if avg_accuracy is not None else "no ratings yet"
    question_types = personal["common_question_types"]
    topics = (
        ", ".join(f"{topic} ({count})" for topic, count in sorted(question_types.items(), key=lambda t: -t[1]))
        if question_types
        else "none yet"
    )

    return (
        "### Your conversations\n\n"
        f"- **Questions asked:** {personal['total_interactions']}\n"
        f"- **Frequent topics:** {topics}\n"
        f"- **Preferred answer length:** about {personal['avg_preferred_response_length']:.0f} characters\n\n"
        "### All Dr. AI answers\n\n"
        f"- **Answers given:** {overall['total_responses']}\n"
        f"- **Marked helpful:** {overall['helpful_responses']}\n"
        f"- **Average accuracy:** {accuracy}\n"
    )


def format_ai_status(status: Dict[str, bool]) -> str:
    if not status["configured"]:
        return "⚪ Dr. AI is running on built-in guidance (no AI key configured)."
    if status["reachable"]:
        return "🟢 Dr. AI is connected."
    return "🔴 Dr. AI could not be reached. Built-in guidance will answer until it is back."


def _format_header(title: str) -> str:
    return (
        '<div style="background: linear-gradient(135deg, #f78ca0 0%, #f9748f 50%, #fe9a8b 100%); '
        'color: white; padding: 20px; border-radius: 10px; margin-bottom: 20px;">\n'
        f'<h1 style="margin: 0; font-size: 24px;">{title}</h1>\n'
        '</div>\n\n'
    )


def _format_score_section(record: DailyReport) -> str:
    high_risk = is_high_risk(record.risk_percentage)
    border_color = "#dc3545" if high_risk else "#28a745"
    bg_color = "#fff5f5" if high_risk else "#f0fff4"
    emoji = "🔴" if high_risk else "🟢"

    return (
        f'<div style="background: {bg_color}; padding: 20px; border-radius: 8px; '
        f'margin-bottom: 20px; border-left: 4px solid {border_color}; box-shadow: 0 2px 4px rgba(0,0,0,0.1);">\n'
        f'<p style="margin: 0; color: #333; font-size: 18px;">{emoji} '
        f'<strong>Risk:</strong> {record.risk_percentage}% &nbsp;|&nbsp; '
        f'<strong>Health Score:</strong> {record.health_score}/100 &nbsp;|&nbsp; '
        f'<strong>Week:</strong> {record.snapshot.gestational_week}</p>\n'
        '</div>\n\n'
    )
