from datetime import date, datetime

import pytest

from bloomcare.models.chat import ChatExchange
from bloomcare.models.health import BloodPressure
from bloomcare.ui.formatters import (
    format_ai_status,
    format_chat_history,
    format_daily_report,
    format_feedback_insights,
    format_reports_history,
)
from bloomcare.ui.processors import CareProcessor

USER_ID = "maria@example.com"


@pytest.fixture
def processor(care_service):
    return CareProcessor(care_service=care_service)


def test_register_and_submit_report(processor):
    status = processor.register(USER_ID, "Maria", "", 10)
    assert "Welcome Maria!" in status

    output = processor.submit_daily_report(USER_ID, 150, 95, 130, 170, "Anxious", "")
    assert "🚨 High Risk Alert" in output
    assert "<strong>Risk:</strong> 70%" in output
    assert "# Health Report for Maria" in output


def test_low_risk_report_has_no_alert(processor):
    processor.register(USER_ID, "Maria", None, 20)
    output = processor.submit_daily_report(USER_ID, 120, 80, 100, 150, "Happy")
    assert "High Risk Alert" not in output
    assert "🟢" in output


def test_invalid_start_date_renders_error(processor):
    output = processor.register(USER_ID, "Maria", "not-a-date", 1)
    assert "❌ Error:" in output


def test_missing_fields_render_warning(processor):
    assert "⚠️ Warning:" in processor.submit_daily_report(USER_ID, None, 80, 100, 150, "Happy")
    assert "⚠️ Warning:" in processor.submit_daily_report("", 120, 80, 100, 150, "Happy")


def test_unknown_user_renders_error(processor):
    output = processor.submit_daily_report("nobody", 120, 80, 100, 150, "Happy")
    assert "❌ Error:" in output
    assert "nobody" in output


def test_chat_and_feedback(processor):
    processor.register(USER_ID, "Maria", None, 12)
    answer, training_id = processor.ask(USER_ID, "Is coffee ok?")
    assert answer.startswith("Maria, you can have some caffeine")
    assert training_id is not None

    assert "Thank you!" in processor.record_feedback(training_id, "helpful", 5, "")
    assert "❌ Error:" in processor.record_feedback(training_id, "amazing", 5, "")
    assert "⚠️ Warning:" in processor.record_feedback(None, "helpful")


def test_history_and_pdf_export(processor, tmp_path):
    processor.register(USER_ID, "Maria", date(2024, 1, 1).isoformat(), 1)
    file_path, status = processor.export_latest_pdf(USER_ID)
    assert file_path is None
    assert "Submit a daily report" in status

    processor.submit_daily_report(USER_ID, 120, 80, 100, 150, "Happy")
    processor.ask(USER_ID, "hello")

    reports, chats = processor.history(USER_ID)
    assert "| Date | Week |" in reports
    assert "**Dr. AI:**" in chats

    file_path, status = processor.export_latest_pdf(USER_ID)
    assert "PDF report ready" in status
    with open(file_path, "rb") as f:
        assert f.read(4) == b"%PDF"


def test_delete_account(processor):
    processor.register(USER_ID, "Maria", None, 10)
    assert "deleted" in processor.delete_account(USER_ID)
    assert "❌ Error:" in processor.delete_account(USER_ID)


def test_empty_history_formatters():
    assert format_reports_history([]) == "_No daily reports yet._"
    assert format_chat_history([]) == "_No conversations with Dr. AI yet._"


def test_chat_history_formatter():
    exchange = ChatExchange(question="Can I eat mango?", answer="Yes!", timestamp=datetime(2024, 5, 1, 9, 30))
    output = format_chat_history([exchange])
    assert "05/01/2024 09:30 - You:** Can I eat mango?" in output
    assert "**Dr. AI:** Yes!" in output


def test_report_formatter_without_narrative(care_service):
    care_service.register_patient(USER_ID, "Maria", current_week=20)
    record, _ = care_service.submit_daily_report(
        USER_ID,
        blood_pressure=BloodPressure(systolic=120, diastolic=80),
        blood_sugar=100,
        weight=150,
        mood="Happy",
    )
    output = format_daily_report(record.model_copy(update={"report": None}))
    assert "Daily Health Report" in output
    assert "Report generated by" not in output


def test_feedback_insights(processor):
    processor.register(USER_ID, "Maria", None, 12)
    _, training_id = processor.ask(USER_ID, "I feel sick")
    processor.record_feedback(training_id, "helpful", 4)

    output = processor.feedback_insights(USER_ID)

    assert "**Questions asked:** 1" in output
    assert "**Frequent topics:** nausea (1)" in output
    assert "**Marked helpful:** 1" in output
    assert "**Average accuracy:** 4.0/5" in output
    assert "⚠️ Warning:" in processor.feedback_insights("")
    assert "❌ Error:" in processor.feedback_insights("nobody")


def test_feedback_insights_formatter_without_ratings():
    output = format_feedback_insights({
        "overall": {"avg_accuracy": None, "total_responses": 0, "helpful_responses": 0, "common_questions": []},
        "personal": {"common_question_types": {}, "avg_preferred_response_length": 500, "total_interactions": 0},
    })
    assert "**Frequent topics:** none yet" in output
    assert "**Average accuracy:** no ratings yet" in output
    assert "about 500 characters" in output


def test_ai_status_without_key(processor):
    assert processor.ai_status() == format_ai_status({"configured": False, "reachable": False})
    assert "no AI key configured" in processor.ai_status()
