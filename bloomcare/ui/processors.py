import html
import logging
import os
import tempfile
import traceback
from datetime import date
from typing import Optional, Tuple

from pydantic import ValidationError

from bloomcare.models.chat import TrainingFeedback
from bloomcare.models.health import BloodPressure
from bloomcare.services.care_service import PatientNotFoundError, PregnancyCareService
from bloomcare.services.instances import get_care_service
from bloomcare.services.pdf_export import export_report_pdf
from bloomcare.ui.formatters import (
    format_ai_status,
    format_chat_history,
    format_daily_report,
    format_feedback_insights,
    format_reports_history,
)

logger = logging.getLogger(__name__)


class CareProcessor:
    """Turns Gradio inputs into care-service calls and renders the results as Markdown."""

    def __init__(self, care_service: Optional[PregnancyCareService] = None):
        self._care_service = care_service

    @property
    def care_service(self) -> PregnancyCareService:
        if self._care_service is None:
            self._care_service = get_care_service()
        return self._care_service

    def register(
        self,
        user_id: Optional[str],
        name: Optional[str],
        start_date: Optional[str],
        current_week: Optional[float],
    ) -> str:
        if not user_id or not name:
            return self._format_warning("Please provide both a user id and your name.")
        try:
            pregnancy_start = date.fromisoformat(start_date.strip()) if start_date else None
            patient = self.care_service.register_patient(
                user_id.strip(),
                name.strip(),
                pregnancy_start_date=pregnancy_start,
                current_week=int(current_week or 1),
            )
        except ValueError as e:
            return self._format_error(f"Invalid registration data. {str(e)}")
        except Exception as e:
            return self._format_exception(e)
        return self._format_success_status(
            f"Welcome {html.escape(patient.name)}! You are registered at week {patient.current_week}."
        )

    def submit_daily_report(
        self,
        user_id: Optional[str],
        systolic_bp: Optional[float],
        diastolic_bp: Optional[float],
        blood_sugar: Optional[float],
        weight: Optional[float],
        mood: Optional[str],
        notes: Optional[str] = None,
    ) -> str:
        if not user_id:
            return self._format_warning("Please enter your user id first.")
        if any(v is None for v in (systolic_bp, diastolic_bp, blood_sugar, weight)) or not mood:
            return self._format_warning("Please fill in blood pressure, blood sugar, weight and mood.")

        try:
            record, alert = self.care_service.submit_daily_report(
                user_id.strip(),
                blood_pressure=BloodPressure(systolic=int(systolic_bp), diastolic=int(diastolic_bp)),
                blood_sugar=float(blood_sugar),
                weight=float(weight),
                mood=mood,
                notes=notes or None,
            )
        except PatientNotFoundError as e:
            return self._format_error(str(e))
        except (ValueError, ValidationError) as e:
            return self._format_error(f"Invalid values in daily report. {str(e)}")
        except Exception as e:
            return self._format_exception(e)
        return format_daily_report(record, alert)

    def ask(self, user_id: Optional[str], message: Optional[str]) -> Tuple[str, Optional[int]]:
        if not user_id:
            return self._format_warning("Please enter your user id first."), None
        if not message or not message.strip():
            return self._format_warning("Please type a question for Dr. AI."), None

        try:
            reply = self.care_service.ask(user_id.strip(), message.strip())
        except PatientNotFoundError as e:
            return self._format_error(str(e)), None
        except Exception as e:
            return self._format_exception(e), None
        return reply.answer, reply.training_id

    def record_feedback(
        self,
        training_id: Optional[int],
        feedback: Optional[str],
        accuracy: Optional[float] = None,
        suggestions: Optional[str] = None,
    ) -> str:
        if training_id is None:
            return self._format_warning("Ask Dr. AI a question before leaving feedback.")
        try:
            training_feedback = TrainingFeedback(
                feedback=feedback,
                accuracy=int(accuracy) if accuracy else None,
                suggestions=suggestions or None,
            )
            saved = self.care_service.record_feedback(int(training_id), training_feedback)
        except (ValueError, ValidationError) as e:
            return self._format_error(f"Invalid feedback. {str(e)}")
        except Exception as e:
            return self._format_exception(e)

        if not saved:
            return self._format_warning("That answer could not be found, feedback was not saved.")
        return self._format_success_status("Thank you! Your feedback helps Dr. AI improve.")

    def history(self, user_id: Optional[str]) -> Tuple[str, str]:
        if not user_id:
            warning = self._format_warning("Please enter your user id first.")
            return warning, warning
        try:
            reports = self.care_service.daily_reports(user_id.strip())
            chats = self.care_service.chat_history(user_id.strip())
        except PatientNotFoundError as e:
            error = self._format_error(str(e))
            return error, error
        except Exception as e:
            error = self._format_exception(e)
            return error, error
        return format_reports_history(reports), format_chat_history(chats)

    def feedback_insights(self, user_id: Optional[str]) -> str:
        if not user_id:
            return self._format_warning("Please enter your user id first.")
        try:
            insights = self.care_service.feedback_insights(user_id.strip())
        except PatientNotFoundError as e:
            return self._format_error(str(e))
        except Exception as e:
            return self._format_exception(e)
        return format_feedback_insights(insights)

    def ai_status(self) -> str:
        try:
            status = self.care_service.ai_status()
        except Exception as e:
            return self._format_exception(e)
        return format_ai_status(status)

    def export_latest_pdf(self, user_id: Optional[str]) -> Tuple[Optional[str], str]:
        if not user_id:
            return None, self._format_warning("Please enter your user id first.")
        try:
            user_id = user_id.strip()
            patient = self.care_service.get_patient(user_id)
            reports = self.care_service.daily_reports(user_id, limit=1)
            if not reports:
                return None, self._format_warning("Submit a daily report before exporting a PDF.")
            record = reports[0]
            output_file = os.path.join(
                tempfile.gettempdir(), f"bloomcare_report_{user_id}_{record.id}.pdf"
            )
            export_report_pdf(record, patient, output_file)
        except PatientNotFoundError as e:
            return None, self._format_error(str(e))
        except Exception as e:
            return None, self._format_exception(e)
        return output_file, self._format_success_status("PDF report ready for download.")

    def delete_account(self, user_id: Optional[str]) -> str:
        if not user_id:
            return self._format_warning("Please enter your user id first.")
        try:
            self.care_service.delete_account(user_id.strip())
        except PatientNotFoundError as e:
            return self._format_error(str(e))
        except Exception as e:
            return self._format_exception(e)
        return self._format_success_status("Your account and all stored data were deleted.")

    def _format_error(self, message: str) -> str:
        return (
            f'<div style="padding: 20px; background: #fff5f5; border-radius: 8px; color: #dc3545;">'
            f'<strong>❌ Error:</strong> {html.escape(message)}</div>'
        )

    def _format_warning(self, message: str) -> str:
        return (
            f'<div style="padding: 20px; background: #fff3cd; border-radius: 8px; color: #856404;">'
            f'<strong>⚠️ Warning:</strong> {html.escape(message)}</div>'
        )

    def _format_success_status(self, message: str) -> str:
        return (
            '<div style="padding: 15px; background: #d4edda; border-radius: 8px; '
            'margin-bottom: 15px; border-left: 4px solid #28a745;">'
            f'<p style="margin: 0; color: #155724;"><strong>✅</strong> {message}</p>'
            '</div>'
        )

    def _format_exception(self, exception: Exception) -> str:
        logger.exception("Unexpected error while processing request")
        error_details = traceback.format_exc()
        return (
            '<div style="padding: 20px; background: #fff5f5; border-radius: 8px; color: #dc3545;">'
            f'<strong>❌ Error processing request:</strong><br>{html.escape(str(exception))}<br><br>'
            f'<details><summary>Technical details</summary><pre>{html.escape(error_details)}</pre></details>'
            '</div>'
        )


_processor = CareProcessor()


def process_registration(*args) -> str:
    return _processor.register(*args)


def process_daily_report(*args) -> str:
    return _processor.submit_daily_report(*args)


def process_chat(*args) -> Tuple[str, Optional[int]]:
    return _processor.ask(*args)


def process_feedback(*args) -> str:
    return _processor.record_feedback(*args)


def process_history(*args) -> Tuple[str, str]:
    return _processor.history(*args)


def process_pdf_export(*args) -> Tuple[Optional[str], str]:
    return _processor.export_latest_pdf(*args)


def process_account_deletion(*args) -> str:
    return _processor.delete_account(*args)


def process_feedback_insights(*args) -> str:
    return _processor.feedback_insights(*args)


def process_ai_status(*args) -> str:
    return _processor.ai_status(*args)
