import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from bloomcare.config.constants import RECENT_REPORTS_LIMIT
from bloomcare.models.chat import ChatExchange, ChatReply, TrainingFeedback
from bloomcare.models.health import BloodPressure, HealthSnapshot, PatientProfile
from bloomcare.models.report import DailyReport, HighRiskAlert
from bloomcare.services.alerts import build_high_risk_alert
from bloomcare.services.chat_responder import ChatResponder
from bloomcare.services.report_generator import ReportGenerator
from bloomcare.services.risk_scorer import RiskScorer
from bloomcare.services.storage_service import StorageService
from bloomcare.utils.pregnancy_utils import clamp_week, current_week, trimester_for_week

logger = logging.getLogger(__name__)


class PatientNotFoundError(Exception):
    """Raised when a request references a user with no stored profile."""


class PregnancyCareService:
    """Request handlers for daily reports and the Dr. AI chat."""

    def __init__(
        self,
        storage: StorageService,
        report_generator: ReportGenerator,
        chat_responder: ChatResponder,
        scorer: Optional[RiskScorer] = None,
    ):
        self.storage = storage
        self.report_generator = report_generator
        self.chat_responder = chat_responder
        self.scorer = scorer or RiskScorer()

    def register_patient(
        self,
        user_id: str,
        name: str,
        pregnancy_start_date: Optional[date] = None,
        current_week: int = 1,
    ) -> PatientProfile:
        if not user_id or not name:
            raise ValueError("Both user_id and name are required to register a patient.")
        patient = PatientProfile(
            user_id=user_id,
            name=name,
            pregnancy_start_date=pregnancy_start_date,
            current_week=clamp_week(current_week),
        )
        logger.info("Registering patient %s", user_id)
        return self.storage.upsert_patient(patient)

    def submit_daily_report(
        self,
        user_id: str,
        blood_pressure: BloodPressure,
        blood_sugar: float,
        weight: float,
        mood: str,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Tuple[DailyReport, Optional[HighRiskAlert]]:
        patient = self._refresh_week(self._require_patient(user_id), today)

        snapshot = HealthSnapshot(
            blood_pressure=blood_pressure,
            blood_sugar=blood_sugar,
            weight=weight,
            mood=mood,
            gestational_week=patient.current_week,
            notes=notes,
        )
        assessment = self.scorer.score(snapshot)
        record = self.storage.add_daily_report(
            DailyReport(user_id=user_id, snapshot=snapshot, assessment=assessment)
        )

        report = self.report_generator.generate_report(patient, snapshot, assessment, report_date=today)
        record = record.model_copy(update={"report": report, "report_generated": True})
        self.storage.update_daily_report(record)

        alert = build_high_risk_alert(record.risk_percentage)
        if alert is not None:
            logger.warning("High risk report for %s: %s%%", user_id, alert.risk_percentage)
        logger.info(
            "Daily report %s stored for %s (health %s, risk %s, source %s)",
            record.id, user_id, record.health_score, record.risk_percentage, report.source.value,
        )
        return record, alert

    def ask(self, user_id: str, message: str, today: Optional[date] = None) -> ChatReply:
        if not message or not message.strip():
            raise ValueError("Please type a question for Dr. AI.")
        patient = self._refresh_week(self._require_patient(user_id), today)
        recent_reports = self.storage.get_daily_reports(user_id, limit=RECENT_REPORTS_LIMIT)

        answer = self.chat_responder.respond(message, patient, recent_reports)
        self.storage.add_chat_exchange(user_id, ChatExchange(question=message, answer=answer))

        latest = recent_reports[0] if recent_reports else None
        context = {
            "current_week": patient.current_week,
            "trimester": trimester_for_week(patient.current_week),
            "health_score": latest.health_score if latest else None,
            "mood": latest.mood if latest else None,
        }
        training_id = self.storage.add_training_record(user_id, message, answer, context)
        return ChatReply(answer=answer, training_id=training_id)

    def record_feedback(self, training_id: int, feedback: TrainingFeedback) -> bool:
        updated = self.storage.update_training_feedback(training_id, feedback)
        if not updated:
            logger.warning("No training record %s to attach feedback to", training_id)
        return updated

    def chat_history(self, user_id: str) -> List[ChatExchange]:
        self._require_patient(user_id)
        return self.storage.get_chat_history(user_id)

    def daily_reports(self, user_id: str, limit: Optional[int] = None) -> List[DailyReport]:
        self._require_patient(user_id)
        return self.storage.get_daily_reports(user_id, limit=limit)

    def feedback_insights(self, user_id: str) -> Dict[str, Any]:
        """Feedback totals across all users plus this user's question patterns."""
        self._require_patient(user_id)
        return {
            "overall": self.storage.analyze_training_data(),
            "personal": self.storage.get_personalized_patterns(user_id),
        }

    def ai_status(self) -> Dict[str, bool]:
        ai_service = self.chat_responder.ai_service or self.report_generator.ai_service
        if ai_service is None:
            return {"configured": False, "reachable": False}
        return {"configured": True, "reachable": ai_service.ping()}

    def get_patient(self, user_id: str) -> PatientProfile:
        return self._require_patient(user_id)

    def delete_account(self, user_id: str):
        self._require_patient(user_id)
        self.storage.delete_user_data(user_id)

    def _require_patient(self, user_id: str) -> PatientProfile:
        patient = self.storage.get_patient(user_id)
        if patient is None:
            raise PatientNotFoundError(f"No patient registered with id '{user_id}'.")
        return patient

    def _refresh_week(self, patient: PatientProfile, today: Optional[date]) -> PatientProfile:
        if patient.pregnancy_start_date is None:
            return patient
        week = current_week(patient.pregnancy_start_date, today)
        if week != patient.current_week:
            self.storage.update_current_week(patient.user_id, week)
            patient = patient.model_copy(update={"current_week": week})
        return patient
