from .ai_service import AIService, AIServiceError
from .care_service import PatientNotFoundError, PregnancyCareService
from .chat_responder import ChatResponder
from .report_generator import ReportGenerator
from .risk_scorer import RiskScorer
from .storage_service import StorageService

__all__ = [
    "AIService",
    "AIServiceError",
    "ChatResponder",
    "PatientNotFoundError",
    "PregnancyCareService",
    "ReportGenerator",
    "RiskScorer",
    "StorageService",
]
