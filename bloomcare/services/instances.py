from typing import Optional

from bloomcare.config.llm_config import get_llm

from .ai_service import AIService
from .care_service import PregnancyCareService
from .chat_responder import ChatResponder
from .report_generator import ReportGenerator
from .storage_service import StorageService

_ai_service: Optional[AIService] = None
_ai_checked = False
_storage_service: Optional[StorageService] = None
_report_generator: Optional[ReportGenerator] = None
_chat_responder: Optional[ChatResponder] = None
_care_service: Optional[PregnancyCareService] = None


def get_ai_service() -> Optional[AIService]:
    global _ai_service, _ai_checked
    if not _ai_checked:
        llm = get_llm()
        _ai_service = AIService(llm) if llm is not None else None
        _ai_checked = True
    return _ai_service


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service


def get_report_generator() -> ReportGenerator:
    global _report_generator
    if _report_generator is None:
        _report_generator = ReportGenerator(ai_service=get_ai_service())
    return _report_generator


def get_chat_responder() -> ChatResponder:
    global _chat_responder
    if _chat_responder is None:
        _chat_responder = ChatResponder(ai_service=get_ai_service())
    return _chat_responder


def get_care_service() -> PregnancyCareService:
    global _care_service
    if _care_service is None:
        _care_service = PregnancyCareService(
            storage=get_storage_service(),
            report_generator=get_report_generator(),
            chat_responder=get_chat_responder(),
        )
    return _care_service
