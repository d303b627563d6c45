from .chat import ChatExchange, ChatReply, TrainingFeedback
from .health import BloodPressure, HealthSnapshot, PatientProfile, RiskAssessment
from .report import DailyReport, GeneratedReport, HighRiskAlert, ReportSource

__all__ = [
    "BloodPressure",
    "ChatExchange",
    "ChatReply",
    "DailyReport",
    "GeneratedReport",
    "HealthSnapshot",
    "HighRiskAlert",
    "PatientProfile",
    "ReportSource",
    "RiskAssessment",
    "TrainingFeedback",
]
