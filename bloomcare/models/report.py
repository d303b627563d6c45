from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from bloomcare.models.health import HealthSnapshot, RiskAssessment


class ReportSource(str, Enum):
    AI = "ai"
    FALLBACK = "fallback"


class GeneratedReport(BaseModel):
    risk_percentage: int = Field(..., ge=0, le=100, description="AI supplied or deterministic risk percentage")
    narrative_text: str = Field(..., description="AI prose or the deterministic templated report")
    source: ReportSource = Field(..., description="Which path produced the report")


class DailyReport(BaseModel):
    id: Optional[int] = None
    user_id: str
    created_at: datetime = Field(default_factory=datetime.now)
    snapshot: HealthSnapshot
    assessment: RiskAssessment
    report: Optional[GeneratedReport] = None
    report_generated: bool = False

    @property
    def health_score(self) -> int:
        return self.assessment.health_score

    @property
    def risk_percentage(self) -> int:
        if self.report is not None:
            return self.report.risk_percentage
        return self.assessment.risk_percentage

    @property
    def mood(self) -> str:
        return self.snapshot.mood


class HighRiskAlert(BaseModel):
    risk_percentage: int
    level: str = "high"
    message: str
    created_at: datetime = Field(default_factory=datetime.now)
