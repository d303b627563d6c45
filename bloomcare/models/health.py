from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from bloomcare.config.constants import HIGH_RISK_THRESHOLD


class BloodPressure(BaseModel):
    systolic: int = Field(..., description="Systolic blood pressure in mmHg")
    diastolic: int = Field(..., description="Diastolic blood pressure in mmHg")


class HealthSnapshot(BaseModel):
    """Daily metrics supplied by the caller. The week is expected already clamped to 1-40."""

    blood_pressure: BloodPressure
    blood_sugar: float = Field(..., description="Blood sugar in mg/dL")
    weight: float = Field(..., description="Weight in lbs")
    mood: str = Field(..., description="Self-reported mood, e.g. Happy, Stressed, Anxious, Tired")
    gestational_week: int = Field(..., description="Current pregnancy week")
    notes: Optional[str] = Field(default=None, description="Free text notes")

    @property
    def systolic(self) -> int:
        return self.blood_pressure.systolic

    @property
    def diastolic(self) -> int:
        return self.blood_pressure.diastolic


class RiskAssessment(BaseModel):
    health_score: int = Field(..., ge=0, le=100, description="Coarse wellness gauge shown in the UI")
    risk_percentage: int = Field(..., ge=0, le=100, description="Risk value that drives high-risk alerts")

    @property
    def is_high_risk(self) -> bool:
        return self.risk_percentage >= HIGH_RISK_THRESHOLD


class PatientProfile(BaseModel):
    user_id: str
    name: str
    pregnancy_start_date: Optional[date] = None
    current_week: int = 1
