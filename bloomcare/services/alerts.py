from typing import Optional

from bloomcare.config.constants import HIGH_RISK_THRESHOLD
from bloomcare.models.report import HighRiskAlert


def is_high_risk(risk_percentage: Optional[int]) -> bool:
    return risk_percentage is not None and risk_percentage >= HIGH_RISK_THRESHOLD


def build_high_risk_alert(risk_percentage: Optional[int]) -> Optional[HighRiskAlert]:
    if not is_high_risk(risk_percentage):
        return None
    return HighRiskAlert(
        risk_percentage=risk_percentage,
        message=(
            f"High Risk Alert: Your health risk is {risk_percentage}%. "
            "Please contact your doctor immediately."
        ),
    )
