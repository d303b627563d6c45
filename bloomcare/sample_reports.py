"""
Reference PDF health reports for manual testing of the report pipeline.

Usage:
    bloomcare-sample-reports              # low risk + high risk + random
    bloomcare-sample-reports --low        # low risk only
    bloomcare-sample-reports --high       # high risk only
    bloomcare-sample-reports --random     # random values only

Reports are always produced by the deterministic generator, so the output does
not depend on an AI key being configured.
"""

import argparse
import os
import random
from typing import List, Optional

from bloomcare.config.constants import MOOD_OPTIONS
from bloomcare.models.health import BloodPressure, HealthSnapshot, PatientProfile
from bloomcare.models.report import DailyReport
from bloomcare.services.pdf_export import export_report_pdf
from bloomcare.services.report_generator import ReportGenerator
from bloomcare.services.risk_scorer import RiskScorer

LOW_RISK_CASE = {
    "systolic": 120,
    "diastolic": 80,
    "blood_sugar": 100,
    "weight": 140,
    "mood": "Happy",
    "week": 20,
    "description": "Normal blood pressure, controlled blood sugar, good mood",
}

HIGH_RISK_CASE = {
    "systolic": 150,
    "diastolic": 95,
    "blood_sugar": 130,
    "weight": 165,
    "mood": "Anxious",
    "week": 10,
    "description": "Hypertension in early pregnancy with anxiety",
}

_FIRST_NAMES = ["Maria", "Ana", "Julia", "Sarah", "Emily", "Grace", "Laura", "Olivia"]
_LAST_NAMES = ["Silva", "Johnson", "Smith", "Costa", "Brown", "Garcia", "Miller", "Lima"]


def _random_name() -> str:
    return f"{random.choice(_FIRST_NAMES)} {random.choice(_LAST_NAMES)}"


def generate_case_pdf(case: dict, output_file: str, patient_name: Optional[str] = None) -> DailyReport:
    patient = PatientProfile(
        user_id="sample",
        name=patient_name or _random_name(),
        current_week=case["week"],
    )
    snapshot = HealthSnapshot(
        blood_pressure=BloodPressure(systolic=case["systolic"], diastolic=case["diastolic"]),
        blood_sugar=case["blood_sugar"],
        weight=case["weight"],
        mood=case["mood"],
        gestational_week=case["week"],
        notes=case.get("description"),
    )
    assessment = RiskScorer().score(snapshot)
    report = ReportGenerator().generate_report(patient, snapshot, assessment)
    record = DailyReport(
        user_id=patient.user_id,
        snapshot=snapshot,
        assessment=assessment,
        report=report,
        report_generated=True,
    )
    export_report_pdf(record, patient, output_file)

    print(f"PDF generated: {output_file}")
    print(f"   Patient : {patient.name}, week {case['week']}")
    print(f"   BP      : {case['systolic']}/{case['diastolic']} mmHg")
    print(f"   Sugar   : {case['blood_sugar']} mg/dL")
    print(f"   Mood    : {case['mood']}")
    print(f"   Score   : {record.health_score}/100, risk {record.risk_percentage}%")
    return record


def random_case() -> dict:
    return {
        "systolic": random.randint(95, 170),
        "diastolic": random.randint(60, 105),
        "blood_sugar": random.randint(70, 190),
        "weight": random.randint(110, 200),
        "mood": random.choice(MOOD_OPTIONS),
        "week": random.randint(1, 40),
        "description": "Random values",
    }


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Generate reference PDF health reports for the pregnancy report pipeline."
    )
    parser.add_argument("--low", action="store_true", help="Generate only the low risk case")
    parser.add_argument("--high", action="store_true", help="Generate only the high risk case")
    parser.add_argument("--random", action="store_true", help="Generate only a random case")
    parser.add_argument("--output-dir", default=".", help="Directory for the generated PDFs")
    args = parser.parse_args(argv)

    all_cases = not any([args.low, args.high, args.random])
    os.makedirs(args.output_dir, exist_ok=True)

    if args.low or all_cases:
        print(f"\n[LOW RISK] {LOW_RISK_CASE['description']}")
        generate_case_pdf(LOW_RISK_CASE, os.path.join(args.output_dir, "report_low_risk.pdf"))

    if args.high or all_cases:
        print(f"\n[HIGH RISK] {HIGH_RISK_CASE['description']}")
        generate_case_pdf(HIGH_RISK_CASE, os.path.join(args.output_dir, "report_high_risk.pdf"))

    if args.random or all_cases:
        print("\n[RANDOM] Generating report...")
        generate_case_pdf(random_case(), os.path.join(args.output_dir, "report_random.pdf"))


if __name__ == "__main__":
    main()
