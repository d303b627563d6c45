from bloomcare.models.report import DailyReport
from bloomcare.sample_reports import HIGH_RISK_CASE, LOW_RISK_CASE, generate_case_pdf, main
from bloomcare.services.pdf_export import export_report_pdf, to_pdf_text
from bloomcare.services.report_generator import ReportGenerator
from bloomcare.services.risk_scorer import score

from .conftest import make_snapshot


def test_to_pdf_text_strips_markdown_and_unencodable_characters():
    text = to_pdf_text("# Health Report\n**Blood Pressure:** 120/80 (✅ Normal range)\n• Rest — a lot")
    assert text == "Health Report\nBlood Pressure: 120/80 ( Normal range)\n- Rest - a lot"
    text.encode("latin-1")


def test_export_report_pdf_writes_pdf(tmp_path, patient):
    snapshot = make_snapshot(systolic=150, diastolic=95, blood_sugar=130, mood="Anxious", week=10)
    assessment = score(snapshot)
    record = DailyReport(
        user_id=patient.user_id,
        snapshot=snapshot,
        assessment=assessment,
        report=ReportGenerator().generate_report(patient, snapshot, assessment),
        report_generated=True,
    )
    output = tmp_path / "report.pdf"

    assert export_report_pdf(record, patient, str(output)) == str(output)
    assert output.read_bytes().startswith(b"%PDF")


def test_export_without_generated_report(tmp_path, patient):
    snapshot = make_snapshot()
    record = DailyReport(user_id=patient.user_id, snapshot=snapshot, assessment=score(snapshot))
    output = tmp_path / "pending.pdf"
    export_report_pdf(record, patient, str(output))
    assert output.exists()


def test_sample_cases_score_as_labelled(tmp_path):
    low = generate_case_pdf(LOW_RISK_CASE, str(tmp_path / "low.pdf"), patient_name="Ana Lima")
    high = generate_case_pdf(HIGH_RISK_CASE, str(tmp_path / "high.pdf"), patient_name="Ana Lima")
    assert low.risk_percentage == 10
    assert high.risk_percentage >= 61


def test_sample_reports_cli(tmp_path):
    main(["--low", "--output-dir", str(tmp_path)])
    assert (tmp_path / "report_low_risk.pdf").exists()
    assert not (tmp_path / "report_high_risk.pdf").exists()

    main(["--output-dir", str(tmp_path)])
    for name in ("report_low_risk.pdf", "report_high_risk.pdf", "report_random.pdf"):
        assert (tmp_path / name).read_bytes().startswith(b"%PDF")
