import logging
import re

from fpdf import FPDF, XPos, YPos

from bloomcare.models.health import PatientProfile
from bloomcare.models.report import DailyReport
from bloomcare.services.alerts import is_high_risk
from bloomcare.services.report_generator import DISCLAIMER
from bloomcare.utils.pregnancy_utils import trimester_for_week

logger = logging.getLogger(__name__)

_NL = {"new_x": XPos.LMARGIN, "new_y": YPos.NEXT}
_CONT = {"new_x": XPos.RIGHT, "new_y": YPos.TOP}

_REPLACEMENTS = {
    "•": "-",
    "–": "-",
    "—": "-",
    "’": "'",
    "‘": "'",
    "“": '"',
    "”": '"',
    "…": "...",
}
_HEADING = re.compile(r"^#{1,6}\s*", re.MULTILINE)
_EMPHASIS = re.compile(r"\*{1,2}([^*]+)\*{1,2}")


def to_pdf_text(text: str) -> str:
    """Strip markdown markup and anything the core PDF fonts cannot encode."""
    text = _HEADING.sub("", text or "")
    text = _EMPHASIS.sub(r"\1", text)
    for source, target in _REPLACEMENTS.items():
        text = text.replace(source, target)
    text = text.encode("latin-1", "ignore").decode("latin-1")
    return re.sub(r"[ \t]+\n", "\n", text).strip()


class _ReportPDF(FPDF):
    def header(self):
        self.set_font("Helvetica", "B", 12)
        self.cell(0, 10, "BLOOMCARE PREGNANCY HEALTH REPORT", 0, **_NL, align="C")
        self.set_font("Helvetica", "", 9)
        self.cell(0, 5, "Daily self-reported metrics and Dr. AI analysis", 0, **_NL, align="C")
        self.ln(10)

    def chapter_title(self, title: str):
        self.set_font("Helvetica", "B", 12)
        self.set_fill_color(255, 220, 230)
        self.cell(0, 6, title, 0, **_NL, align="L", fill=True)
        self.ln(4)

    def labeled_value(self, label: str, value: str, ref: str = ""):
        self.set_font("Helvetica", "", 11)
        self.cell(70, 8, label, 0, **_CONT)
        self.set_font("Helvetica", "B", 11)
        self.cell(45, 8, value, 0, **_CONT)
        if ref:
            self.set_font("Helvetica", "I", 10)
            self.cell(0, 8, ref, 0, **_NL)
        else:
            self.ln(8)


def export_report_pdf(record: DailyReport, patient: PatientProfile, output_file: str) -> str:
    """Render a stored daily report to a PDF file and return its path."""
    snapshot = record.snapshot
    week = snapshot.gestational_week

    pdf = _ReportPDF()
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(0, 8, to_pdf_text(f"PATIENT: {patient.name}"), 0, **_NL)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 8, f"PREGNANCY WEEK: {week} (Trimester {trimester_for_week(week)})", 0, **_NL)
    pdf.cell(0, 8, f"REPORT DATE: {record.created_at.strftime('%m/%d/%Y')}", 0, **_NL)
    pdf.ln(5)

    pdf.chapter_title("1. DAILY METRICS")
    pdf.labeled_value("Blood Pressure:", f"{snapshot.systolic}/{snapshot.diastolic} mmHg", "(Ref: < 140/90)")
    pdf.labeled_value("Blood Sugar:", f"{snapshot.blood_sugar:g} mg/dL", "(Ref: <= 140 mg/dL)")
    pdf.labeled_value("Weight:", f"{snapshot.weight:g} lbs")
    pdf.labeled_value("Mood:", to_pdf_text(snapshot.mood))
    pdf.ln(5)

    pdf.chapter_title("2. RISK ASSESSMENT")
    pdf.labeled_value("Health Score:", f"{record.health_score}/100")
    pdf.labeled_value(
        "Risk Percentage:",
        f"{record.risk_percentage}%",
        "(HIGH RISK)" if is_high_risk(record.risk_percentage) else "",
    )
    pdf.ln(5)

    if record.report is not None:
        pdf.chapter_title("3. HEALTH REPORT")
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, to_pdf_text(record.report.narrative_text), **_NL)
        pdf.ln(5)

    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(120, 120, 120)
    pdf.multi_cell(0, 5, to_pdf_text(DISCLAIMER))

    pdf.output(output_file)
    logger.info("PDF report written to %s", output_file)
    return output_file
