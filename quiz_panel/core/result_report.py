"""Score summary, share text and printable PDF for a finished attempt.

The maximum score uses the quiz's declared ``total_questions`` rather than the
number of questions actually graded. The two can drift apart when questions
are added or removed after a quiz is published, which skews the percentage
and the pass/fail verdict. This mirrors how results have always been shown.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path
from urllib.parse import quote
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from quiz_panel.constants.about import REPORT_FOOTER_LEFT, REPORT_FOOTER_RIGHT
from quiz_panel.constants.quiz_constants import PASS_PERCENTAGE, SHARE_HASHTAG
from quiz_panel.core.models import AttemptState, AttemptStatus


@dataclass(frozen=True, slots=True)
class StudentProfile:
    """Who took the attempt, as printed on the report."""

    display_name: str | None = None
    email: str | None = None

    @property
    def name_for_report(self) -> str:
        return self.display_name or "Guest"

    @property
    def email_for_report(self) -> str:
        return self.email or "N/A"


@dataclass(frozen=True, slots=True)
class AttemptReport:
    """Derived figures for a finished attempt."""

    quiz_title: str
    question_count: int
    correct_count: int
    incorrect_count: int
    unanswered_count: int
    score: int
    max_score: int
    percentage: float
    passed: bool

    @classmethod
    def from_state(cls, state: AttemptState) -> "AttemptReport":
        if state.status is not AttemptStatus.FINISHED:
            raise RuntimeError("A result report is only available for a finished attempt.")
        max_score = state.quiz.total_questions * state.quiz.marks_per_question
        percentage = (state.final_score / max_score) * 100 if max_score > 0 else 0.0
        return cls(
            quiz_title=state.quiz.title,
            question_count=len(state.questions),
            correct_count=state.correct_count,
            incorrect_count=state.incorrect_count,
            unanswered_count=state.unanswered_count,
            score=state.final_score,
            max_score=max_score,
            percentage=percentage,
            passed=percentage >= PASS_PERCENTAGE,
        )


def format_countdown(total_seconds: int) -> str:
    """Format seconds as ``MM:SS`` (minutes wrap at 60, as on the attempt screen)."""
    total_seconds = max(0, total_seconds)
    minutes = (total_seconds // 60) % 60
    seconds = total_seconds % 60
    return f"{minutes:02d}:{seconds:02d}"


def build_share_text(report: AttemptReport) -> str:
    return (
        f"I scored {report.score}/{report.max_score} on {report.quiz_title}! "
        f"Can you beat me? {SHARE_HASHTAG}"
    )


def build_share_links(share_text: str) -> dict[str, str]:
    encoded = quote(share_text, safe="")
    return {
        "whatsapp": f"https://wa.me/?text={encoded}",
        "linkedin": f"https://www.linkedin.com/feed/?shareActive=true&text={encoded}",
        "twitter": f"https://twitter.com/intent/tweet?text={encoded}",
    }


def result_pdf_filename(quiz_title: str) -> str:
    return f"Result_{quiz_title.replace(' ', '_')}.pdf"


def render_result_pdf(
    report: AttemptReport,
    profile: StudentProfile | None = None,
    generated_at: datetime | None = None,
) -> bytes:
    """Build the result report as PDF bytes."""
    profile = profile or StudentProfile()
    generated_at = generated_at or datetime.now()

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"Quiz Result - {report.quiz_title}",
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=24,
        alignment=TA_CENTER,
        spaceAfter=6,
    )
    subtitle_style = ParagraphStyle(
        "ReportSubtitle",
        parent=styles["Heading2"],
        fontSize=18,
        textColor=colors.HexColor("#616161"),
        alignment=TA_CENTER,
    )

    elements = [
        Paragraph("QUIZ RESULT REPORT", title_style),
        Paragraph(escape(report.quiz_title), subtitle_style),
        Spacer(1, 0.3 * inch),
        _student_table(report, profile, generated_at),
        Spacer(1, 0.3 * inch),
        _score_table(report),
        Spacer(1, 0.3 * inch),
        _stats_table(report),
        Spacer(1, 0.4 * inch),
        _footer_table(),
    ]
    doc.build(elements)
    return buffer.getvalue()


def save_result_pdf(
    file_path: Path,
    report: AttemptReport,
    profile: StudentProfile | None = None,
) -> Path:
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(render_result_pdf(report, profile))
    return file_path


def _student_table(report: AttemptReport, profile: StudentProfile, generated_at: datetime) -> Table:
    data = [
        [f"Student Name: {profile.name_for_report}", f"Date: {generated_at.strftime('%Y-%m-%d %H:%M')}"],
        [f"Email: {profile.email_for_report}", f"Total Questions: {report.question_count}"],
    ]
    table = Table(data, colWidths=[3.5 * inch, 3 * inch])
    table.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 1, colors.HexColor("#bdbdbd")),
        ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), 11),
        ("TOPPADDING", (0, 0), (-1, -1), 8),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
    ]))
    return table


def _score_table(report: AttemptReport) -> Table:
    banner = "CONGRATULATIONS!" if report.passed else "BETTER LUCK NEXT TIME"
    accent = colors.HexColor("#2e7d32") if report.passed else colors.HexColor("#c62828")
    background = colors.HexColor("#e8f5e9") if report.passed else colors.HexColor("#ffebee")
    data = [
        [banner],
        [f"{report.score:.1f} / {report.max_score:.1f}"],
        [f"Percentage: {report.percentage:.2f}%"],
    ]
    table = Table(data, colWidths=[6.5 * inch])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), background),
        ("TEXTCOLOR", (0, 0), (0, 0), accent),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTNAME", (0, 0), (0, 1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (0, 0), 18),
        ("FONTSIZE", (0, 1), (0, 1), 30),
        ("LEADING", (0, 1), (0, 1), 34),
        ("TOPPADDING", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
    ]))
    return table


def _stats_table(report: AttemptReport) -> Table:
    data = [
        ["Metric", "Count", "Status"],
        ["Correct Answers", str(report.correct_count), "Excellent"],
        ["Incorrect Answers", str(report.incorrect_count), "Needs Improvement"],
        ["Unanswered", str(report.unanswered_count), "-"],
    ]
    table = Table(data, colWidths=[2.5 * inch, 1.5 * inch, 2.5 * inch])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1e88e5")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("GRID", (0, 0), (-1, -1), 1, colors.HexColor("#dddddd")),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    return table


def _footer_table() -> Table:
    table = Table([[REPORT_FOOTER_LEFT, REPORT_FOOTER_RIGHT]], colWidths=[3.25 * inch, 3.25 * inch])
    table.setStyle(TableStyle([
        ("LINEABOVE", (0, 0), (-1, 0), 0.5, colors.HexColor("#9e9e9e")),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("TEXTCOLOR", (0, 0), (-1, -1), colors.HexColor("#616161")),
    ]))
    return table
