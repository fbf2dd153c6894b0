from __future__ import annotations

from datetime import datetime
from pathlib import Path
from urllib.parse import unquote

import pytest

from quiz_panel.core.models import AttemptStatus
from quiz_panel.core.result_report import (
    AttemptReport,
    StudentProfile,
    build_share_links,
    build_share_text,
    format_countdown,
    render_result_pdf,
    result_pdf_filename,
    save_result_pdf,
)


@pytest.fixture
def finished_state(active_session):
    for question_id, option in zip(["q1", "q2", "q3", "q4"], [1, 0, 3, 1]):
        active_session.select_answer(question_id, option)
    active_session.submit()
    return active_session.state


def test_report_from_finished_state(finished_state):
    report = AttemptReport.from_state(finished_state)
    assert report.quiz_title == "Olympiad Warmup"
    assert report.score == 15
    assert report.max_score == 20
    assert report.percentage == pytest.approx(75.0)
    assert report.passed
    assert (report.correct_count, report.incorrect_count, report.unanswered_count) == (3, 1, 0)


def test_report_below_pass_mark(active_session):
    active_session.select_answer("q1", 1)
    active_session.submit()
    report = AttemptReport.from_state(active_session.state)
    assert report.percentage == pytest.approx(25.0)
    assert not report.passed


def test_report_requires_finished_attempt(active_session):
    assert active_session.status is AttemptStatus.ACTIVE
    with pytest.raises(RuntimeError):
        AttemptReport.from_state(active_session.state)


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "00:00"), (59, "00:59"), (60, "01:00"), (25 * 60, "25:00"), (3599, "59:59"), (-3, "00:00")],
)
def test_format_countdown(seconds, expected):
    assert format_countdown(seconds) == expected


def test_share_text_and_links(finished_state):
    text = build_share_text(AttemptReport.from_state(finished_state))
    assert text == "I scored 15/20 on Olympiad Warmup! Can you beat me? #ProOlympiad"

    links = build_share_links(text)
    assert set(links) == {"whatsapp", "linkedin", "twitter"}
    assert links["whatsapp"].startswith("https://wa.me/?text=")
    assert "%23ProOlympiad" in links["twitter"]
    assert unquote(links["linkedin"].split("text=", 1)[1]) == text


def test_result_pdf_filename():
    assert result_pdf_filename("Olympiad Warmup") == "Result_Olympiad_Warmup.pdf"


def test_student_profile_defaults():
    profile = StudentProfile()
    assert profile.name_for_report == "Guest"
    assert profile.email_for_report == "N/A"


def test_render_result_pdf(finished_state):
    report = AttemptReport.from_state(finished_state)
    pdf = render_result_pdf(
        report,
        StudentProfile(display_name="Ada <Lovelace>", email="ada@example.com"),
        generated_at=datetime(2024, 5, 1, 9, 30),
    )
    assert pdf.startswith(b"%PDF")


def test_save_result_pdf(tmp_path: Path, finished_state):
    report = AttemptReport.from_state(finished_state)
    saved = save_result_pdf(tmp_path / "reports" / result_pdf_filename(report.quiz_title), report)
    assert saved.exists()
    assert saved.read_bytes().startswith(b"%PDF")
