from __future__ import annotations

from pathlib import Path

import pytest

from quiz_panel.constants.quiz_constants import DEFAULT_DURATION_MINUTES, DEFAULT_MARKS_PER_QUESTION
from quiz_panel.core.models import Question
from quiz_panel.core.quiz_exporter import save_quiz_to_file, serialize_quiz
from quiz_panel.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_text

SAMPLE = """\
TITLE: Warm-up
DURATION: 5
MARKS: 2

Q: What is $2 + 2$?
A: 3
B: 4
C: 5
D: 22
CORRECT: B

---

Q: Which one is prime?
Pick exactly one.
A: 4
B: 6
C: 7
D: 9
CORRECT: c
"""


def test_parse_sample_quiz():
    imported = parse_quiz_text(SAMPLE, quiz_id="warmup")
    quiz = imported.quiz
    assert quiz.id == "warmup"
    assert quiz.title == "Warm-up"
    assert quiz.duration_minutes == 5
    assert quiz.marks_per_question == 2
    assert quiz.total_questions == 2

    first, second = imported.questions
    assert first.id == "warmup-q1"
    assert first.text == "What is $2 + 2$?"
    assert first.options == ("3", "4", "5", "22")
    assert first.correct_option_index == 1
    assert second.text == "Which one is prime?\nPick exactly one."
    assert second.correct_option_index == 2


def test_header_defaults():
    text = "TITLE: Defaults\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n"
    quiz = parse_quiz_text(text, quiz_id="defaults").quiz
    assert quiz.duration_minutes == DEFAULT_DURATION_MINUTES
    assert quiz.marks_per_question == DEFAULT_MARKS_PER_QUESTION
    assert quiz.total_questions == 1


def test_declared_total_is_kept_even_when_it_differs():
    text = "TITLE: Drift\nTOTALQUESTIONS: 10\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n"
    imported = parse_quiz_text(text, quiz_id="drift")
    assert imported.quiz.total_questions == 10
    assert len(imported.questions) == 1


@pytest.mark.parametrize(
    "text, message",
    [
        ("TITLE: Nothing here\n", "any questions"),
        ("Q: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n", "TITLE"),
        ("TITLE: A\nTITLE: B\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n", "more than once"),
        ("TITLE: T\nDURATION: soon\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n", "integer"),
        ("TITLE: T\nDURATION: 0\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: A\n", "positive"),
        ("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\n", "CORRECT"),
        ("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nD: d\nCORRECT: E\n", "one of A"),
        ("TITLE: T\n\nQ: One?\nA: a\nB: b\nC: c\nCORRECT: A\n", "four options"),
    ],
)
def test_invalid_files_raise(text, message):
    with pytest.raises(QuizImportError, match=message):
        parse_quiz_text(text, quiz_id="broken")


def test_load_quiz_from_file_uses_stem_as_id(tmp_path: Path):
    path = tmp_path / "warm_up.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    imported = load_quiz_from_file(path)
    assert imported.quiz.id == "warm_up"
    assert imported.source_path == path
    assert imported.questions[0].id == "warm_up-q1"


def test_exported_file_imports_back(tmp_path: Path):
    original = parse_quiz_text(SAMPLE, quiz_id="warmup")
    saved = save_quiz_to_file(tmp_path / "nested" / "warmup.txt", original.quiz, original.questions)

    reloaded = load_quiz_from_file(saved)

    assert reloaded.quiz == original.quiz
    assert reloaded.questions == original.questions


def test_serialize_writes_header_and_separators():
    imported = parse_quiz_text(SAMPLE, quiz_id="warmup")
    text = serialize_quiz(imported.quiz, imported.questions)
    assert text.startswith("TITLE: Warm-up\nDURATION: 5\nMARKS: 2\nTOTALQUESTIONS: 2\n\nQ: ")
    assert "\n\n---\n\n" in text
    assert "CORRECT: C" in text


def test_export_rejects_empty_quiz(tmp_path: Path):
    imported = parse_quiz_text(SAMPLE, quiz_id="warmup")
    with pytest.raises(ValueError):
        save_quiz_to_file(tmp_path / "empty.txt", imported.quiz, [])


def test_bundled_quizzes_parse():
    directory = Path(__file__).resolve().parents[1] / "quiz_panel" / "data" / "quizzes"
    files = sorted(directory.glob("*.txt"))
    assert files
    for path in files:
        imported = load_quiz_from_file(path)
        assert imported.questions


def test_escaped_lines_are_literal_text():
    text = (
        "TITLE: Escapes\n\n"
        "Q: First paragraph\n\\\n\\B: looks like an option\n\\---\n\\frac{1}{2}\n"
        "A: a\nB: b\nC: c\nD: d\nCORRECT: D\n"
    )
    question = parse_quiz_text(text, quiz_id="esc").questions[0]
    assert question.text == "First paragraph\n\nB: looks like an option\n---\n\\frac{1}{2}"
    assert question.correct_option_index == 3


def test_serialize_escapes_blank_and_marker_lines():
    imported = parse_quiz_text(SAMPLE, quiz_id="warmup")
    question = imported.questions[0]
    paragraph = Question(
        id=question.id,
        text="Intro\n\nC: not an option",
        options=question.options,
        correct_option_index=question.correct_option_index,
    )
    text = serialize_quiz(imported.quiz, [paragraph])
    assert "Q: Intro\n\\\n\\C: not an option\nA: 3" in text
    assert parse_quiz_text(text, quiz_id="warmup").questions == [paragraph]
